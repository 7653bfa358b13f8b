"""Trigger logging API endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Request, status

from desviciar.config import settings
from desviciar.core.dependencies import get_current_uid
from desviciar.core.firebase import FirebaseContext, get_firebase
from desviciar.core.rate_limit import limiter
from desviciar.services.trigger_service import TriggerService
from desviciar.schemas.progress import TriggerLogCreate, TriggerLogResponse

router = APIRouter(prefix="/triggers", tags=["triggers"])


@router.post("", response_model=TriggerLogResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.TRIGGER_LOG_RATE_LIMIT)
def log_trigger(
    request: Request,
    trigger_data: TriggerLogCreate,
    uid: str = Depends(get_current_uid),
    firebase: FirebaseContext = Depends(get_firebase)
):
    """
    Log a craving

    - **emotion**: what the user was feeling
    - **context**: where or when it happened
    """
    try:
        service = TriggerService(firebase)
        return service.log_trigger(uid, trigger_data)

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error logging trigger: {str(e)}"
        )

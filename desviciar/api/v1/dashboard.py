"""Dashboard API endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status

from desviciar.core.dependencies import get_current_uid
from desviciar.core.firebase import FirebaseContext, get_firebase
from desviciar.services.dashboard_service import DashboardService
from desviciar.schemas.dashboard import DashboardResponse

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    uid: str = Depends(get_current_uid),
    firebase: FirebaseContext = Depends(get_firebase)
):
    """
    Get the streak summary for the current user

    Returns:
    - Streak start and length in days
    - Hours recovered and the matching milestone message
    - Subscription status
    """
    try:
        service = DashboardService(firebase)
        return service.get_summary(uid)

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching dashboard: {str(e)}"
        )

"""Progress API endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status, Query

from desviciar.core.dependencies import get_current_uid
from desviciar.core.firebase import FirebaseContext, get_firebase
from desviciar.services.progress_service import ProgressService
from desviciar.schemas.progress import ProgressResponse

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=ProgressResponse)
def get_progress(
    window_size: int = Query(7, description="Days to chart: 7, 15, 30 or 90"),
    uid: str = Depends(get_current_uid),
    firebase: FirebaseContext = Depends(get_firebase)
):
    """
    Get the progress chart for the current user

    Returns one point per day of the window since the streak started,
    the average completion, the number of perfect days and the trigger
    insight for the same window.
    """
    try:
        service = ProgressService(firebase)
        return service.get_progress(uid, window_size)

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error fetching progress: {str(e)}"
        )

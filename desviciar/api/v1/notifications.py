"""Notifications API endpoints (FCM)"""
from fastapi import APIRouter, Depends, HTTPException, status

from desviciar.core.dependencies import get_current_uid
from desviciar.core.firebase import FirebaseContext, get_firebase
from desviciar.services.fcm_service import FCMService
from desviciar.schemas.notification import RegisterFCMTokenRequest, RegisterFCMTokenResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/token", response_model=RegisterFCMTokenResponse, status_code=status.HTTP_201_CREATED)
def register_fcm_token(
    token_data: RegisterFCMTokenRequest,
    uid: str = Depends(get_current_uid),
    firebase: FirebaseContext = Depends(get_firebase)
):
    """
    Register FCM token for push notifications

    - **fcm_token**: FCM registration token from the browser

    Replaces any previous token and marks the user as active.
    """
    try:
        service = FCMService(firebase)
        service.register_token(uid, token_data.fcm_token)

        return RegisterFCMTokenResponse(message="FCM token registered successfully")

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error registering FCM token: {str(e)}"
        )


@router.delete("/token", status_code=status.HTTP_204_NO_CONTENT)
def remove_fcm_token(
    uid: str = Depends(get_current_uid),
    firebase: FirebaseContext = Depends(get_firebase)
):
    """
    Remove the FCM token for the current user

    Use this when the user revokes notification permission or logs out.
    """
    try:
        service = FCMService(firebase)
        service.remove_token(uid)

        return None

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error removing FCM token: {str(e)}"
        )

"""FastAPI dependencies: authentication and service wiring"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth

from desviciar.core.firebase import FirebaseContext, get_firebase
from desviciar.services.billing_gateway import BillingGateway, get_billing_gateway
from desviciar.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_uid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    firebase: FirebaseContext = Depends(get_firebase)
) -> str:
    """Verify the Firebase ID token and return the caller's uid"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        decoded = firebase.auth.verify_id_token(credentials.credentials)
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError, ValueError) as e:
        logger.warning(f"Rejected ID token: {type(e).__name__}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return decoded["uid"]


def get_subscription_service(
    firebase: FirebaseContext = Depends(get_firebase),
    billing: BillingGateway = Depends(get_billing_gateway)
) -> SubscriptionService:
    return SubscriptionService(firebase, billing)

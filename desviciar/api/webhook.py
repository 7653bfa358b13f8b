"""Stripe webhook endpoint"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from desviciar.core.dependencies import get_subscription_service
from desviciar.schemas.billing import WebhookAck
from desviciar.services.billing_gateway import (
    BillingGateway,
    WebhookVerificationError,
    get_billing_gateway,
)
from desviciar.services.subscription_service import SubscriptionService, WebhookOutcome

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"])


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    billing: BillingGateway = Depends(get_billing_gateway),
    service: SubscriptionService = Depends(get_subscription_service)
):
    """
    Receive Stripe events and sync subscription status to Firestore

    - **400**: signature missing or invalid; nothing is written
    - **200**: event handled, skipped or ignored
    - **500**: processing failed after verification; Stripe will redeliver
      and the sync is safe to replay
    """
    # Signature is computed over the raw bytes, never the parsed JSON
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        event = billing.construct_event(payload, signature)
    except WebhookVerificationError as e:
        logger.error(f"Webhook signature verification failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Webhook Error: {str(e)}"
        )

    try:
        outcome = service.handle_event(event)
    except Exception:
        logger.error("Internal webhook error", exc_info=True)
        outcome = WebhookOutcome.FAILED

    if outcome == WebhookOutcome.FAILED:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"received": False, "detail": "Internal Server Error"},
        )

    return WebhookAck(received=True, outcome=outcome.value)

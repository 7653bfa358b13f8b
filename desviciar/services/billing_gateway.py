"""Stripe access for the webhook handler"""
import json
import logging
from typing import Any, Dict, Optional

import stripe

from desviciar.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class WebhookVerificationError(Exception):
    """Signature missing, malformed or not matching the webhook secret"""


class BillingGateway:
    """
    Thin wrapper over the Stripe SDK calls the reconciler needs.

    Everything returned is plain dicts so the reconciler never touches
    StripeObject instances.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def construct_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Verify the webhook signature and parse the event

        Raises:
            WebhookVerificationError: If the signature or secret is missing,
                the signature does not match the raw payload or the payload
                is not JSON
        """
        secret = self.settings.STRIPE_WEBHOOK_SECRET
        if not signature or not secret:
            raise WebhookVerificationError("Missing Stripe Signature or Secret")

        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")

        try:
            stripe.WebhookSignature.verify_header(
                payload,
                signature,
                secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
            return json.loads(payload)
        except stripe.SignatureVerificationError as e:
            raise WebhookVerificationError(str(e)) from e
        except ValueError as e:
            raise WebhookVerificationError(f"Invalid payload: {e}") from e

    def retrieve_customer(self, customer_id: str) -> Dict[str, Any]:
        """
        Fetch a Stripe customer (used to recover the email on subscription events)

        Deleted customers come back without an email.
        """
        customer = stripe.Customer.retrieve(customer_id, api_key=self.settings.STRIPE_SECRET_KEY)
        return {
            "id": getattr(customer, "id", None) or customer_id,
            "email": getattr(customer, "email", None),
        }


_gateway: Optional[BillingGateway] = None


def get_billing_gateway() -> BillingGateway:
    """FastAPI dependency returning the process-wide billing gateway"""
    global _gateway
    if _gateway is None:
        _gateway = BillingGateway()
    return _gateway

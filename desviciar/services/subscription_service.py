"""Subscription reconciliation between Stripe and Firebase"""
import enum
import logging
from typing import Any, Dict, Optional

from firebase_admin import auth, firestore

from desviciar.core.firebase import FirebaseContext
from desviciar.models.user import USERS_COLLECTION, SubscriptionStatus
from desviciar.services.billing_gateway import BillingGateway

logger = logging.getLogger(__name__)


class WebhookOutcome(str, enum.Enum):
    """Result of processing one verified webhook event"""
    HANDLED = "handled"    # status synced to Firestore
    IGNORED = "ignored"    # event type we do not act on
    SKIPPED = "skipped"    # relevant event but no email to sync
    FAILED = "failed"      # lookup or write failed, Stripe should redeliver


class SubscriptionService:
    """
    Keeps users/{uid}.subscription_status in step with Stripe.

    Every write is a merge upsert keyed by the Firebase uid resolved from the
    customer's email, so replaying an event leaves the same end state.
    """

    # Events whose status is fixed regardless of the payload
    PAYMENT_SUCCEEDED_EVENTS = (
        "checkout.session.completed",
        "invoice.payment_succeeded",
        "invoice.paid",
    )
    PAYMENT_FAILED_EVENT = "invoice.payment_failed"
    SUBSCRIPTION_UPDATED_EVENT = "customer.subscription.updated"
    SUBSCRIPTION_DELETED_EVENT = "customer.subscription.deleted"

    def __init__(self, firebase: FirebaseContext, billing: BillingGateway):
        self.firebase = firebase
        self.billing = billing

    def resolve_uid(self, email: str) -> str:
        """
        Find the Firebase uid for an email, creating the user if needed

        New users are created with a verified email since paying through
        Stripe already proves control of the address. Losing a creation race
        to a concurrent delivery of the same event is not an error: the
        winner's record is looked up instead.
        """
        auth_client = self.firebase.auth
        try:
            return auth_client.get_user_by_email(email).uid
        except auth.UserNotFoundError:
            pass

        logger.info(f"Provisioning new Firebase user for {email}")
        try:
            user = auth_client.create_user(email=email, email_verified=True)
            logger.info(f"Created Firebase user {user.uid} from billing event")
            return user.uid
        except auth.EmailAlreadyExistsError:
            logger.info(f"User {email} was created concurrently, reusing it")
            return auth_client.get_user_by_email(email).uid

    def sync_subscription(
        self,
        email: str,
        status: str,
        customer_id: Optional[str] = None
    ) -> bool:
        """
        Upsert the subscription status for the user owning this email

        Args:
            email: Customer email, the join key with Firebase Auth
            status: New subscription status
            customer_id: Stripe customer id, written only when provided

        Returns:
            True if synced, False if the identity or document write failed
        """
        try:
            uid = self.resolve_uid(email)

            update_data: Dict[str, Any] = {
                "subscription_status": status,
                "updated_at": firestore.SERVER_TIMESTAMP,
                "email": email,
            }
            if customer_id:
                update_data["stripe_customer_id"] = customer_id

            # merge keeps onboarding data and every other profile field
            self.firebase.db.collection(USERS_COLLECTION).document(uid).set(update_data, merge=True)

            logger.info(f"Subscription synced: {email} (uid {uid}) -> {status}")
            return True

        except Exception as e:
            logger.error(f"Failed to sync subscription for {email}: {str(e)}")
            return False

    def handle_event(self, event: Dict[str, Any]) -> WebhookOutcome:
        """
        Apply a verified Stripe event

        Returns:
            The outcome; FAILED means nothing consistent was written and the
            event should be redelivered
        """
        event_type = event["type"]
        obj = event["data"]["object"]

        if event_type in self.PAYMENT_SUCCEEDED_EVENTS:
            email = self._payment_email(obj)
            return self._sync_or_skip(
                event_type,
                email,
                SubscriptionStatus.ACTIVE.value,
                self._customer_id(obj),
            )

        if event_type == self.PAYMENT_FAILED_EVENT:
            return self._sync_or_skip(
                event_type,
                obj.get("customer_email"),
                SubscriptionStatus.PAST_DUE.value,
            )

        if event_type in (self.SUBSCRIPTION_UPDATED_EVENT, self.SUBSCRIPTION_DELETED_EVENT):
            if event_type == self.SUBSCRIPTION_DELETED_EVENT:
                status = SubscriptionStatus.CANCELED.value
            else:
                status = obj.get("status")

            customer_id = self._customer_id(obj)
            if not customer_id or not status:
                logger.warning(f"{event_type} without customer or status, skipping")
                return WebhookOutcome.SKIPPED

            try:
                customer = self.billing.retrieve_customer(customer_id)
            except Exception as e:
                logger.error(f"Could not retrieve customer {customer_id} for {event_type}: {str(e)}")
                return WebhookOutcome.FAILED

            return self._sync_or_skip(
                event_type,
                customer.get("email"),
                status,
                customer.get("id") or customer_id,
            )

        logger.info(f"Ignoring Stripe event: {event_type}")
        return WebhookOutcome.IGNORED

    def _sync_or_skip(
        self,
        event_type: str,
        email: Optional[str],
        status: str,
        customer_id: Optional[str] = None
    ) -> WebhookOutcome:
        if not email:
            logger.warning(f"{event_type} has no customer email, skipping")
            return WebhookOutcome.SKIPPED

        if self.sync_subscription(email, status, customer_id):
            return WebhookOutcome.HANDLED
        return WebhookOutcome.FAILED

    @staticmethod
    def _payment_email(obj: Dict[str, Any]) -> Optional[str]:
        details = obj.get("customer_details") or {}
        return details.get("email") or obj.get("customer_email")

    @staticmethod
    def _customer_id(obj: Dict[str, Any]) -> Optional[str]:
        customer = obj.get("customer")
        # Expanded customers arrive as objects
        if isinstance(customer, dict):
            return customer.get("id")
        return customer

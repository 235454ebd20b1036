# =============================================================================
# core/services/payment_service.py - Stripe Checkout and Subscriptions
# =============================================================================
# Publishing is unlocked by one of two plans (see core/services/plans.py):
# - per-campaign: one-time Checkout payment that publishes one campaign
# - pro-subscription: monthly subscription that sets the profile tier to pro
#
# Fulfilment runs from two places, the browser returning from Checkout
# (confirm_checkout) and the Stripe webhook. Both paths are idempotent per
# Checkout session: the payments row written on first fulfilment is checked
# before anything else happens.
# =============================================================================

import logging
from typing import Any

import stripe

from app.config import settings
from app.exceptions import CheckoutError, PaymentConfigurationError
from core.models.payment import PlanId
from core.models.profile import SubscriptionStatus, is_paid_tier
from core.services.campaign_service import CampaignService
from core.services.plans import get_plan, stripe_price_id
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

EVENT_CHECKOUT_COMPLETED = "checkout.session.completed"
EVENT_SUBSCRIPTION_DELETED = "customer.subscription.deleted"


class PaymentError(ApplicationError):
    """A Stripe call failed or returned something we can't fulfil."""

    def __init__(self, message: str, code: str = "PAYMENT_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


def _configure_stripe() -> None:
    """Set the API key, or fail if payments aren't configured."""
    if not settings.stripe_enabled:
        raise PaymentConfigurationError("STRIPE_SECRET_KEY")
    stripe.api_key = settings.STRIPE_SECRET_KEY


def _as_dict(obj: Any) -> dict[str, Any]:
    """
    Plain dict copy of a Stripe object.

    StripeObject no longer subclasses dict in current releases, so `.get`
    is not available on sessions and events.
    """
    if hasattr(obj, "to_dict"):
        obj = obj.to_dict()
    return {
        key: _as_dict(value) if hasattr(value, "to_dict") or isinstance(value, dict) else value
        for key, value in dict(obj).items()
    }


def _payment_description(plan_id: PlanId, metadata: dict[str, Any]) -> str:
    if plan_id == PlanId.PRO_SUBSCRIPTION:
        return "Pro Subscription - Monthly"
    theme = metadata.get("campaign_theme") or "Campaign"
    return f"Campaign Publishing - {theme}"


class PaymentService:
    """Service wrapping Stripe Checkout, the customer portal and fulfilment."""

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @staticmethod
    def create_checkout(
        plan_id: PlanId,
        user_id: str,
        email: str | None,
        campaign: dict[str, Any] | None = None,
    ) -> dict[str, str]:
        """
        Create a Stripe Checkout Session for a plan.

        Args:
            plan_id: per-campaign or pro-subscription
            user_id: Paying user
            email: Prefilled customer email
            campaign: Campaign to publish once paid (required for per-campaign)

        Returns:
            {"session_id": ..., "url": ...}

        Raises:
            PaymentConfigurationError: Stripe or the plan's price isn't configured
            CheckoutError: Missing campaign for per-campaign
            PaymentError: Stripe rejected the request
        """
        _configure_stripe()
        plan = get_plan(plan_id)

        price_id = stripe_price_id(plan.id)
        if not price_id:
            missing = (
                "STRIPE_PRICE_PRO_SUBSCRIPTION"
                if plan.id == PlanId.PRO_SUBSCRIPTION
                else "STRIPE_PRICE_PER_CAMPAIGN"
            )
            raise PaymentConfigurationError(missing)

        if plan.id == PlanId.PER_CAMPAIGN and not campaign:
            raise CheckoutError("Select a campaign to publish with this plan")

        metadata = {"user_id": str(user_id), "plan": plan.id.value}
        if campaign:
            metadata.update({
                "campaign_id": str(campaign["id"]),
                "campaign_type": campaign.get("content_type") or "",
                "campaign_theme": campaign.get("theme") or "",
            })

        params: dict[str, Any] = {
            "mode": plan.mode,
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "metadata": metadata,
            "success_url": settings.CHECKOUT_SUCCESS_URL,
            "cancel_url": settings.CHECKOUT_CANCEL_URL,
            "allow_promotion_codes": True,
            "billing_address_collection": "required",
        }
        if email:
            params["customer_email"] = email
        if plan.mode == "subscription":
            params["subscription_data"] = {"metadata": metadata}

        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout error: {e}")
            raise PaymentError(
                "Could not create checkout session",
                code="CHECKOUT_CREATE_FAILED",
                suggestion="Payment failed. Please try again.",
                details={"plan": plan.id.value},
            )

        logger.info(f"Created {plan.id.value} checkout {session.id} for user {user_id}")
        return {"session_id": session.id, "url": session.url}

    @staticmethod
    def confirm_checkout(session_id: str, user_id: str) -> dict[str, Any]:
        """
        Confirm a Checkout Session after the browser returns from Stripe.

        Raises:
            CheckoutError: Session belongs to somebody else or isn't paid
            PaymentError: Stripe couldn't retrieve the session
        """
        _configure_stripe()

        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe confirm session error: {e}")
            raise PaymentError(
                "Could not verify checkout session",
                code="CHECKOUT_RETRIEVE_FAILED",
                details={"session_id": session_id},
            )

        session = _as_dict(session)
        metadata = session.get("metadata") or {}
        if metadata.get("user_id", "") != str(user_id):
            raise CheckoutError("Forbidden", status_code=403, details={"session_id": session_id})

        return PaymentService.fulfil_checkout(session)

    @staticmethod
    def fulfil_checkout(session: Any) -> dict[str, Any]:
        """
        Apply a paid Checkout Session.

        per-campaign publishes the campaign. pro-subscription upgrades the
        profile to pro and publishes the campaign when one was attached.
        A payments row is written either way.

        Returns:
            {"success", "plan", "campaign_id", "subscription_status", "already_processed"}

        Raises:
            CheckoutError: Missing metadata or unpaid session
        """
        session = _as_dict(session)
        metadata = session.get("metadata") or {}
        session_id = session.get("id", "")
        user_id = metadata.get("user_id", "")
        campaign_id = metadata.get("campaign_id") or None
        payment_status = (session.get("payment_status") or "").lower()
        session_status = (session.get("status") or "").lower()

        try:
            plan = get_plan(metadata.get("plan", ""))
        except ValueError:
            raise CheckoutError("Unknown plan in checkout session", details={"session_id": session_id})

        if not user_id:
            raise CheckoutError("Missing checkout metadata", details={"session_id": session_id})
        if payment_status != "paid" and session_status != "complete":
            raise CheckoutError("Checkout session is not paid yet", details={"session_id": session_id})

        result: dict[str, Any] = {
            "success": True,
            "plan": plan.id,
            "campaign_id": campaign_id,
            "subscription_status": None,
            "already_processed": False,
        }

        if SupabaseClient.fetch_payment_by_session(session_id):
            logger.info(f"Checkout session {session_id} already processed")
            result["already_processed"] = True
            return result

        if plan.id == PlanId.PRO_SUBSCRIPTION:
            ProfileService.set_subscription(
                user_id,
                SubscriptionStatus.PRO,
                customer_id=session.get("customer"),
                subscription_id=session.get("subscription"),
            )
            result["subscription_status"] = SubscriptionStatus.PRO.value

        if campaign_id:
            CampaignService.mark_published(campaign_id)

        # Both writes above are idempotent; the unique stripe_session_id decides
        # which of confirm and webhook records the payment
        recorded = SupabaseClient.insert_payment({
            "user_id": user_id,
            "campaign_id": campaign_id,
            "plan": plan.id.value,
            "stripe_session_id": session_id,
            "amount": session.get("amount_total") or plan.price,
            "currency": session.get("currency") or plan.currency,
            "status": "succeeded",
            "description": _payment_description(plan.id, metadata),
        })

        if recorded is None:
            logger.info(f"Checkout session {session_id} recorded concurrently")
            result["already_processed"] = True
            return result

        logger.info(f"Fulfilled {plan.id.value} checkout {session_id} for user {user_id}")
        return result

    # -------------------------------------------------------------------------
    # Webhook
    # -------------------------------------------------------------------------

    @staticmethod
    def handle_webhook(payload: bytes, signature: str) -> dict[str, Any]:
        """
        Verify and apply a Stripe webhook event.

        Raises:
            PaymentConfigurationError: No webhook secret configured
            PaymentError: Invalid payload or signature
        """
        _configure_stripe()
        if not settings.STRIPE_WEBHOOK_SECRET:
            # Unsigned events could be forged
            raise PaymentConfigurationError("STRIPE_WEBHOOK_SECRET")

        try:
            event = stripe.Webhook.construct_event(
                payload, signature, settings.STRIPE_WEBHOOK_SECRET
            )
        except ValueError:
            raise PaymentError("Invalid payload", code="WEBHOOK_INVALID_PAYLOAD")
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature verification failed: {e}")
            raise PaymentError("Invalid signature", code="WEBHOOK_INVALID_SIGNATURE")

        event = _as_dict(event)
        event_type = event.get("type")
        obj = event["data"]["object"]

        if event_type == EVENT_CHECKOUT_COMPLETED:
            try:
                result = PaymentService.fulfil_checkout(obj)
            except CheckoutError as e:
                logger.warning(f"Webhook checkout session {obj.get('id', '')} not processed: {e.message}")
                return {"received": True, "processed": False}
            return {"received": True, "processed": not result["already_processed"]}

        if event_type == EVENT_SUBSCRIPTION_DELETED:
            PaymentService.handle_subscription_deleted(obj)
            return {"received": True, "processed": True}

        logger.debug(f"Ignoring Stripe event: {event_type}")
        return {"received": True, "processed": False}

    @staticmethod
    def handle_subscription_deleted(subscription: Any) -> None:
        """Drop the profile owning a cancelled subscription back to free."""
        subscription = _as_dict(subscription)
        metadata = subscription.get("metadata") or {}
        user_id = metadata.get("user_id")
        if not user_id:
            profile = SupabaseClient.fetch_user_by_customer(subscription.get("customer", ""))
            user_id = profile["id"] if profile else None

        if not user_id:
            logger.warning(f"No profile for deleted subscription {subscription.get('id', '')}")
            return

        ProfileService.set_subscription(user_id, SubscriptionStatus.FREE, subscription_id="")

    # -------------------------------------------------------------------------
    # Subscription management
    # -------------------------------------------------------------------------

    @staticmethod
    def get_customer_portal_url(profile: dict[str, Any]) -> str:
        """
        Create a billing portal session for a customer.

        Raises:
            CheckoutError: The user has never paid
        """
        _configure_stripe()
        customer_id = profile.get("stripe_customer_id")
        if not customer_id:
            raise CheckoutError("No billing account found", status_code=404)

        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=settings.BILLING_PORTAL_RETURN_URL,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe portal error: {e}")
            raise PaymentError("Could not open the billing portal", code="PORTAL_FAILED")

        return session.url

    @staticmethod
    def cancel_subscription(profile: dict[str, Any]) -> dict[str, Any]:
        """
        Cancel the user's subscription immediately and return to free.

        Raises:
            CheckoutError: No active subscription
        """
        _configure_stripe()
        subscription_id = profile.get("stripe_subscription_id")
        if not subscription_id:
            raise CheckoutError("No active subscription", status_code=404)

        try:
            stripe.Subscription.cancel(subscription_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe cancel error: {e}")
            raise PaymentError(
                "Could not cancel subscription",
                code="CANCEL_FAILED",
                details={"subscription_id": subscription_id},
            )

        updated = ProfileService.set_subscription(
            profile["id"], SubscriptionStatus.FREE, subscription_id=""
        )
        logger.info(f"Cancelled subscription {subscription_id} for user {profile['id']}")
        return updated or profile

    @staticmethod
    def get_subscription(profile: dict[str, Any]) -> dict[str, Any]:
        status = profile.get("subscription_status") or SubscriptionStatus.FREE.value
        return {
            "subscription_status": status,
            "is_paid": is_paid_tier(status),
            "stripe_customer_id": profile.get("stripe_customer_id"),
            "stripe_subscription_id": profile.get("stripe_subscription_id") or None,
        }

    @staticmethod
    def get_payment_history(user_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.list_payments(user_id)

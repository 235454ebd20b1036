# =============================================================================
# app/routers/payments.py - Payment Endpoints
# =============================================================================
# Stripe Checkout for publishing: plan catalogue, checkout creation, the
# confirmation call made when the browser returns from Stripe, and the
# webhook that applies the same fulfilment server-to-server.
#
# Subscription management (portal, cancel, history) lives here too.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Header, Query, Request

from app.dependencies import CurrentProfile, CurrentUser
from app.exceptions import ArtomateException
from core.models.payment import (
    CheckoutRequest,
    CheckoutResponse,
    ConfirmResponse,
    PaymentPlan,
    PaymentRecord,
    PortalResponse,
    SubscriptionResponse,
)
from core.models.profile import UserProfile
from core.services.campaign_service import CampaignService
from core.services.payment_service import PaymentError, PaymentService
from core.services.plans import list_plans

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def _http_error(error: PaymentError, status_code: int = 502) -> ArtomateException:
    """Convert a Stripe-side failure into an API error."""
    return ArtomateException(
        message=error.message,
        code=error.code,
        status_code=status_code,
        suggestion=error.suggestion,
        details=error.details,
    )


# =============================================================================
# Checkout
# =============================================================================

@router.get("/plans", response_model=list[PaymentPlan])
async def get_plans():
    """Plans offered when a free creator publishes."""
    return list_plans()


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(request: CheckoutRequest, user: CurrentUser):
    """
    Start a Stripe Checkout for a plan.

    Redirect the browser to `url`. Stripe sends it back to the success URL
    with the session ID, which the client passes to GET /payments/confirm.
    """
    campaign = None
    if request.campaign_id:
        campaign = CampaignService.get_campaign(request.campaign_id, user_id=str(user.id))

    try:
        session = PaymentService.create_checkout(
            request.plan, str(user.id), user.email, campaign=campaign
        )
    except PaymentError as e:
        raise _http_error(e)

    return CheckoutResponse(**session)


@router.get("/confirm", response_model=ConfirmResponse)
async def confirm_checkout(
    user: CurrentUser,
    session_id: Annotated[str, Query(min_length=1, description="Stripe Checkout Session ID")],
):
    """Apply a finished checkout. Safe to call more than once."""
    try:
        result = PaymentService.confirm_checkout(session_id, str(user.id))
    except PaymentError as e:
        raise _http_error(e)

    return ConfirmResponse(**result)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Annotated[str, Header(alias="Stripe-Signature")] = "",
):
    """
    Stripe webhook receiver.

    Needs the raw body for signature verification, so it reads the request
    directly instead of declaring a body model.
    """
    payload = await request.body()
    try:
        return PaymentService.handle_webhook(payload, stripe_signature)
    except PaymentError as e:
        raise _http_error(e, status_code=400)


# =============================================================================
# Subscription management
# =============================================================================

@router.get("/subscription", response_model=SubscriptionResponse)
async def get_subscription(profile: CurrentProfile):
    return SubscriptionResponse(**PaymentService.get_subscription(profile))


@router.get("/portal", response_model=PortalResponse)
async def get_billing_portal(profile: CurrentProfile):
    """Stripe customer portal for invoices and payment methods."""
    try:
        url = PaymentService.get_customer_portal_url(profile)
    except PaymentError as e:
        raise _http_error(e)

    return PortalResponse(url=url)


@router.post("/subscription/cancel", response_model=UserProfile)
async def cancel_subscription(profile: CurrentProfile):
    """Cancel the Pro subscription; the creator goes back to free."""
    try:
        updated = PaymentService.cancel_subscription(profile)
    except PaymentError as e:
        raise _http_error(e)

    return UserProfile.model_validate(updated)


@router.get("/history", response_model=list[PaymentRecord])
async def get_payment_history(user: CurrentUser):
    """The caller's payments, newest first."""
    return [
        PaymentRecord.model_validate(p)
        for p in PaymentService.get_payment_history(str(user.id))
    ]

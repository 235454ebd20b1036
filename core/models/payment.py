# =============================================================================
# core/models/payment.py - Payment Schemas
# =============================================================================
# Plan catalogue and request/response models for Stripe Checkout.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class PlanId(str, Enum):
    """Purchasable plans."""
    PER_CAMPAIGN = "per-campaign"
    PRO_SUBSCRIPTION = "pro-subscription"


class PaymentPlan(BaseModel):
    """
    One entry of the plan catalogue.

    price is in cents. interval is None for one-time plans.
    """

    id: PlanId
    name: str
    price: int = Field(..., ge=0, description="Price in cents")
    currency: str = "usd"
    interval: str | None = None
    mode: str = Field(..., description="Stripe Checkout mode: payment or subscription")
    description: str = ""
    features: list[str] = Field(default_factory=list)
    popular: bool = False

    @property
    def display_price(self) -> str:
        suffix = f"/{self.interval}" if self.interval else ""
        return f"${self.price / 100:.2f}{suffix}"


class CheckoutRequest(BaseModel):
    """Body of POST /payments/checkout."""

    plan: PlanId
    campaign_id: str | None = Field(
        default=None,
        description="Campaign to publish once paid (required for per-campaign)"
    )


class CheckoutResponse(BaseModel):
    """Where to redirect the browser to pay."""

    session_id: str
    url: str


class ConfirmResponse(BaseModel):
    """Result of GET /payments/confirm."""

    success: bool
    plan: PlanId
    campaign_id: str | None = None
    subscription_status: str | None = None
    already_processed: bool = False


class PaymentRecord(BaseModel):
    """A row of the payments table, as shown in billing history."""

    id: str
    plan: PlanId
    amount: int = Field(..., ge=0, description="Amount in cents")
    currency: str = "usd"
    status: str
    description: str | None = None
    campaign_id: str | None = None
    stripe_session_id: str | None = None
    created_at: datetime | None = None


class SubscriptionResponse(BaseModel):
    """Returned by GET /payments/subscription."""

    subscription_status: str
    is_paid: bool
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None


class PortalResponse(BaseModel):
    url: str

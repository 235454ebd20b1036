# =============================================================================
# core/services/plans.py - Plan Catalogue
# =============================================================================
# The two ways to unlock publishing. Prices are in cents; the Stripe price
# IDs come from settings so test and live mode can differ.
# =============================================================================

from app.config import settings
from core.models.payment import PaymentPlan, PlanId

PLANS: dict[PlanId, PaymentPlan] = {
    PlanId.PER_CAMPAIGN: PaymentPlan(
        id=PlanId.PER_CAMPAIGN,
        name="Pay Per Campaign",
        price=200,
        interval=None,
        mode="payment",
        description="One-time payment for this campaign",
        features=[
            "Publish this campaign",
            "Download all assets",
            "Valid for 30 days",
        ],
    ),
    PlanId.PRO_SUBSCRIPTION: PaymentPlan(
        id=PlanId.PRO_SUBSCRIPTION,
        name="Pro Subscription",
        price=1000,
        interval="month",
        mode="subscription",
        description="Unlimited campaigns and premium features",
        features=[
            "Unlimited campaign publishing",
            "Priority AI generation",
            "Advanced analytics",
            "Priority support",
            "Custom branding",
        ],
        popular=True,
    ),
}


def list_plans() -> list[PaymentPlan]:
    return list(PLANS.values())


def get_plan(plan_id: PlanId | str) -> PaymentPlan:
    """Raises ValueError for an unknown plan id."""
    return PLANS[PlanId(plan_id)]


def stripe_price_id(plan_id: PlanId | str) -> str:
    """Configured Stripe price ID for a plan ("" when not configured)."""
    if PlanId(plan_id) == PlanId.PRO_SUBSCRIPTION:
        return settings.STRIPE_PRICE_PRO_SUBSCRIPTION
    return settings.STRIPE_PRICE_PER_CAMPAIGN

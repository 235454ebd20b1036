# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - profile.py: User profile and subscription tier
# - campaign.py: Campaign CRUD and dashboard schemas
# - generation.py: Generation bundle, pipeline I/O and review schemas
# - payment.py: Plan catalogue and checkout schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Profile Models - Creator profile and tier
# -----------------------------------------------------------------------------
from .profile import (
    PAID_TIERS,
    ProfileUpdate,
    SubscriptionStatus,
    UserProfile,
    is_paid_tier,
)

# -----------------------------------------------------------------------------
# Campaign Models - Uploads, listing and dashboard
# -----------------------------------------------------------------------------
from .campaign import (
    CampaignFilter,
    CampaignList,
    CampaignResponse,
    CampaignStatus,
    CaptionSelection,
    CaptionVariant,
    ContentType,
    DashboardResponse,
    DashboardStats,
)

# -----------------------------------------------------------------------------
# Generation Models - AI pipeline and review
# -----------------------------------------------------------------------------
from .generation import (
    EmailCopy,
    GenerateResponse,
    GeneratedImage,
    GenerationBundle,
    GenerationRequest,
    GenerationResult,
    GenerationStage,
    GenerationState,
    GenerationView,
    PreviewResponse,
)

# -----------------------------------------------------------------------------
# Payment Models - Stripe Checkout
# -----------------------------------------------------------------------------
from .payment import (
    CheckoutRequest,
    CheckoutResponse,
    ConfirmResponse,
    PaymentPlan,
    PaymentRecord,
    PlanId,
    PortalResponse,
    SubscriptionResponse,
)

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Profile
    "PAID_TIERS",
    "ProfileUpdate",
    "SubscriptionStatus",
    "UserProfile",
    "is_paid_tier",
    # Campaign
    "CampaignFilter",
    "CampaignList",
    "CampaignResponse",
    "CampaignStatus",
    "CaptionSelection",
    "CaptionVariant",
    "ContentType",
    "DashboardResponse",
    "DashboardStats",
    # Generation
    "EmailCopy",
    "GenerateResponse",
    "GeneratedImage",
    "GenerationBundle",
    "GenerationRequest",
    "GenerationResult",
    "GenerationStage",
    "GenerationState",
    "GenerationView",
    "PreviewResponse",
    # Payment
    "CheckoutRequest",
    "CheckoutResponse",
    "ConfirmResponse",
    "PaymentPlan",
    "PaymentRecord",
    "PlanId",
    "PortalResponse",
    "SubscriptionResponse",
]

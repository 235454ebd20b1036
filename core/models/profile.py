# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# A profile is the creator's row in the users table. It is created on first
# sign-in (see ProfileService.get_or_create_profile) and carries the
# subscription tier that gates publishing.
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SubscriptionStatus(str, Enum):
    """
    Subscription tier of a creator.

    - free: must pay per campaign (or subscribe) before publishing
    - pro: monthly subscription, publishes directly
    - premium: legacy paid tier, publishes directly
    """
    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"


# Tiers that may publish without going through checkout
PAID_TIERS = frozenset({SubscriptionStatus.PRO, SubscriptionStatus.PREMIUM})


def is_paid_tier(status: str | None) -> bool:
    """
    Check whether a stored subscription_status allows direct publishing.

    Missing or unknown values count as free.
    """
    try:
        return SubscriptionStatus(status) in PAID_TIERS
    except ValueError:
        return False


class UserProfile(BaseModel):
    """
    Schema for returning a profile to clients.

    Returned by GET /auth/me and PATCH /auth/me.

    Example:
        {
            "id": "550e8400-...",
            "email": "ada@example.com",
            "display_name": "Ada Lovelace",
            "avatar_url": "https://api.dicebear.com/7.x/initials/svg?seed=AL&...",
            "subscription_status": "free"
        }
    """

    id: str = Field(..., description="User ID (same as the auth user ID)")
    email: str | None = Field(default=None, description="Email address (read-only)")
    display_name: str | None = Field(default=None, description="Name shown in the app")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")

    subscription_status: SubscriptionStatus = Field(
        default=SubscriptionStatus.FREE,
        description="Subscription tier"
    )

    bio: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=255)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("subscription_status", mode="before")
    @classmethod
    def default_tier(cls, v):
        """Rows created before tiers existed have no status."""
        if not v:
            return SubscriptionStatus.FREE
        try:
            return SubscriptionStatus(v)
        except ValueError:
            return SubscriptionStatus.FREE

    @property
    def is_paid(self) -> bool:
        return self.subscription_status in PAID_TIERS


class ProfileUpdate(BaseModel):
    """
    Schema for PATCH /auth/me (the settings "profile" tab).

    Only the provided fields are written. Email can't be changed here.
    """

    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=500)
    website: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=1024)

    def to_updates(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

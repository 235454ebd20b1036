# =============================================================================
# core/services/profile_service.py - Profile Bootstrap and Settings
# =============================================================================
# Every signed-in creator has a row in the users table. The first request
# after sign-up creates it with a display name, an initials avatar and the
# free tier.
# =============================================================================

import logging
from typing import Any
from urllib.parse import urlencode

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.profile import SubscriptionStatus

logger = logging.getLogger(__name__)

AVATAR_BASE_URL = "https://api.dicebear.com/7.x/initials/svg"
AVATAR_BACKGROUND = "8B5CF6"
AVATAR_TEXT_COLOR = "ffffff"


def default_display_name(email: str | None, full_name: str | None = None) -> str:
    """Provider-supplied name, else the local part of the email."""
    if full_name and full_name.strip():
        return full_name.strip()
    if email:
        return email.split("@", 1)[0]
    return "Creator"


def initials(name: str) -> str:
    """First letter of up to two words, upper-cased ("ada lovelace" -> "AL")."""
    return "".join(word[0] for word in name.split()[:2]).upper()


def avatar_url_for(name: str) -> str:
    """Generated initials avatar for a display name."""
    query = urlencode({
        "seed": initials(name),
        "backgroundColor": AVATAR_BACKGROUND,
        "textColor": AVATAR_TEXT_COLOR,
    })
    return f"{AVATAR_BASE_URL}?{query}"


class ProfileService:
    """Service for the users table."""

    @staticmethod
    def get_profile(user_id: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_user_profile(user_id)

    @staticmethod
    def get_or_create_profile(
        user_id: str,
        email: str | None,
        full_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Fetch the creator's profile, creating it on first use.

        Args:
            user_id: Auth user ID
            email: Email from the access token
            full_name: Name supplied by the identity provider, if any

        Returns:
            Profile dict
        """
        profile = SupabaseClient.fetch_user_profile(user_id)
        if profile:
            return profile

        display_name = default_display_name(email, full_name)
        now = utc_now_iso()
        data = {
            "id": user_id,
            "email": email,
            "display_name": display_name,
            "avatar_url": avatar_url_for(display_name),
            "subscription_status": SubscriptionStatus.FREE.value,
            "created_at": now,
            "updated_at": now,
        }

        profile = SupabaseClient.insert_user_profile(data)
        logger.info(f"Created profile for user: {user_id}")
        return profile

    @staticmethod
    def update_profile(user_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """
        Update editable profile fields.

        Email is owned by the identity provider and is never written here.
        """
        updates = {k: v for k, v in updates.items() if k != "email"}
        if not updates:
            return SupabaseClient.fetch_user_profile(user_id)

        profile = SupabaseClient.update_user_profile(user_id, updates)
        logger.info(f"Updated profile {user_id}: {list(updates.keys())}")
        return profile

    @staticmethod
    def set_subscription(
        user_id: str,
        status: SubscriptionStatus,
        customer_id: str | None = None,
        subscription_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Set the subscription tier, optionally storing the Stripe ids."""
        updates: dict[str, Any] = {"subscription_status": status.value}
        if customer_id:
            updates["stripe_customer_id"] = customer_id
        if subscription_id is not None:
            updates["stripe_subscription_id"] = subscription_id

        profile = SupabaseClient.update_user_profile(user_id, updates)
        logger.info(f"Subscription for user {user_id} set to {status.value}")
        return profile

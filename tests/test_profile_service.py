# =============================================================================
# tests/test_profile_service.py - Profile Tests
# =============================================================================

from unittest.mock import patch

from core.models.profile import SubscriptionStatus, UserProfile
from core.services.profile_service import (
    ProfileService,
    avatar_url_for,
    default_display_name,
    initials,
)
from tests.conftest import USER_ID


class TestDisplayName:

    def test_provider_name_wins(self):
        assert default_display_name("ada@example.com", "  Ada Lovelace ") == "Ada Lovelace"

    def test_email_local_part(self):
        assert default_display_name("ada@example.com") == "ada"

    def test_nothing_known(self):
        assert default_display_name(None) == "Creator"


class TestAvatar:

    def test_initials(self):
        assert initials("ada lovelace") == "AL"
        assert initials("Grace Brewster Hopper") == "GB"
        assert initials("ada") == "A"

    def test_avatar_url(self):
        url = avatar_url_for("Ada Lovelace")

        assert url.startswith("https://api.dicebear.com/7.x/initials/svg?")
        assert "seed=AL" in url
        assert "backgroundColor=8B5CF6" in url


@patch("core.services.profile_service.SupabaseClient")
class TestProfileService:

    def test_existing_profile_returned(self, mock_supabase, free_profile):
        mock_supabase.fetch_user_profile.return_value = free_profile

        assert ProfileService.get_or_create_profile(USER_ID, "ada@example.com") == free_profile
        mock_supabase.insert_user_profile.assert_not_called()

    def test_first_sign_in_creates_free_profile(self, mock_supabase):
        mock_supabase.fetch_user_profile.return_value = None
        mock_supabase.insert_user_profile.side_effect = lambda data: data

        profile = ProfileService.get_or_create_profile(USER_ID, "ada@example.com", "Ada Lovelace")

        assert profile["display_name"] == "Ada Lovelace"
        assert profile["subscription_status"] == "free"
        assert "seed=AL" in profile["avatar_url"]

    def test_update_never_writes_email(self, mock_supabase):
        ProfileService.update_profile(USER_ID, {"display_name": "Ada", "email": "x@example.com"})

        mock_supabase.update_user_profile.assert_called_once_with(USER_ID, {"display_name": "Ada"})

    def test_empty_update_reads_profile(self, mock_supabase, free_profile):
        mock_supabase.fetch_user_profile.return_value = free_profile

        assert ProfileService.update_profile(USER_ID, {"email": "x@example.com"}) == free_profile
        mock_supabase.update_user_profile.assert_not_called()

    def test_set_subscription(self, mock_supabase):
        ProfileService.set_subscription(
            USER_ID, SubscriptionStatus.PRO, customer_id="cus_1", subscription_id="sub_1"
        )

        mock_supabase.update_user_profile.assert_called_once_with(USER_ID, {
            "subscription_status": "pro",
            "stripe_customer_id": "cus_1",
            "stripe_subscription_id": "sub_1",
        })


class TestUserProfileModel:

    def test_missing_tier_is_free(self, free_profile):
        free_profile["subscription_status"] = None

        assert UserProfile.model_validate(free_profile).subscription_status == SubscriptionStatus.FREE

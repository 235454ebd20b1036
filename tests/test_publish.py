# =============================================================================
# tests/test_publish.py - Publish, Draft and Discard Tests
# =============================================================================
# Publishing is gated on the subscription tier. Supabase is mocked.
# =============================================================================

from unittest.mock import patch

import pytest

from app.exceptions import (
    CampaignNotReadyError,
    CampaignPublishedError,
    GenerationInProgressError,
    PaymentRequiredError,
)
from core.models.campaign import CaptionVariant
from core.models.profile import is_paid_tier
from core.services.publish_service import PublishService
from tests.conftest import CAMPAIGN_ID


class TestTierCheck:

    @pytest.mark.parametrize("status,expected", [
        ("free", False),
        ("pro", True),
        ("premium", True),
        (None, False),
        ("enterprise", False),
    ])
    def test_is_paid_tier(self, status, expected):
        assert is_paid_tier(status) is expected


@patch("core.services.publish_service.CampaignService")
class TestRequestPublish:

    def test_free_tier_needs_payment(self, mock_campaigns, sample_campaign, free_profile):
        with pytest.raises(PaymentRequiredError) as exc_info:
            PublishService.request_publish(sample_campaign, free_profile)

        error = exc_info.value
        assert error.status_code == 402
        plan_ids = [plan["id"] for plan in error.details["plans"]]
        assert plan_ids == ["per-campaign", "pro-subscription"]
        mock_campaigns.mark_published.assert_not_called()

    def test_missing_profile_counts_as_free(self, mock_campaigns, sample_campaign):
        with pytest.raises(PaymentRequiredError):
            PublishService.request_publish(sample_campaign, None)

    def test_pro_publishes_directly(self, mock_campaigns, sample_campaign, pro_profile):
        mock_campaigns.mark_published.return_value = {**sample_campaign, "status": "published"}

        campaign = PublishService.request_publish(sample_campaign, pro_profile)

        assert campaign["status"] == "published"
        mock_campaigns.mark_published.assert_called_once_with(CAMPAIGN_ID)

    def test_premium_publishes_directly(self, mock_campaigns, sample_campaign, pro_profile):
        pro_profile["subscription_status"] = "premium"

        PublishService.request_publish(sample_campaign, pro_profile)

        mock_campaigns.mark_published.assert_called_once_with(CAMPAIGN_ID)

    def test_already_published_is_noop(self, mock_campaigns, sample_campaign, free_profile):
        sample_campaign["status"] = "published"

        campaign = PublishService.request_publish(sample_campaign, free_profile)

        assert campaign is sample_campaign
        mock_campaigns.mark_published.assert_not_called()

    def test_not_generated(self, mock_campaigns, draft_campaign, pro_profile):
        with pytest.raises(CampaignNotReadyError):
            PublishService.request_publish(draft_campaign, pro_profile)

    @pytest.mark.parametrize("status", ["processing", "failed"])
    def test_only_generated_drafts_publish(self, mock_campaigns, sample_campaign, pro_profile, status):
        # Bundle from an earlier run is still on the row
        sample_campaign["status"] = status

        with pytest.raises(CampaignNotReadyError) as exc_info:
            PublishService.request_publish(sample_campaign, pro_profile)

        assert exc_info.value.details["status"] == status
        mock_campaigns.mark_published.assert_not_called()


@patch("core.services.publish_service.CampaignService")
class TestSaveDraft:

    def test_keeps_draft(self, mock_campaigns, sample_campaign):
        PublishService.save_draft(sample_campaign)

        mock_campaigns.update_campaign.assert_called_once_with(CAMPAIGN_ID, status="draft")

    def test_stores_caption_choice(self, mock_campaigns, sample_campaign):
        PublishService.save_draft(sample_campaign, CaptionVariant.B)

        mock_campaigns.update_campaign.assert_called_once_with(
            CAMPAIGN_ID, status="draft", selected_caption="B"
        )

    def test_failed_run_can_be_kept(self, mock_campaigns, sample_campaign):
        sample_campaign["status"] = "failed"

        PublishService.save_draft(sample_campaign)

        mock_campaigns.update_campaign.assert_called_once_with(CAMPAIGN_ID, status="draft")

    def test_published_stays_published(self, mock_campaigns, sample_campaign):
        sample_campaign["status"] = "published"

        with pytest.raises(CampaignPublishedError) as exc_info:
            PublishService.save_draft(sample_campaign)

        assert exc_info.value.status_code == 409
        mock_campaigns.update_campaign.assert_not_called()

    def test_running_generation_keeps_status(self, mock_campaigns, sample_campaign):
        sample_campaign.update(status="processing", task_id="task-1")

        with pytest.raises(GenerationInProgressError):
            PublishService.save_draft(sample_campaign)

        mock_campaigns.update_campaign.assert_not_called()


class TestDiscard:

    @patch("core.services.publish_service.SupabaseClient")
    @patch("core.services.publish_service.StorageService")
    def test_deletes_files_and_row(self, mock_storage, mock_supabase):
        mock_storage.delete_campaign_files.return_value = 3
        mock_supabase.delete_campaign.return_value = True

        assert PublishService.discard(CAMPAIGN_ID) is True

        mock_storage.delete_campaign_files.assert_called_once_with(CAMPAIGN_ID)
        mock_supabase.delete_campaign.assert_called_once_with(CAMPAIGN_ID)

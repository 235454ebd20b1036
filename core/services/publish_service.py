# =============================================================================
# core/services/publish_service.py - Publish, Draft and Discard
# =============================================================================
# Publishing is gated on the subscription tier: free creators are sent to
# plan selection (HTTP 402 with the plan catalogue), paid creators publish
# directly. Only a generated draft can be published; a published campaign
# stays published.
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    CampaignNotReadyError,
    CampaignPublishedError,
    GenerationInProgressError,
    PaymentRequiredError,
)
from core.models.campaign import CampaignStatus, CaptionVariant
from core.models.profile import is_paid_tier
from core.services.campaign_service import CampaignService
from core.services.plans import list_plans
from core.services.review_service import load_bundle
from core.services.storage_service import StorageService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class PublishService:
    """Final wizard step."""

    @staticmethod
    def request_publish(
        campaign: dict[str, Any],
        profile: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """
        Publish a campaign if the creator's tier allows it.

        Args:
            campaign: Campaign record (ownership already checked)
            profile: The creator's profile, None counts as free

        Returns:
            Updated campaign record

        Raises:
            CampaignNotReadyError: Not a generated draft
            PaymentRequiredError: Free tier, carries the plan options
        """
        campaign_id = str(campaign["id"])
        status = campaign.get("status")

        if status == CampaignStatus.PUBLISHED.value:
            return campaign
        if status != CampaignStatus.DRAFT.value:
            raise CampaignNotReadyError(campaign_id, status)

        load_bundle(campaign)

        # No profile row, or a row without a tier, is treated as free
        tier = (profile or {}).get("subscription_status")
        if not is_paid_tier(tier):
            logger.info(f"Campaign {campaign_id} needs payment (tier={tier or 'free'})")
            raise PaymentRequiredError(
                campaign_id,
                [plan.model_dump(mode="json") for plan in list_plans()],
            )

        return PublishService.publish(campaign_id)

    @staticmethod
    def publish(campaign_id: str) -> dict[str, Any]:
        """Mark a campaign published."""
        campaign = CampaignService.mark_published(campaign_id)
        logger.info(f"Published campaign: {campaign_id}")
        return campaign

    @staticmethod
    def save_draft(
        campaign: dict[str, Any],
        selected_caption: CaptionVariant | None = None,
    ) -> dict[str, Any]:
        """
        Keep the campaign as a draft, optionally storing the chosen caption.

        Raises:
            CampaignPublishedError: Published campaigns can't go back to draft
            GenerationInProgressError: The generation task still owns the status
        """
        campaign_id = str(campaign["id"])
        status = campaign.get("status")

        if status == CampaignStatus.PUBLISHED.value:
            raise CampaignPublishedError(campaign_id)
        if status == CampaignStatus.PROCESSING.value:
            raise GenerationInProgressError(campaign_id, campaign.get("task_id"))

        updates: dict[str, Any] = {"status": CampaignStatus.DRAFT.value}
        if selected_caption:
            updates["selected_caption"] = CaptionVariant(selected_caption).value
        return CampaignService.update_campaign(campaign_id, **updates)

    @staticmethod
    def discard(campaign_id: str) -> bool:
        """Delete a campaign and its stored files."""
        removed = StorageService.delete_campaign_files(campaign_id)
        deleted = SupabaseClient.delete_campaign(campaign_id)
        logger.info(f"Discarded campaign {campaign_id} ({removed} files removed)")
        return deleted

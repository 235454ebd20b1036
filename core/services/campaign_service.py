# =============================================================================
# core/services/campaign_service.py - Campaign Business Logic
# =============================================================================
# Handles campaign CRUD, listing and the dashboard summary.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.campaign import CampaignFilter, CampaignStatus, CaptionVariant, ContentType
from app.exceptions import CampaignNotFoundError

logger = logging.getLogger(__name__)

RECENT_CAMPAIGN_COUNT = 3


class CampaignService:
    """
    Service for campaign management operations.

    Every read that takes a user_id checks ownership; a campaign owned by
    somebody else is reported as not found.
    """

    @staticmethod
    def create_campaign(
        user_id: str,
        content_type: ContentType,
        theme: str,
        source_file: str,
        source_file_size: int | None = None,
    ) -> dict[str, Any]:
        """
        Create a draft campaign for an upload.

        The title starts out as the theme.
        """
        data = {
            "user_id": str(user_id),
            "title": theme,
            "status": CampaignStatus.DRAFT.value,
            "content_type": content_type.value,
            "theme": theme,
            "source_file": source_file,
            "source_file_size": source_file_size,
            "engagement": 0,
            "selected_caption": CaptionVariant.A.value,
        }

        campaign = SupabaseClient.insert_campaign(data)
        logger.info(f"Created campaign: {campaign['id']} for user: {user_id}")
        return campaign

    @staticmethod
    def get_campaign(campaign_id: str, user_id: str | None = None) -> dict[str, Any]:
        """
        Get a campaign by ID.

        Args:
            campaign_id: The campaign UUID
            user_id: If provided, verify the campaign belongs to this user

        Raises:
            CampaignNotFoundError: If campaign doesn't exist or user doesn't own it
        """
        campaign = SupabaseClient.fetch_campaign(campaign_id)

        if not campaign:
            raise CampaignNotFoundError(str(campaign_id))

        if user_id and str(campaign.get("user_id")) != str(user_id):
            # Don't reveal that the campaign exists
            raise CampaignNotFoundError(str(campaign_id))

        return campaign

    @staticmethod
    def update_campaign(campaign_id: str, **updates: Any) -> dict[str, Any]:
        """
        Write campaign columns.

        Raises:
            CampaignNotFoundError: If no row was updated
        """
        campaign = SupabaseClient.update_campaign(campaign_id, updates)
        if not campaign:
            raise CampaignNotFoundError(str(campaign_id))
        return campaign

    @staticmethod
    def list_campaigns(
        user_id: str,
        status: CampaignFilter = CampaignFilter.ALL,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a user's campaigns, newest first.

        Returns:
            Tuple of (campaigns, total count for the filter)
        """
        status_value = None if status == CampaignFilter.ALL else status.value
        offset = (page - 1) * page_size
        return SupabaseClient.list_campaigns(
            user_id, status=status_value, limit=page_size, offset=offset
        )

    @staticmethod
    def get_dashboard(user_id: str) -> dict[str, Any]:
        """
        Totals and recent campaigns for the dashboard.

        Returns:
            {"stats": {...}, "recent_campaigns": [...]}
        """
        rows = SupabaseClient.fetch_campaign_stats(user_id)
        stats = {
            "total_campaigns": len(rows),
            "published": sum(1 for r in rows if r.get("status") == CampaignStatus.PUBLISHED.value),
            "drafts": sum(1 for r in rows if r.get("status") == CampaignStatus.DRAFT.value),
            "total_engagement": sum(r.get("engagement") or 0 for r in rows),
        }

        recent, _ = SupabaseClient.list_campaigns(user_id, limit=RECENT_CAMPAIGN_COUNT)
        return {"stats": stats, "recent_campaigns": recent}

    # -------------------------------------------------------------------------
    # Generation lifecycle
    # -------------------------------------------------------------------------

    @staticmethod
    def mark_processing(campaign_id: str, task_id: str | None = None) -> dict[str, Any]:
        updates: dict[str, Any] = {
            "status": CampaignStatus.PROCESSING.value,
            "generation_error": None,
        }
        if task_id:
            updates["task_id"] = task_id
        return CampaignService.update_campaign(campaign_id, **updates)

    @staticmethod
    def mark_generated(
        campaign_id: str,
        generated: dict[str, Any],
        image_url: str,
        video_url: str,
    ) -> dict[str, Any]:
        """Store a finished run; the campaign goes back to draft for review."""
        return CampaignService.update_campaign(
            campaign_id,
            status=CampaignStatus.DRAFT.value,
            generated=generated,
            image_url=image_url,
            video_url=video_url,
            selected_caption=CaptionVariant.A.value,
            generation_error=None,
        )

    @staticmethod
    def mark_failed(campaign_id: str, error: str) -> dict[str, Any]:
        return CampaignService.update_campaign(
            campaign_id,
            status=CampaignStatus.FAILED.value,
            generation_error=error,
        )

    @staticmethod
    def mark_published(campaign_id: str) -> dict[str, Any]:
        return CampaignService.update_campaign(
            campaign_id,
            status=CampaignStatus.PUBLISHED.value,
            published_at=utc_now_iso(),
        )

# =============================================================================
# app/routers/campaigns.py - Campaign, Review and Publish Endpoints
# =============================================================================
# Campaign listing and the review/publish steps of the wizard.
# All endpoints require authentication; a campaign owned by someone else is
# reported as not found.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from app.dependencies import CurrentProfile, CurrentUser, OwnedCampaign
from core.models.campaign import (
    CampaignFilter,
    CampaignList,
    CampaignResponse,
    CaptionSelection,
    CaptionVariant,
)
from core.models.generation import PreviewResponse
from core.services.campaign_service import CampaignService
from core.services.publish_service import PublishService
from core.services.review_service import build_preview, load_bundle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])


# =============================================================================
# Request/Response Models
# =============================================================================

class DraftRequest(BaseModel):
    """Optional caption choice when saving a draft."""
    selected_caption: Optional[CaptionVariant] = Field(
        default=None,
        description="Caption variant to keep with the draft"
    )


class DeleteResponse(BaseModel):
    campaign_id: str
    deleted: bool
    message: str = "Campaign deleted"


# =============================================================================
# Listing
# =============================================================================

@router.get("", response_model=CampaignList)
async def list_campaigns(
    user: CurrentUser,
    status: Annotated[CampaignFilter, Query(description="Filter by status")] = CampaignFilter.ALL,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    page_size: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
):
    """The caller's campaigns, newest first."""
    campaigns, total = CampaignService.list_campaigns(
        str(user.id), status=status, page=page, page_size=page_size
    )
    return CampaignList(
        campaigns=[CampaignResponse.model_validate(c) for c in campaigns],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{campaign_id}", response_model=CampaignResponse)
async def get_campaign(campaign: OwnedCampaign):
    return CampaignResponse.model_validate(campaign)


# =============================================================================
# Review
# =============================================================================

@router.get("/{campaign_id}/preview", response_model=PreviewResponse)
async def preview_campaign(
    campaign: OwnedCampaign,
    caption: Annotated[Optional[CaptionVariant], Query(description="Caption variant to display")] = None,
):
    """
    Review view of the generated package.

    `caption` only changes which variant is displayed; nothing is saved.
    """
    return build_preview(campaign, caption)


@router.put("/{campaign_id}/caption", response_model=PreviewResponse)
async def select_caption(campaign: OwnedCampaign, selection: CaptionSelection):
    """Persist the chosen caption variant."""
    load_bundle(campaign)
    updated = CampaignService.update_campaign(
        str(campaign["id"]), selected_caption=selection.selected_caption.value
    )
    return build_preview(updated)


# =============================================================================
# Publish
# =============================================================================

@router.post("/{campaign_id}/publish", response_model=CampaignResponse)
async def publish_campaign(campaign: OwnedCampaign, profile: CurrentProfile):
    """
    Publish the campaign.

    Free creators get 402 with the plan options in `details.plans`; the
    client then starts checkout with POST /payments/checkout.
    """
    published = PublishService.request_publish(campaign, profile)
    return CampaignResponse.model_validate(published)


@router.post("/{campaign_id}/draft", response_model=CampaignResponse)
async def save_draft(campaign: OwnedCampaign, request: DraftRequest | None = None):
    """Keep the campaign as a draft."""
    selected = request.selected_caption if request else None
    saved = PublishService.save_draft(campaign, selected_caption=selected)
    return CampaignResponse.model_validate(saved)


@router.delete("/{campaign_id}", response_model=DeleteResponse)
async def discard_campaign(campaign: OwnedCampaign):
    """Delete the campaign and its stored files."""
    campaign_id = str(campaign["id"])
    deleted = PublishService.discard(campaign_id)
    return DeleteResponse(campaign_id=campaign_id, deleted=deleted)

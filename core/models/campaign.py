# =============================================================================
# core/models/campaign.py - Campaign Schemas
# =============================================================================
# These models define the API contract for campaign operations:
# - ContentType: what kind of source media was uploaded
# - CampaignStatus: lifecycle state of a campaign
# - CampaignResponse / CampaignList: what clients see
# - DashboardResponse: totals plus recent campaigns
#
# A campaign is one uploaded source file plus the marketing package that
# was generated for it.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentType(str, Enum):
    """Kind of source media a creator uploads."""
    MUSIC = "music"
    VIDEO = "video"
    BOOK = "book"


class CampaignStatus(str, Enum):
    """
    Possible states for a campaign.

    Flow:
        draft -> processing -> draft (generated, ready for review) -> published
                           \\-> failed -> processing (retry)

    - draft: uploaded, or generated and waiting for review
    - processing: the generation task is running
    - published: paid for (or paid tier) and published
    - failed: the last generation run failed (see generation_error)
    """
    DRAFT = "draft"
    PROCESSING = "processing"
    PUBLISHED = "published"
    FAILED = "failed"


class CaptionVariant(str, Enum):
    """Which of the two generated captions is selected."""
    A = "A"
    B = "B"


class CampaignFilter(str, Enum):
    """Status filter for the campaigns page."""
    ALL = "all"
    PUBLISHED = "published"
    DRAFT = "draft"
    PROCESSING = "processing"
    FAILED = "failed"


class CampaignResponse(BaseModel):
    """
    Schema for returning campaign data to clients.

    Returned by:
    - POST /campaigns/upload
    - GET /campaigns/{id}
    - GET /campaigns
    """

    id: str = Field(..., description="Unique campaign identifier")
    title: str = Field(..., description="Campaign title (defaults to the theme)")
    status: CampaignStatus = Field(..., description="Campaign status")
    content_type: ContentType = Field(..., description="Kind of source media")
    theme: str = Field(..., description="Theme/vibe text used for generation")

    source_file: str | None = Field(default=None, description="Original filename")
    source_file_size: int | None = Field(default=None, ge=0, description="Size in bytes")

    engagement: int = Field(default=0, ge=0, description="Engagement count")

    # Present once generation has completed
    generated: dict[str, Any] | None = Field(default=None, description="Generated marketing package")
    image_url: str | None = Field(default=None, description="Public URL of the generated image")
    video_url: str | None = Field(default=None, description="Public URL of the generated video")
    selected_caption: CaptionVariant = Field(default=CaptionVariant.A)

    generation_error: str | None = Field(default=None, description="Why the last run failed")
    task_id: str | None = Field(default=None, description="Celery task ID of the last run")

    created_at: datetime | None = None
    updated_at: datetime | None = None
    published_at: datetime | None = None

    @field_validator("engagement", "selected_caption", mode="before")
    @classmethod
    def fill_nulls(cls, v, info):
        """Nullable columns come back as None for older rows."""
        if v is None:
            return 0 if info.field_name == "engagement" else CaptionVariant.A
        return v

    model_config = ConfigDict(from_attributes=True)


class CampaignList(BaseModel):
    """
    Schema for listing campaigns, with pagination info.

    Example:
        {
            "campaigns": [...],
            "total": 42,
            "page": 1,
            "page_size": 20
        }
    """

    campaigns: list[CampaignResponse] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class CaptionSelection(BaseModel):
    """Body of PUT /campaigns/{id}/caption and POST /campaigns/{id}/draft."""

    selected_caption: CaptionVariant = Field(
        default=CaptionVariant.A,
        description="Caption variant to keep"
    )


class DashboardStats(BaseModel):
    """Totals shown on the dashboard cards."""

    total_campaigns: int = Field(default=0, ge=0)
    published: int = Field(default=0, ge=0)
    drafts: int = Field(default=0, ge=0)
    total_engagement: int = Field(default=0, ge=0)


class DashboardResponse(BaseModel):
    """Returned by GET /dashboard."""

    stats: DashboardStats
    recent_campaigns: list[CampaignResponse] = Field(default_factory=list)

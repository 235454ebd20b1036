# =============================================================================
# app/routers/upload.py - Upload Step
# =============================================================================
# First wizard step: pick a content type, enter a theme, choose a source
# file. Missing content type or theme is filled in from the file; the step
# only advances once all three are present.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile

from app.config import settings
from app.dependencies import CurrentUser
from core.models.campaign import CampaignResponse, ContentType
from core.services.campaign_service import CampaignService
from core.services.storage_service import StorageService
from core.services.upload_service import list_content_types, validate_selection

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.get("/content-types")
async def get_content_types():
    """Content types with their labels and accepted extensions."""
    return {"content_types": list_content_types()}


@router.post("/campaigns/upload", response_model=CampaignResponse, status_code=201)
async def upload_source(
    user: CurrentUser,
    file: Annotated[Optional[UploadFile], File(description="Source media file")] = None,
    content_type: Annotated[Optional[ContentType], Form()] = None,
    theme: Annotated[Optional[str], Form(max_length=200)] = None,
):
    """
    Upload a source file and create a draft campaign.

    This endpoint:
    1. Validates the selection (file type, size, required fields)
    2. Creates the draft campaign, titled with the theme
    3. Uploads the file to Supabase Storage
    4. Stores the storage path on the campaign
    """
    filename = file.filename if file and file.filename else None

    content = await file.read() if filename else b""
    file_size = len(content) if filename else None

    selection = validate_selection(
        content_type,
        theme,
        filename,
        file_size=file_size,
        max_size_bytes=settings.max_upload_size_bytes,
    )

    logger.info(
        f"Upload from {user.id}: {selection.filename} "
        f"({selection.content_type.value}, {file_size} bytes)"
    )

    campaign = CampaignService.create_campaign(
        user_id=str(user.id),
        content_type=selection.content_type,
        theme=selection.theme,
        source_file=selection.filename,
        source_file_size=file_size,
    )

    storage_path = StorageService.upload_source_file(
        str(campaign["id"]), content, selection.filename
    )
    campaign = CampaignService.update_campaign(
        str(campaign["id"]), source_file_path=storage_path
    )

    return CampaignResponse.model_validate(campaign)

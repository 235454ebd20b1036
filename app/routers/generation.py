# =============================================================================
# app/routers/generation.py - Generation Endpoints
# =============================================================================
# POST starts (or retries) the generation task; GET returns the wizard view.
# Live progress is also pushed over /ws/campaigns/{id}.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import CurrentUser, OwnedCampaign
from core.models.generation import GenerateResponse, GenerationView
from core.services.generation_service import GenerationService

router = APIRouter(prefix="/campaigns", tags=["Generation"])


@router.post("/{campaign_id}/generate", response_model=GenerateResponse, status_code=202)
async def generate_campaign(campaign: OwnedCampaign, user: CurrentUser):
    """
    Generate captions, hashtags, email, image and video for a campaign.

    Returns the task ID immediately. Poll GET /campaigns/{id}/generation
    or listen on the WebSocket for progress.
    """
    return GenerationService.start_generation(campaign, str(user.id))


@router.get("/{campaign_id}/generation", response_model=GenerationView)
async def get_generation(campaign: OwnedCampaign):
    """
    Generation progress for the wizard.

    state is one of idle, running, complete, failed. A failed view has
    can_retry and can_go_back set.
    """
    return GenerationService.get_generation_view(campaign)

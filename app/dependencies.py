# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from fastapi import Depends, Path

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser
from core.services.campaign_service import CampaignService
from core.services.profile_service import ProfileService


def get_current_profile(user: AuthUser = Depends(get_current_user)) -> dict[str, Any]:
    """The caller's profile row, created on first use."""
    return ProfileService.get_or_create_profile(str(user.id), user.email, user.full_name)


def get_owned_campaign(
    campaign_id: Annotated[UUID, Path(description="Campaign UUID")],
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """
    The campaign named in the path, if the caller owns it.

    Raises:
        CampaignNotFoundError: Missing or owned by someone else
    """
    return CampaignService.get_campaign(str(campaign_id), user_id=str(user.id))


# Type aliases for dependency injection
CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
CurrentProfile = Annotated[dict[str, Any], Depends(get_current_profile)]
OwnedCampaign = Annotated[dict[str, Any], Depends(get_owned_campaign)]

# =============================================================================
# app/routers/dashboard.py - Dashboard Endpoint
# =============================================================================

from fastapi import APIRouter

from app.dependencies import CurrentUser
from core.models.campaign import CampaignResponse, DashboardResponse, DashboardStats
from core.services.campaign_service import CampaignService

router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(user: CurrentUser):
    """Campaign totals and the three most recent campaigns."""
    dashboard = CampaignService.get_dashboard(str(user.id))
    return DashboardResponse(
        stats=DashboardStats(**dashboard["stats"]),
        recent_campaigns=[
            CampaignResponse.model_validate(c) for c in dashboard["recent_campaigns"]
        ],
    )

# =============================================================================
# core/services/generation_service.py - Generation Step
# =============================================================================
# Starts the generation task for a campaign and builds the view the wizard
# shows while it runs:
#
#   idle -> running -> complete
#                   -> failed (retry or go back)
#
# Progress comes from the Celery task meta written by update_progress in
# workers/tasks.py. Retrying is just starting again; the pipeline never
# keeps anything from a failed run.
# =============================================================================

import logging
from typing import Any

from app.exceptions import CampaignPublishedError, GenerationInProgressError, TaskQueueError
from core.models.campaign import CampaignStatus
from core.models.generation import (
    GenerateResponse,
    GenerationStage,
    GenerationState,
    GenerationView,
)
from core.services.campaign_service import CampaignService

logger = logging.getLogger(__name__)

# Celery states of a task that hasn't finished yet
ACTIVE_TASK_STATES = frozenset({"PENDING", "STARTED", "PROGRESS", "RETRY"})


def get_task_info(task_id: str) -> tuple[str, Any]:
    """
    Current Celery state and meta of a task.

    Returns:
        Tuple of (status, info); info is the progress meta dict while running
    """
    from workers.celery_app import celery_app

    result = celery_app.AsyncResult(task_id)
    return result.status, result.info


def _stage(value: Any) -> GenerationStage | None:
    try:
        return GenerationStage(value) if value else None
    except ValueError:
        return None


class GenerationService:
    """Generation wizard step."""

    @staticmethod
    def start_generation(campaign: dict[str, Any], user_id: str) -> GenerateResponse:
        """
        Queue the generation task. Also the "Try Again" action.

        Raises:
            CampaignPublishedError: Published campaigns are never regenerated
            GenerationInProgressError: A run for this campaign hasn't finished
            TaskQueueError: The broker can't be reached
        """
        campaign_id = str(campaign["id"])
        task_id = campaign.get("task_id")

        if campaign.get("status") == CampaignStatus.PUBLISHED.value:
            raise CampaignPublishedError(campaign_id)

        if campaign.get("status") == CampaignStatus.PROCESSING.value and task_id:
            status, _ = get_task_info(task_id)
            if status in ACTIVE_TASK_STATES:
                raise GenerationInProgressError(campaign_id, task_id)

        # Marked before queueing so a fast worker can't be overwritten
        CampaignService.mark_processing(campaign_id)

        try:
            from workers.tasks import generate_campaign_content
            result = generate_campaign_content.delay(campaign_id, user_id)
        except Exception as e:
            logger.exception(f"Failed to queue generation for campaign {campaign_id}: {e}")
            CampaignService.mark_failed(campaign_id, "Failed to start generation")
            raise TaskQueueError(str(e))

        CampaignService.update_campaign(campaign_id, task_id=result.id)
        logger.info(f"Queued generation for campaign {campaign_id}: task {result.id}")

        return GenerateResponse(campaign_id=campaign_id, task_id=result.id)

    @staticmethod
    def get_generation_view(campaign: dict[str, Any]) -> GenerationView:
        """
        What the generation step should display for a campaign.

        A failed run offers both retry and going back to the upload step.
        """
        campaign_id = str(campaign["id"])
        status = campaign.get("status")
        task_id = campaign.get("task_id")

        if status == CampaignStatus.PROCESSING.value:
            view = GenerationView(
                campaign_id=campaign_id,
                state=GenerationState.RUNNING,
                task_id=task_id,
                message="Waiting in queue...",
            )
            if not task_id:
                return view

            task_status, info = get_task_info(task_id)
            if task_status == "PROGRESS" and isinstance(info, dict):
                view.progress = int(info.get("percent", 0))
                view.message = info.get("message", "Processing...")
                view.stage = _stage(info.get("stage"))
            elif task_status == "STARTED":
                view.message = "Starting..."
            elif task_status == "SUCCESS":
                # Worker finished; the campaign row is about to flip back to draft
                view.progress = 100
                view.stage = GenerationStage.VIDEO
                view.message = "Finishing up..."
            return view

        if status == CampaignStatus.FAILED.value:
            return GenerationView(
                campaign_id=campaign_id,
                state=GenerationState.FAILED,
                task_id=task_id,
                message="Generation failed",
                error=campaign.get("generation_error") or "An error occurred during generation",
                can_retry=True,
                can_go_back=True,
            )

        if campaign.get("generated"):
            return GenerationView(
                campaign_id=campaign_id,
                state=GenerationState.COMPLETE,
                stage=GenerationStage.VIDEO,
                progress=100,
                message="Complete",
                task_id=task_id,
            )

        return GenerationView(campaign_id=campaign_id, state=GenerationState.IDLE)

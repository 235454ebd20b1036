# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for AI generation.
#
# Tasks:
# - generate_campaign_content: text -> image -> video for one campaign
# =============================================================================

import logging
import os
import tempfile
from typing import Any

from celery import shared_task, current_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(
    current: int,
    total: int,
    message: str = "Processing...",
    stage: str | None = None,
):
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
        stage: Generation stage name, if any
    """
    if current_task:
        meta = {
            "current": current,
            "total": total,
            "percent": int((current / total) * 100),
            "message": message,
        }
        if stage:
            meta["stage"] = stage
        current_task.update_state(state="PROGRESS", meta=meta)


# =============================================================================
# Generation Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_campaign_content")
def generate_campaign_content(
    self,
    campaign_id: str,
    user_id: str | None = None,
) -> dict[str, Any]:
    """
    Generate the marketing package for a campaign.

    1. Mark the campaign processing
    2. Fetch the source audio (music campaigns only)
    3. Run the pipeline (text, image, video)
    4. Upload image and video, store bundle and URLs, status back to draft

    On failure the campaign is marked failed with generation_error and the
    exception is re-raised so the task state is FAILURE. Assets are only
    uploaded after every stage has succeeded.

    Args:
        campaign_id: The campaign UUID
        user_id: Owner, checked against the campaign

    Returns:
        Dict with success, campaign_id, image_url, video_url
    """
    from agents.errors import GenerationError
    from agents.pipeline import run_generation_pipeline
    from app.websocket.broadcast import (
        publish_generation_complete,
        publish_generation_failed,
        publish_generation_progress,
    )
    from core.models.campaign import ContentType
    from core.models.generation import GenerationRequest
    from core.services.campaign_service import CampaignService
    from core.services.storage_service import StorageService

    task_id = self.request.id
    logger.info(f"Generating content for campaign {campaign_id}")

    campaign = CampaignService.get_campaign(campaign_id, user_id=user_id)
    CampaignService.mark_processing(campaign_id, task_id)

    def on_progress(percent, stage, message):
        update_progress(percent, 100, message, stage=stage.value)
        publish_generation_progress(campaign_id, task_id, stage.value, percent, message)

    try:
        content_type = ContentType(campaign["content_type"])

        with tempfile.TemporaryDirectory(prefix="artomate_source_") as workdir:
            audio_path = None
            source_path = campaign.get("source_file_path")
            if content_type == ContentType.MUSIC and source_path:
                audio_path = os.path.join(workdir, os.path.basename(source_path))
                with open(audio_path, "wb") as f:
                    f.write(StorageService.download_raw(source_path))

            request = GenerationRequest(
                campaign_id=campaign_id,
                content_type=content_type,
                theme=campaign["theme"],
                source_file=campaign.get("source_file"),
                audio_path=audio_path,
            )
            result = run_generation_pipeline(request, on_progress=on_progress)

        image_path = StorageService.upload_generated_image(
            campaign_id, result.image.data, result.image.content_type
        )
        video_path = StorageService.upload_generated_video(campaign_id, result.video)
        image_url = StorageService.get_public_url(image_path)
        video_url = StorageService.get_public_url(video_path)

        CampaignService.mark_generated(
            campaign_id,
            generated=result.bundle.to_record(),
            image_url=image_url,
            video_url=video_url,
        )

        payload = {
            "success": True,
            "campaign_id": campaign_id,
            "image_url": image_url,
            "video_url": video_url,
        }
        publish_generation_complete(campaign_id, task_id, payload)
        logger.info(f"Generation stored for campaign {campaign_id}")
        return payload

    except GenerationError as e:
        logger.error(f"Generation failed at {e.stage.value} for campaign {campaign_id}: {e.message}")
        CampaignService.mark_failed(campaign_id, e.message)
        publish_generation_failed(campaign_id, task_id, e.stage.value, e.message)
        raise

    except Exception as e:
        logger.exception(f"Generation failed for campaign {campaign_id}: {e}")
        message = getattr(e, "message", None) or str(e) or "An error occurred during generation"
        CampaignService.mark_failed(campaign_id, message)
        publish_generation_failed(campaign_id, task_id, None, message)
        raise


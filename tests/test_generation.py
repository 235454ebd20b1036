# =============================================================================
# tests/test_generation.py - Generation Step Tests
# =============================================================================
# This module contains tests for:
# - GenerationService: queueing, the in-progress guard and the wizard view
# - The Celery task: success stores assets, failure marks the campaign failed
#
# Celery, Supabase and the pipeline are mocked.
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest

from agents.errors import GenerationError
from agents.mock_content import build_mock_bundle
from app.exceptions import CampaignPublishedError, GenerationInProgressError, TaskQueueError
from core.models.campaign import ContentType
from core.models.generation import (
    GeneratedImage,
    GenerationResult,
    GenerationStage,
    GenerationState,
)
from core.services.generation_service import GenerationService
from tests.conftest import CAMPAIGN_ID, USER_ID


# =============================================================================
# Wizard View
# =============================================================================

class TestGenerationView:
    """What the generation step shows for each campaign state."""

    def test_idle_before_first_run(self, draft_campaign):
        view = GenerationService.get_generation_view(draft_campaign)

        assert view.state == GenerationState.IDLE
        assert view.progress == 0

    @patch("core.services.generation_service.get_task_info")
    def test_running_with_progress(self, mock_info, draft_campaign):
        draft_campaign.update(status="processing", task_id="task-1")
        mock_info.return_value = (
            "PROGRESS",
            {"percent": 60, "message": "Creating visual content", "stage": "image"},
        )

        view = GenerationService.get_generation_view(draft_campaign)

        assert view.state == GenerationState.RUNNING
        assert view.progress == 60
        assert view.stage == GenerationStage.IMAGE
        assert view.message == "Creating visual content"
        mock_info.assert_called_once_with("task-1")

    @patch("core.services.generation_service.get_task_info")
    def test_running_still_queued(self, mock_info, draft_campaign):
        draft_campaign.update(status="processing", task_id="task-1")
        mock_info.return_value = ("PENDING", None)

        view = GenerationService.get_generation_view(draft_campaign)

        assert view.state == GenerationState.RUNNING
        assert view.progress == 0
        assert view.stage is None

    def test_failed_offers_retry_and_back(self, draft_campaign):
        draft_campaign.update(status="failed", generation_error="Generating Image failed: rate limit")

        view = GenerationService.get_generation_view(draft_campaign)

        assert view.state == GenerationState.FAILED
        assert view.error == "Generating Image failed: rate limit"
        assert view.can_retry is True
        assert view.can_go_back is True

    def test_complete_when_bundle_stored(self, sample_campaign):
        view = GenerationService.get_generation_view(sample_campaign)

        assert view.state == GenerationState.COMPLETE
        assert view.progress == 100


# =============================================================================
# Starting a Run
# =============================================================================

class TestStartGeneration:

    @patch("core.services.generation_service.CampaignService")
    @patch("workers.tasks.generate_campaign_content.delay")
    def test_queues_task(self, mock_delay, mock_campaigns, draft_campaign):
        mock_delay.return_value = MagicMock(id="task-42")

        response = GenerationService.start_generation(draft_campaign, USER_ID)

        assert response.task_id == "task-42"
        assert response.campaign_id == CAMPAIGN_ID
        mock_campaigns.mark_processing.assert_called_once_with(CAMPAIGN_ID)
        mock_delay.assert_called_once_with(CAMPAIGN_ID, USER_ID)
        mock_campaigns.update_campaign.assert_called_once_with(CAMPAIGN_ID, task_id="task-42")

    @patch("core.services.generation_service.CampaignService")
    @patch("workers.tasks.generate_campaign_content.delay")
    def test_retry_after_failure(self, mock_delay, mock_campaigns, draft_campaign):
        draft_campaign.update(status="failed", generation_error="boom", task_id="old-task")
        mock_delay.return_value = MagicMock(id="task-43")

        response = GenerationService.start_generation(draft_campaign, USER_ID)

        assert response.task_id == "task-43"

    @patch("core.services.generation_service.get_task_info", return_value=("PROGRESS", {}))
    @patch("core.services.generation_service.CampaignService")
    def test_rejects_while_running(self, mock_campaigns, _info, draft_campaign):
        draft_campaign.update(status="processing", task_id="task-1")

        with pytest.raises(GenerationInProgressError):
            GenerationService.start_generation(draft_campaign, USER_ID)

        mock_campaigns.mark_processing.assert_not_called()

    @patch("core.services.generation_service.CampaignService")
    @patch("workers.tasks.generate_campaign_content.delay")
    def test_published_campaign_is_not_regenerated(self, mock_delay, mock_campaigns, sample_campaign):
        sample_campaign["status"] = "published"

        with pytest.raises(CampaignPublishedError) as exc_info:
            GenerationService.start_generation(sample_campaign, USER_ID)

        assert exc_info.value.status_code == 409
        mock_campaigns.mark_processing.assert_not_called()
        mock_delay.assert_not_called()

    @patch("core.services.generation_service.get_task_info", return_value=("FAILURE", None))
    @patch("core.services.generation_service.CampaignService")
    @patch("workers.tasks.generate_campaign_content.delay")
    def test_stale_processing_can_restart(self, mock_delay, mock_campaigns, _info, draft_campaign):
        """A worker that died leaves the row processing; the task state says otherwise."""
        draft_campaign.update(status="processing", task_id="task-1")
        mock_delay.return_value = MagicMock(id="task-2")

        assert GenerationService.start_generation(draft_campaign, USER_ID).task_id == "task-2"

    @patch("core.services.generation_service.CampaignService")
    @patch("workers.tasks.generate_campaign_content.delay", side_effect=ConnectionError("redis down"))
    def test_broker_unavailable(self, _delay, mock_campaigns, draft_campaign):
        with pytest.raises(TaskQueueError) as exc_info:
            GenerationService.start_generation(draft_campaign, USER_ID)

        assert exc_info.value.status_code == 503
        mock_campaigns.mark_failed.assert_called_once()


# =============================================================================
# Celery Task
# =============================================================================

@pytest.fixture
def task_mocks(sample_campaign):
    """Patch everything the generation task talks to."""
    with patch("workers.tasks.update_progress") as progress, \
            patch("core.services.campaign_service.CampaignService.get_campaign") as get_campaign, \
            patch("core.services.campaign_service.CampaignService.mark_processing") as mark_processing, \
            patch("core.services.campaign_service.CampaignService.mark_generated") as mark_generated, \
            patch("core.services.campaign_service.CampaignService.mark_failed") as mark_failed, \
            patch("core.services.storage_service.StorageService.download_raw", return_value=b"ID3") as download, \
            patch("core.services.storage_service.StorageService.upload_generated_image", return_value="img-path"), \
            patch("core.services.storage_service.StorageService.upload_generated_video", return_value="vid-path"), \
            patch("core.services.storage_service.StorageService.get_public_url", side_effect=lambda p: f"https://cdn/{p}"), \
            patch("app.websocket.broadcast.publish_generation_progress"), \
            patch("app.websocket.broadcast.publish_generation_complete") as published_complete, \
            patch("app.websocket.broadcast.publish_generation_failed") as published_failed, \
            patch("agents.pipeline.run_generation_pipeline") as pipeline:
        get_campaign.return_value = sample_campaign
        yield {
            "progress": progress,
            "mark_processing": mark_processing,
            "mark_generated": mark_generated,
            "mark_failed": mark_failed,
            "download": download,
            "complete": published_complete,
            "failed": published_failed,
            "pipeline": pipeline,
        }


class TestGenerateCampaignTask:

    def test_success_stores_assets(self, task_mocks):
        from workers.tasks import generate_campaign_content

        bundle = build_mock_bundle(ContentType.MUSIC, "Summer Vibes")
        task_mocks["pipeline"].return_value = GenerationResult(
            bundle=bundle,
            image=GeneratedImage(data=b"png", prompt="p"),
            video=b"mp4",
        )

        result = generate_campaign_content.run(CAMPAIGN_ID, USER_ID)

        assert result["success"] is True
        assert result["image_url"] == "https://cdn/img-path"
        assert result["video_url"] == "https://cdn/vid-path"
        task_mocks["mark_generated"].assert_called_once_with(
            CAMPAIGN_ID,
            generated=bundle.to_record(),
            image_url="https://cdn/img-path",
            video_url="https://cdn/vid-path",
        )
        task_mocks["complete"].assert_called_once()
        task_mocks["mark_failed"].assert_not_called()

    def test_music_source_downloaded_for_audio(self, task_mocks, sample_campaign):
        from workers.tasks import generate_campaign_content

        task_mocks["pipeline"].return_value = GenerationResult(
            bundle=build_mock_bundle("music", "x"),
            image=GeneratedImage(data=b"png", prompt="p"),
            video=b"mp4",
        )

        generate_campaign_content.run(CAMPAIGN_ID, USER_ID)

        task_mocks["download"].assert_called_once_with(sample_campaign["source_file_path"])
        request = task_mocks["pipeline"].call_args.args[0]
        assert request.audio_path.endswith("source_summer_vibes.mp3")

    def test_stage_failure_marks_failed(self, task_mocks):
        from workers.tasks import generate_campaign_content

        task_mocks["pipeline"].side_effect = GenerationError(
            "Image generation failed: rate limit", stage=GenerationStage.IMAGE
        )

        with pytest.raises(GenerationError):
            generate_campaign_content.run(CAMPAIGN_ID, USER_ID)

        task_mocks["mark_failed"].assert_called_once_with(
            CAMPAIGN_ID, "Image generation failed: rate limit"
        )
        task_mocks["mark_generated"].assert_not_called()
        args = task_mocks["failed"].call_args.args
        assert args[2] == "image"


class TestCeleryApp:

    def test_built_from_settings(self):
        from app.config import settings
        from workers.celery_app import celery_app

        assert celery_app.conf.broker_url == settings.REDIS_URL
        assert celery_app.conf.result_backend == settings.REDIS_URL

    def test_reports_started_and_registers_generation(self):
        from workers.celery_app import celery_app

        celery_app.loader.import_default_modules()

        assert celery_app.conf.task_track_started is True
        assert celery_app.conf.task_default_queue == "generation"
        assert "workers.tasks.generate_campaign_content" in celery_app.tasks
        assert "workers.healthcheck" not in celery_app.tasks

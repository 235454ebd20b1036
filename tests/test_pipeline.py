# =============================================================================
# tests/test_pipeline.py - Generation Pipeline Tests
# =============================================================================
# This module contains tests for:
# - Stage order and progress reporting
# - A failing stage stops the run and names the stage
# - Audio is only passed to the video stage for music
# =============================================================================

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from agents.errors import GenerationError
from agents.mock_content import build_mock_bundle
from agents.pipeline import run_generation_pipeline
from core.models.campaign import ContentType
from core.models.generation import GeneratedImage, GenerationRequest, GenerationStage


@pytest.fixture
def agents():
    writer = MagicMock()
    writer.generate_bundle.return_value = build_mock_bundle(ContentType.MUSIC, "Summer Vibes")
    image_generator = MagicMock()
    image_generator.generate.return_value = GeneratedImage(data=b"png", prompt="p")
    assembler = MagicMock()
    assembler.assemble.return_value = b"mp4"
    return writer, image_generator, assembler


def _run(request, agents, on_progress=None):
    writer, image_generator, assembler = agents
    return run_generation_pipeline(
        request,
        on_progress=on_progress,
        writer=writer,
        image_generator=image_generator,
        assembler=assembler,
    )


def _request(content_type=ContentType.MUSIC, audio_path="/tmp/song.mp3"):
    return GenerationRequest(
        campaign_id="c1",
        content_type=content_type,
        theme="Summer Vibes",
        source_file="summer.mp3",
        audio_path=audio_path,
    )


class TestPipelineSuccess:

    def test_returns_all_outputs(self, agents):
        result = _run(_request(), agents)

        assert result.bundle.caption
        assert result.image.data == b"png"
        assert result.video == b"mp4"

    def test_progress_sequence(self, agents):
        events = []

        _run(_request(), agents, on_progress=lambda p, s, m: events.append((p, s)))

        assert events == [
            (20, GenerationStage.TEXT),
            (40, GenerationStage.TEXT),
            (60, GenerationStage.IMAGE),
            (80, GenerationStage.IMAGE),
            (90, GenerationStage.VIDEO),
            (100, GenerationStage.VIDEO),
        ]

    def test_image_uses_bundle_prompt(self, agents):
        writer, image_generator, _ = agents

        _run(_request(), agents)

        image_generator.generate.assert_called_once_with(
            writer.generate_bundle.return_value.image_prompt
        )

    def test_music_gets_audio(self, agents):
        _run(_request(ContentType.MUSIC), agents)

        assert agents[2].assemble.call_args.kwargs["audio_path"] == "/tmp/song.mp3"

    @pytest.mark.parametrize("content_type", [ContentType.VIDEO, ContentType.BOOK])
    def test_other_types_silent(self, agents, content_type):
        _run(_request(content_type), agents)

        assert agents[2].assemble.call_args.kwargs["audio_path"] is None


class TestPipelineFailure:
    """Any stage failure discards the run and reports the stage."""

    def test_text_failure_stops_run(self, agents):
        writer, image_generator, assembler = agents
        writer.generate_bundle.side_effect = GenerationError("bad reply", stage=GenerationStage.TEXT)

        with pytest.raises(GenerationError) as exc_info:
            _run(_request(), agents)

        assert exc_info.value.stage == GenerationStage.TEXT
        image_generator.generate.assert_not_called()
        assembler.assemble.assert_not_called()

    def test_image_failure_wrapped(self, agents):
        _, image_generator, assembler = agents
        image_generator.generate.side_effect = RuntimeError("boom")

        with pytest.raises(GenerationError) as exc_info:
            _run(_request(), agents)

        assert exc_info.value.stage == GenerationStage.IMAGE
        assert exc_info.value.code == "STAGE_FAILED"
        assert "boom" in exc_info.value.message
        assembler.assemble.assert_not_called()

    def test_video_failure_after_image_progress(self, agents):
        agents[2].assemble.side_effect = OSError("disk full")
        events = []

        with pytest.raises(GenerationError) as exc_info:
            _run(_request(), agents, on_progress=lambda p, s, m: events.append(p))

        assert exc_info.value.stage == GenerationStage.VIDEO
        assert events == [20, 40, 60, 80, 90]

# =============================================================================
# agents/pipeline.py - Generation Pipeline
# =============================================================================
# Runs the three generation stages in order:
#
#   text (ContentWriterAgent) -> image (ImageGeneratorAgent) -> video (VideoAssembler)
#
# Progress is reported through a callback at fixed points:
#   20 text started, 40 text done, 60 image started, 80 image done,
#   90 video started, 100 done
#
# A failure in any stage raises GenerationError naming that stage. The
# pipeline keeps everything in memory, so a failed run leaves nothing behind
# and a retry starts from scratch.
#
# Usage:
#   result = run_generation_pipeline(request, on_progress=update_progress)
# =============================================================================

from __future__ import annotations

import logging
from typing import Callable, Optional

from app.config import settings
from agents.errors import GenerationError
from core.models.campaign import ContentType
from core.models.generation import GenerationRequest, GenerationResult, GenerationStage

logger = logging.getLogger(__name__)

# on_progress(percent, stage, message)
ProgressCallback = Callable[[int, GenerationStage, str], None]

STAGE_LABELS = {
    GenerationStage.TEXT: "Generating Text Content",
    GenerationStage.IMAGE: "Generating Image",
    GenerationStage.VIDEO: "Generating Video",
}

STAGE_DESCRIPTIONS = {
    GenerationStage.TEXT: "Creating captions, hashtags, and email content",
    GenerationStage.IMAGE: "Creating visual content for your campaign",
    GenerationStage.VIDEO: "Creating engaging video content",
}


def default_agents():
    """
    Agents for the current configuration.

    Returns:
        Tuple of (content writer, image generator, video assembler)
    """
    # Imported lazily so mock mode never constructs an OpenAI client
    from agents.video_assembler import VideoAssembler

    if settings.USE_MOCK_GENERATION:
        from agents.mock_content import MockContentWriter, MockImageGenerator
        return MockContentWriter(), MockImageGenerator(), VideoAssembler()

    from agents.content_writer import ContentWriterAgent
    from agents.image_generator import ImageGeneratorAgent
    return ContentWriterAgent(), ImageGeneratorAgent(), VideoAssembler()


def _stage_error(stage: GenerationStage, error: Exception) -> GenerationError:
    if isinstance(error, GenerationError):
        return error
    return GenerationError(
        message=f"{STAGE_LABELS[stage]} failed: {error}",
        stage=stage,
        code="STAGE_FAILED",
        suggestion="Try again",
        details={"error_type": type(error).__name__},
    )


def run_generation_pipeline(
    request: GenerationRequest,
    on_progress: Optional[ProgressCallback] = None,
    writer=None,
    image_generator=None,
    assembler=None,
) -> GenerationResult:
    """
    Generate the full marketing package for a campaign.

    Args:
        request: Content type, theme, source filename and optional audio path
        on_progress: Called as on_progress(percent, stage, message)
        writer / image_generator / assembler: Override the configured agents

    Returns:
        GenerationResult with bundle, image and video bytes

    Raises:
        GenerationError: The first stage that failed
    """
    if writer is None or image_generator is None or assembler is None:
        default_writer, default_image, default_assembler = default_agents()
        writer = writer or default_writer
        image_generator = image_generator or default_image
        assembler = assembler or default_assembler

    def report(percent: int, stage: GenerationStage, message: str) -> None:
        if on_progress:
            on_progress(percent, stage, message)

    logger.info(f"Starting generation for campaign {request.campaign_id}")

    # -------------------------------------------------------------------------
    # Stage 1: Text
    # -------------------------------------------------------------------------
    report(20, GenerationStage.TEXT, STAGE_DESCRIPTIONS[GenerationStage.TEXT])
    try:
        bundle = writer.generate_bundle(request.content_type, request.theme, request.source_file)
    except Exception as e:
        raise _stage_error(GenerationStage.TEXT, e) from e
    report(40, GenerationStage.TEXT, "Text content ready")

    # -------------------------------------------------------------------------
    # Stage 2: Image
    # -------------------------------------------------------------------------
    report(60, GenerationStage.IMAGE, STAGE_DESCRIPTIONS[GenerationStage.IMAGE])
    try:
        image = image_generator.generate(bundle.image_prompt)
    except Exception as e:
        raise _stage_error(GenerationStage.IMAGE, e) from e
    report(80, GenerationStage.IMAGE, "Image ready")

    # -------------------------------------------------------------------------
    # Stage 3: Video
    # -------------------------------------------------------------------------
    report(90, GenerationStage.VIDEO, STAGE_DESCRIPTIONS[GenerationStage.VIDEO])
    audio_path = request.audio_path if ContentType(request.content_type) == ContentType.MUSIC else None
    try:
        video = assembler.assemble(image, bundle.video_script, audio_path=audio_path)
    except Exception as e:
        raise _stage_error(GenerationStage.VIDEO, e) from e
    report(100, GenerationStage.VIDEO, "Complete")

    logger.info(f"Generation complete for campaign {request.campaign_id}")
    return GenerationResult(bundle=bundle, image=image, video=video)

# =============================================================================
# agents/ - AI Agent Definitions
# =============================================================================
# This package contains the 3-stage generation pipeline:
# - content_writer.py: Stage 1 - captions, hashtags, email, image prompt, video script
# - image_generator.py: Stage 2 - campaign image from the image prompt
# - video_assembler.py: Stage 3 - vertical video from the image and script
# - pipeline.py: Runs the stages in sequence and reports progress
#
# mock_content.py provides offline stand-ins for stages 1 and 2.
#
# Prompts:
# - prompts/content_system.py: System prompt for the Content Writer
# =============================================================================

from agents.errors import GenerationError
from agents.pipeline import run_generation_pipeline

__all__ = [
    "GenerationError",
    "run_generation_pipeline",
]

# =============================================================================
# agents/prompts/ - System Prompts for AI Agents
# =============================================================================
# This package contains the prompts used by the generation agents:
# - content_system.py: Content Writer prompt and image prompt wrapper
#
# Organized with XML tags for clear structure.
# =============================================================================

from agents.prompts.content_system import (
    CONTENT_SYSTEM_PROMPT,
    build_content_prompt,
    build_image_prompt,
)

__all__ = [
    "CONTENT_SYSTEM_PROMPT",
    "build_content_prompt",
    "build_image_prompt",
]

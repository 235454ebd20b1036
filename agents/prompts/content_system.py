# =============================================================================
# agents/prompts/content_system.py - Content Writer System Prompt
# =============================================================================
# This module contains the prompts for the Content Writer agent, which turns
# a creator's upload (content type, theme, filename) into a full marketing
# package, and the wrapper prompt used for the image model.
#
# Prompt design:
# - XML tag organization for clear structure
# - Exact output schema, since the reply is parsed as JSON
#
# Usage:
#   messages = [
#       {"role": "system", "content": CONTENT_SYSTEM_PROMPT},
#       {"role": "user", "content": build_content_prompt("music", "Summer Vibes", "summer.mp3")},
#   ]
# =============================================================================

from __future__ import annotations

# =============================================================================
# Base System Prompt
# =============================================================================

CONTENT_SYSTEM_PROMPT = """
<role>
You are Artomate, an AI-powered content creation suite for artists.

Given a piece of content a creator has just finished (a song, a video or a
book), you write the complete marketing package they will publish with it.
</role>

<output_schema>
Respond with a single JSON object with exactly these keys:

{
  "caption": "An engaging Instagram caption that captures the essence of the content",
  "caption_b": "An alternative A/B test caption with a different approach",
  "hashtags": ["#five", "#relevant", "#hashtags", "#exactly", "#five"],
  "email": {
    "subject": "Compelling email subject line",
    "body": "Professional marketing email body (2-3 paragraphs)",
    "cta_text": "Call-to-action button text"
  },
  "image_prompt": "A detailed, artistic prompt for image generation (be specific about style, mood, colors)",
  "video_script": "A scene-by-scene script for a 15-second vertical video (9:16 aspect ratio)"
}
</output_schema>

<rules>
- hashtags must contain exactly 5 entries, each starting with "#" and without spaces.
- video_script has one scene per line, e.g. "Scene 1 (0-3s): ...". Keep each
  line short enough to read as an on-screen caption.
- The image_prompt describes a square (1:1) image suitable for social media.
- Write in the creator's voice. Make the content engaging, professional, and
  tailored to the content type and theme.
- Output JSON only, no markdown fences or commentary.
</rules>
"""


# =============================================================================
# Prompt Builders
# =============================================================================

def build_content_prompt(
    content_type: str,
    theme: str,
    source_file: str | None = None,
) -> str:
    """
    Build the user message describing the upload.

    Args:
        content_type: music, video or book
        theme: Theme/vibe text entered by the creator
        source_file: Original filename, if known

    Returns:
        User prompt string
    """
    return f"""Based on the following content information, generate a complete marketing package:

Content Type: {content_type}
Theme/Vibe: {theme}
Source File: {source_file or "unknown"}"""


def build_image_prompt(image_prompt: str) -> str:
    """Wrap the generated image prompt for the image model."""
    return (
        f"Generate a high-quality, artistic image based on this prompt: {image_prompt}. "
        "The image should be 1:1 aspect ratio, professional quality, and suitable "
        "for social media marketing."
    )

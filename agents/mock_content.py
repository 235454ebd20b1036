# =============================================================================
# agents/mock_content.py - Offline Stand-ins for the AI Agents
# =============================================================================
# Used when USE_MOCK_GENERATION is set, so the whole wizard can run without
# OpenAI credentials. Same interfaces as ContentWriterAgent and
# ImageGeneratorAgent.
# =============================================================================

from __future__ import annotations

import io
import logging

from PIL import Image, ImageDraw

from agents.video_assembler import load_font
from core.models.campaign import ContentType
from core.models.generation import EmailCopy, GeneratedImage, GenerationBundle

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = 512
PLACEHOLDER_COLOR = "#8B5CF6"


def build_mock_bundle(content_type: ContentType | str, theme: str) -> GenerationBundle:
    """Canned marketing package for a content type and theme."""
    kind = ContentType(content_type).value

    return GenerationBundle(
        caption=(
            f"🎵 Just dropped my latest {kind} \"{theme}\"! This one's been brewing "
            f"in my soul for months. Hope it resonates with you all! 🎶"
        ),
        caption_b=(
            f"🔥 New {kind} alert! \"{theme}\" is finally here and it's everything "
            f"I hoped it would be. Drop a ❤️ if you're feeling it!"
        ),
        hashtags=["#NewMusic", "#ArtistLife", "#CreativeFlow", "#MusicLover", "#IndieArtist"],
        email=EmailCopy(
            subject=f"🎵 Your New {kind} is Here: \"{theme}\"",
            body=(
                f"Hey there! 👋\n\n"
                f"I'm so excited to share my latest {kind} with you! \"{theme}\" has been "
                f"a labor of love, and I can't wait for you to hear it.\n\n"
                f"This track represents everything I've been feeling and creating lately. "
                f"It's raw, it's real, and it's straight from the heart.\n\n"
                f"I hope it speaks to you the way it speaks to me. Let me know what you think!"
            ),
            cta_text="Listen Now",
        ),
        image_prompt=(
            f"A vibrant, artistic composition featuring musical elements, warm golden hour "
            f"lighting, with a dreamy, ethereal atmosphere. The image should capture the "
            f"essence of \"{theme}\" with rich colors, dynamic composition, and professional "
            f"photography quality. 1:1 aspect ratio, suitable for social media."
        ),
        video_script="\n".join([
            "Scene 1 (0-3s): Fade in from black to reveal the artist in a creative studio space",
            "Scene 2 (3-6s): Close-up of hands creating music, with dynamic lighting",
            "Scene 3 (6-9s): Wide shot of the artist performing, with atmospheric effects",
            "Scene 4 (9-12s): Artistic montage of creative process and final result",
            "Scene 5 (12-15s): Fade to brand logo and call-to-action",
        ]),
    )


def build_placeholder_image(prompt: str = "") -> GeneratedImage:
    """Purple square labelled "Image Generated"."""
    image = Image.new("RGB", (PLACEHOLDER_SIZE, PLACEHOLDER_SIZE), PLACEHOLDER_COLOR)
    draw = ImageDraw.Draw(image)
    center = PLACEHOLDER_SIZE // 2
    draw.text((center, center), "Image", font=load_font(48), fill="white", anchor="mm")
    draw.text((center, center + 54), "Generated", font=load_font(24), fill="white", anchor="mm")

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return GeneratedImage(data=buffer.getvalue(), prompt=prompt, content_type="image/png")


class MockContentWriter:
    """Drop-in for ContentWriterAgent."""

    def generate_bundle(
        self,
        content_type: ContentType | str,
        theme: str,
        source_file: str | None = None,
    ) -> GenerationBundle:
        logger.info(f"Mock generation for {content_type} '{theme}'")
        return build_mock_bundle(content_type, theme)


class MockImageGenerator:
    """Drop-in for ImageGeneratorAgent."""

    def generate(self, image_prompt: str) -> GeneratedImage:
        return build_placeholder_image(image_prompt)

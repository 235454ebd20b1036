# =============================================================================
# agents/image_generator.py - Image Generator Agent
# =============================================================================
# Second stage of the generation pipeline: turns the bundle's image prompt
# into a square social-media image via the OpenAI images API, then
# downloads the result so the worker can store it in Supabase Storage.
# =============================================================================

from __future__ import annotations

import logging

import httpx
from openai import OpenAI

from app.config import settings
from agents.errors import GenerationError
from agents.prompts.content_system import build_image_prompt
from core.models.generation import GeneratedImage, GenerationStage

logger = logging.getLogger(__name__)

IMAGE_SIZE = "1024x1024"
DOWNLOAD_TIMEOUT_SECONDS = 60.0


class ImageGeneratorAgent:
    """
    Generates the campaign image.

    Example:
        agent = ImageGeneratorAgent()
        image = agent.generate(bundle.image_prompt)
        open("image.png", "wb").write(image.data)
    """

    def __init__(self, model: str | None = None, size: str = IMAGE_SIZE):
        self.client = OpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.OPENAI_IMAGE_MODEL
        self.size = size

    def generate(self, image_prompt: str) -> GeneratedImage:
        """
        Generate and download an image for a prompt.

        Raises:
            GenerationError: If generation or the download fails
        """
        logger.info(f"Generating image with model={self.model}: '{image_prompt[:60]}...'")

        try:
            response = self.client.images.generate(
                model=self.model,
                prompt=build_image_prompt(image_prompt),
                size=self.size,
                quality="standard",
                n=1,
            )
            image_url = response.data[0].url
        except Exception as e:
            raise GenerationError(
                message=f"Image generation failed: {e}",
                stage=GenerationStage.IMAGE,
                code="OPENAI_IMAGE_ERROR",
                suggestion="Check your OPENAI_API_KEY and image model access, then try again",
                details={"model": self.model}
            )

        if not image_url:
            raise GenerationError(
                message="Image generation failed: no image returned",
                stage=GenerationStage.IMAGE,
                code="EMPTY_IMAGE_RESPONSE",
                suggestion="Try again",
            )

        return GeneratedImage(
            data=self._download(image_url),
            prompt=image_prompt,
            content_type="image/png",
        )

    def _download(self, url: str) -> bytes:
        try:
            with httpx.Client(timeout=DOWNLOAD_TIMEOUT_SECONDS) as client:
                response = client.get(url)
                response.raise_for_status()
                return response.content
        except httpx.HTTPError as e:
            raise GenerationError(
                message=f"Image download failed: {e}",
                stage=GenerationStage.IMAGE,
                code="IMAGE_DOWNLOAD_ERROR",
                suggestion="Try again",
            )

# =============================================================================
# agents/content_writer.py - Content Writer Agent
# =============================================================================
# This module implements the first stage of the generation pipeline.
#
# The Content Writer's job:
# 1. Describe the creator's upload (content type, theme, filename)
# 2. Ask the chat model for the marketing package in JSON mode
# 3. Validate the reply into a GenerationBundle
#
# Usage:
#   from agents.content_writer import ContentWriterAgent
#   agent = ContentWriterAgent()
#   bundle = agent.generate_bundle("music", "Summer Vibes", "summer.mp3")
# =============================================================================

from __future__ import annotations

import json
import logging

from openai import OpenAI
from pydantic import ValidationError

from app.config import settings
from agents.errors import GenerationError
from agents.prompts.content_system import CONTENT_SYSTEM_PROMPT, build_content_prompt
from core.models.campaign import ContentType
from core.models.generation import GenerationBundle, GenerationStage

# Set up logging for this module
logger = logging.getLogger(__name__)


class ContentWriterAgent:
    """
    Generates the text part of a campaign.

    Example:
        agent = ContentWriterAgent()
        bundle = agent.generate_bundle(ContentType.MUSIC, "Summer Vibes", "summer.mp3")
        print(bundle.caption)
        print(bundle.hashtags)  # five entries, each starting with '#'

    Attributes:
        model: OpenAI model to use (default from settings)
        temperature: Generation temperature (default 0.8 for varied copy)
    """

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
    ):
        """
        Initialize the Content Writer.

        Args:
            model: OpenAI model ID (default: settings.OPENAI_MODEL)
            temperature: Generation temperature (default: settings.GENERATION_TEMPERATURE)
        """
        self.client = OpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature if temperature is not None else settings.GENERATION_TEMPERATURE

        logger.info(f"ContentWriterAgent initialized with model={self.model}, temp={self.temperature}")

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    def generate_bundle(
        self,
        content_type: ContentType | str,
        theme: str,
        source_file: str | None = None,
    ) -> GenerationBundle:
        """
        Generate captions, hashtags, email copy, image prompt and video script.

        Args:
            content_type: music, video or book
            theme: Theme/vibe text
            source_file: Original filename

        Returns:
            Validated GenerationBundle

        Raises:
            GenerationError: If the model call fails or the reply is unusable
        """
        content_type_value = ContentType(content_type).value
        logger.info(f"Generating bundle for {content_type_value} '{theme[:50]}'")

        messages = self._build_messages(content_type_value, theme, source_file)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                response_format={"type": "json_object"},  # Force JSON output
                messages=messages,
            )

            response_text = response.choices[0].message.content or ""
            logger.debug(f"OpenAI response: {response_text[:200]}...")

        except Exception as e:
            raise GenerationError(
                message=f"Content generation failed: {e}",
                stage=GenerationStage.TEXT,
                code="OPENAI_ERROR",
                suggestion="Check your OPENAI_API_KEY and network connection, then try again",
                details={"model": self.model}
            )

        bundle = self._parse_response(response_text)
        logger.info(f"Bundle generated with hashtags {bundle.hashtags}")
        return bundle

    # -------------------------------------------------------------------------
    # Message Building
    # -------------------------------------------------------------------------

    def _build_messages(
        self,
        content_type: str,
        theme: str,
        source_file: str | None,
    ) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": CONTENT_SYSTEM_PROMPT},
            {"role": "user", "content": build_content_prompt(content_type, theme, source_file)},
        ]

    # -------------------------------------------------------------------------
    # Response Parsing
    # -------------------------------------------------------------------------

    def _parse_response(self, response_text: str) -> GenerationBundle:
        """
        Parse the model's reply into a GenerationBundle.

        Raises:
            GenerationError: JSON_PARSE_ERROR or VALIDATION_ERROR
        """
        try:
            data = json.loads(response_text)
        except json.JSONDecodeError as e:
            raise GenerationError(
                message=f"Failed to parse AI-generated content: {e}",
                stage=GenerationStage.TEXT,
                code="JSON_PARSE_ERROR",
                suggestion="The model didn't return valid JSON. Try again.",
                details={"raw_response": response_text[:500]}
            )

        try:
            return GenerationBundle.model_validate(data)
        except ValidationError as e:
            errors = [f"{err['loc']}: {err['msg']}" for err in e.errors()]
            raise GenerationError(
                message=f"Invalid content structure: {'; '.join(errors)}",
                stage=GenerationStage.TEXT,
                code="VALIDATION_ERROR",
                suggestion="The model's response was valid JSON but missing required fields. Try again.",
                details={"validation_errors": errors, "raw_data": data}
            )

# =============================================================================
# core/models/generation.py - Generation Schemas
# =============================================================================
# Models for the AI generation pipeline and the review step:
# - GenerationBundle: the structured text output of the content writer
# - GenerationRequest / GeneratedImage / GenerationResult: pipeline I/O
# - GenerationView: what the wizard shows while a run is going
# - PreviewResponse: the review screen
# =============================================================================

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .campaign import CaptionVariant, ContentType

HASHTAG_COUNT = 5


# =============================================================================
# Generation Bundle
# =============================================================================

class EmailCopy(BaseModel):
    """Marketing email produced alongside the captions."""

    subject: str = Field(..., min_length=1, description="Email subject line")
    body: str = Field(..., min_length=1, description="Email body (2-3 paragraphs)")
    cta_text: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("cta_text", "ctaText"),
        description="Call-to-action button text"
    )


class GenerationBundle(BaseModel):
    """
    Structured marketing package returned by the content writer.

    Accepts both snake_case and the camelCase keys models tend to produce
    (captionB, imagePrompt, videoScript, ctaText). Always serialized in
    snake_case.

    Example:
        {
            "caption": "Just dropped my latest track...",
            "caption_b": "New music alert!...",
            "hashtags": ["#NewMusic", "#ArtistLife", "#CreativeFlow", "#MusicLover", "#IndieArtist"],
            "email": {"subject": "...", "body": "...", "cta_text": "Listen Now"},
            "image_prompt": "A vibrant, artistic composition...",
            "video_script": "Scene 1 (0-3s): ...\\nScene 2 (3-6s): ..."
        }
    """

    caption: str = Field(..., min_length=1, description="Primary caption (variant A)")
    caption_b: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("caption_b", "captionB"),
        description="Alternative caption (variant B)"
    )
    hashtags: list[str] = Field(..., description="Exactly five hashtags")
    email: EmailCopy
    image_prompt: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("image_prompt", "imagePrompt")
    )
    video_script: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("video_script", "videoScript")
    )

    @field_validator("hashtags")
    @classmethod
    def validate_hashtags(cls, value: list[str]) -> list[str]:
        """Strip whitespace, add a missing '#', and require exactly five."""
        tags = []
        for tag in value:
            tag = tag.strip().replace(" ", "")
            if not tag or tag == "#":
                continue
            tags.append(tag if tag.startswith("#") else f"#{tag}")

        if len(tags) != HASHTAG_COUNT:
            raise ValueError(f"expected exactly {HASHTAG_COUNT} hashtags, got {len(tags)}")
        return tags

    def caption_for(self, variant: CaptionVariant | str) -> str:
        """Return the caption text for a variant."""
        return self.caption_b if CaptionVariant(variant) == CaptionVariant.B else self.caption

    def to_record(self) -> dict[str, Any]:
        """Serialize for the campaigns.generated JSON column."""
        return self.model_dump(mode="json")


# =============================================================================
# Pipeline I/O
# =============================================================================

@dataclass
class GenerationRequest:
    """Everything the pipeline needs for one run."""

    campaign_id: str
    content_type: ContentType
    theme: str
    source_file: str | None = None
    # Local path of the source audio, muxed into the video for music campaigns
    audio_path: str | None = None


@dataclass
class GeneratedImage:
    """Image bytes plus the prompt that produced them."""

    data: bytes
    prompt: str
    content_type: str = "image/png"


@dataclass
class GenerationResult:
    """Output of a successful pipeline run. Nothing is persisted until the worker uploads it."""

    bundle: GenerationBundle
    image: GeneratedImage
    video: bytes


class GenerationStage(str, Enum):
    """Pipeline stages, in order."""
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"


class GenerationState(str, Enum):
    """
    What the generation wizard step shows.

    - idle: nothing has been generated yet
    - running: the task is queued or in progress
    - complete: bundle and assets are ready for review
    - failed: the last run failed; the user may retry or go back
    """
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


class GenerationView(BaseModel):
    """
    Returned by GET /campaigns/{id}/generation.

    Example (failed):
        {
            "state": "failed",
            "stage": "image",
            "progress": 60,
            "message": "Generation failed",
            "error": "Image generation failed: rate limit exceeded",
            "can_retry": true,
            "can_go_back": true
        }
    """

    campaign_id: str
    state: GenerationState
    stage: GenerationStage | None = None
    progress: int = Field(default=0, ge=0, le=100)
    message: str = Field(default="")
    task_id: str | None = None
    error: str | None = None
    can_retry: bool = False
    can_go_back: bool = False


class GenerateResponse(BaseModel):
    """Returned by POST /campaigns/{id}/generate."""

    campaign_id: str
    task_id: str
    status: str = "queued"
    message: str = "Generation started"


# =============================================================================
# Review
# =============================================================================

class PreviewResponse(BaseModel):
    """
    The review screen for a generated campaign.

    displayed_caption follows selected_caption; the bundle itself is
    returned unchanged whichever variant is selected.
    """

    campaign_id: str
    title: str
    content_type: ContentType
    theme: str
    status: str
    selected_caption: CaptionVariant
    displayed_caption: str
    bundle: GenerationBundle
    hashtags: list[str]
    email: EmailCopy
    video_script: str
    image_url: str | None = None
    video_url: str | None = None

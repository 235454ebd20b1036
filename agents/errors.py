# =============================================================================
# agents/errors.py - Generation Errors
# =============================================================================

from __future__ import annotations

from typing import Any

from core.models.generation import GenerationStage


class GenerationError(Exception):
    """
    Error during one stage of the generation pipeline.

    Errors tell the user how to recover, not only what failed.

    Attributes:
        stage: Pipeline stage that failed (text, image or video)
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        stage: GenerationStage,
        code: str = "GENERATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }

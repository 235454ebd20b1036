# =============================================================================
# core/services/upload_service.py - Upload Step Rules
# =============================================================================
# Validates the first wizard step: a content type, a theme and a source
# file. Missing content type and theme are inferred from the filename; the
# step only advances once all three are present.
# =============================================================================

import os
from dataclasses import dataclass

from app.exceptions import FileTooLargeError, IncompleteUploadError, InvalidFileTypeError
from core.models.campaign import ContentType

# Accepted source extensions per content type
CONTENT_TYPE_EXTENSIONS: dict[ContentType, tuple[str, ...]] = {
    ContentType.MUSIC: (".mp3", ".wav", ".m4a", ".flac"),
    ContentType.VIDEO: (".mp4", ".mov", ".avi", ".mkv"),
    ContentType.BOOK: (".txt", ".doc", ".pdf", ".md"),
}

CONTENT_TYPE_LABELS: dict[ContentType, str] = {
    ContentType.MUSIC: "Song/Audio",
    ContentType.VIDEO: "Video",
    ContentType.BOOK: "Text/Book",
}


@dataclass
class UploadSelection:
    """A validated upload step, ready to become a campaign."""

    content_type: ContentType
    theme: str
    filename: str


def file_extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lower()


def accepted_extensions(content_type: ContentType | str | None = None) -> list[str]:
    """
    Extensions the file picker accepts.

    With a content type selected this is that type's set; with none, the
    union of every set.
    """
    if content_type:
        return list(CONTENT_TYPE_EXTENSIONS[ContentType(content_type)])
    return [ext for exts in CONTENT_TYPE_EXTENSIONS.values() for ext in exts]


def detect_content_type(filename: str) -> ContentType | None:
    """Content type whose extensions include the file's, case-insensitively."""
    ext = file_extension(filename)
    for content_type, extensions in CONTENT_TYPE_EXTENSIONS.items():
        if ext in extensions:
            return content_type
    return None


def theme_from_filename(filename: str) -> str:
    """
    Derive a theme from a filename.

    Example: "midnight_city-drive.mp3" -> "Midnight City Drive"
    """
    stem = os.path.splitext(os.path.basename(filename))[0]
    words = stem.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def list_content_types() -> list[dict]:
    """Catalogue for GET /content-types."""
    return [
        {
            "id": content_type.value,
            "label": CONTENT_TYPE_LABELS[content_type],
            "extensions": list(extensions),
        }
        for content_type, extensions in CONTENT_TYPE_EXTENSIONS.items()
    ]


def validate_selection(
    content_type: ContentType | str | None,
    theme: str | None,
    filename: str | None,
    file_size: int | None = None,
    max_size_bytes: int | None = None,
) -> UploadSelection:
    """
    Validate the upload step.

    Args:
        content_type: Selected content type, or None to infer from the file
        theme: Theme/vibe text, or None to derive from the filename
        filename: Name of the selected source file
        file_size: Size in bytes, checked against max_size_bytes when both are given
        max_size_bytes: Upload limit

    Returns:
        UploadSelection with all three fields present

    Raises:
        InvalidFileTypeError: File extension isn't accepted for the selection
        FileTooLargeError: File exceeds the upload limit
        IncompleteUploadError: Content type, theme or file still missing
    """
    selected = ContentType(content_type) if content_type else None
    theme = theme.strip() if theme else ""

    if filename:
        allowed = accepted_extensions(selected)
        if file_extension(filename) not in allowed:
            raise InvalidFileTypeError(filename, allowed)

        if selected is None:
            selected = detect_content_type(filename)
        if not theme:
            theme = theme_from_filename(filename)

    if file_size is not None and max_size_bytes is not None and file_size > max_size_bytes:
        raise FileTooLargeError(file_size / (1024 * 1024), max_size_bytes // (1024 * 1024))

    missing = []
    if selected is None:
        missing.append("content_type")
    if not theme:
        missing.append("theme")
    if not filename:
        missing.append("file")
    if missing:
        raise IncompleteUploadError(missing)

    return UploadSelection(content_type=selected, theme=theme, filename=filename)

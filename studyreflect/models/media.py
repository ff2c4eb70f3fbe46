from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class UploadedFile:
    """A multipart upload persisted to a temp file for the life of one request."""

    path: Path
    filename: str  # original client-side name
    content_type: str | None
    size_bytes: int


@dataclass(frozen=True)
class AudioPayload:
    """
    An audio-only file ready for (or already past) the size policy.

    Same path as the upload when the source was audio; a derived temp file
    when it was extracted from video and/or compressed.
    """

    path: Path
    size_bytes: int
    extracted: bool = False
    compressed: bool = False


@dataclass(frozen=True)
class TranscriptResult:
    text: str

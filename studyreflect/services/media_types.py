from __future__ import annotations

from pathlib import Path

from studyreflect.core.config import Settings
from studyreflect.models.media import MediaKind


def extension_of(filename: str | None) -> str:
    return Path(filename or "").suffix.lower()


def classify(filename: str | None, settings: Settings) -> MediaKind:
    """
    Classify by extension allow-list only (no content sniffing).
    """
    ext = extension_of(filename)
    if not ext:
        return MediaKind.UNSUPPORTED
    if ext in settings.audio_extensions:
        return MediaKind.AUDIO
    if ext in settings.video_extensions:
        return MediaKind.VIDEO
    if ext in settings.image_extensions:
        return MediaKind.IMAGE
    return MediaKind.UNSUPPORTED


def is_transcribable(kind: MediaKind) -> bool:
    return kind in (MediaKind.AUDIO, MediaKind.VIDEO)

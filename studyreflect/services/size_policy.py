from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from studyreflect.core.config import MB, Settings
from studyreflect.exceptions import PayloadTooLarge


class SizeDecision(str, Enum):
    PASS_THROUGH = "pass_through"
    COMPRESS = "compress"
    REJECT = "reject"


def format_megabytes(size_bytes: int) -> str:
    """
    10485760 -> "10MB", 1572864 -> "1.5MB"
    """
    mb = size_bytes / MB
    if mb == int(mb):
        return f"{int(mb)}MB"
    return f"{mb:.1f}MB"


@dataclass(frozen=True)
class SizePolicy:
    """
    Threshold-based size checks.

    upload_limit_bytes: uploads above this are rejected (413).
    compress_threshold_bytes: audio above this is re-encoded once before it
    is sent to the transcription service.
    """

    upload_limit_bytes: int
    compress_threshold_bytes: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "SizePolicy":
        return cls(
            upload_limit_bytes=settings.upload_limit_bytes,
            compress_threshold_bytes=settings.compress_threshold_bytes,
        )

    @property
    def max_size_label(self) -> str:
        return format_megabytes(self.upload_limit_bytes)

    def check_upload(self, size_bytes: int | None) -> SizeDecision:
        if size_bytes is not None and size_bytes > self.upload_limit_bytes:
            return SizeDecision.REJECT
        return SizeDecision.PASS_THROUGH

    def check_audio(self, size_bytes: int) -> SizeDecision:
        if size_bytes > self.compress_threshold_bytes:
            return SizeDecision.COMPRESS
        return SizeDecision.PASS_THROUGH

    def enforce_upload(self, size_bytes: int | None) -> None:
        if self.check_upload(size_bytes) is SizeDecision.REJECT:
            raise PayloadTooLarge(self.max_size_label)

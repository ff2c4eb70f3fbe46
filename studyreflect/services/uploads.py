from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import BinaryIO

from studyreflect.exceptions import PayloadTooLarge
from studyreflect.models.media import UploadedFile
from studyreflect.services.media_types import extension_of
from studyreflect.services.size_policy import SizePolicy

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class ScratchFiles:
    """
    Temp files owned by one request.

    Every file the request creates (the upload itself, extracted audio,
    compressed audio) is tracked here and removed on ``cleanup()``, which
    the endpoint calls from ``finally`` / ``__exit__``.
    """

    def __init__(self) -> None:
        self._paths: list[Path] = []

    def track(self, path: Path) -> Path:
        if path not in self._paths:
            self._paths.append(path)
        return path

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def cleanup(self) -> list[Path]:
        removed: list[Path] = []
        for p in self._paths:
            try:
                if p.exists():
                    p.unlink()
                    removed.append(p)
            except OSError as e:
                logger.warning("Could not remove temp file", extra={"path": str(p), "error": str(e)})
        self._paths = []
        return removed

    def __enter__(self) -> "ScratchFiles":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()


def unique_upload_name(original_filename: str | None, prefix: str = "file") -> str:
    """
    "talk.MOV" -> "file-1730000000000-123456789.mov"
    """
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{prefix}-{suffix}{extension_of(original_filename)}"


def save_upload(
    source: BinaryIO,
    *,
    filename: str,
    content_type: str | None,
    upload_dir: Path,
    policy: SizePolicy,
    scratch: ScratchFiles,
) -> UploadedFile:
    """
    Stream an upload to a fresh temp file, enforcing the upload limit while
    copying (clients do not always declare a size).

    The target is tracked in ``scratch`` before the first byte is written,
    so a partial file is cleaned up along with everything else.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = scratch.track(upload_dir / unique_upload_name(filename))

    if hasattr(source, "seek"):
        source.seek(0)

    written = 0
    with target.open("wb") as buffer:
        while True:
            chunk = source.read(_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > policy.upload_limit_bytes:
                raise PayloadTooLarge(policy.max_size_label)
            buffer.write(chunk)

    logger.info(
        "Upload stored",
        extra={"file_name": filename, "path": str(target), "size_bytes": written},
    )
    return UploadedFile(path=target, filename=filename, content_type=content_type, size_bytes=written)

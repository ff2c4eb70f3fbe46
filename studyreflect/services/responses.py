from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from studyreflect.core.config import Settings
from studyreflect.exceptions import InvalidResponse, NoFileProvided, UnsupportedFormat
from studyreflect.models.media import MediaKind
from studyreflect.services.media_types import classify
from studyreflect.services.pipeline import TranscriptionPipeline
from studyreflect.services.size_policy import SizePolicy
from studyreflect.services.uploads import ScratchFiles, save_upload

logger = logging.getLogger(__name__)


class ResponseType(str, Enum):
    TEXT = "text"
    AUDIO_UPLOAD = "audio-upload"
    AUDIO_RECORD = "audio-record"
    IMAGE_UPLOAD = "image-upload"


class QuestionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    type: ResponseType
    content: str | None = None
    file_name: str | None = Field(default=None, alias="fileName")
    size_bytes: int | None = Field(default=None, alias="sizeBytes")


@dataclass(frozen=True)
class ResponseFile:
    """The file part of a multipart response, already unwrapped from the framework."""

    stream: BinaryIO
    filename: str
    content_type: str | None = None
    declared_size: int | None = None


def record_response(
    question: str,
    response_type: ResponseType,
    *,
    text: str | None,
    upload: ResponseFile | None,
    settings: Settings,
    pipeline: TranscriptionPipeline,
    scratch: ScratchFiles,
) -> QuestionResponse:
    """
    Accept a student's answer to one quiz question.

    Text is echoed back. Audio (uploaded or recorded in the browser) is
    transcribed through the same pipeline as /api/transcribe. Images are
    validated and size-checked but not kept.
    """
    if response_type is ResponseType.TEXT:
        body = (text or "").strip()
        if not body:
            raise InvalidResponse("Please type a response before submitting.")
        return QuestionResponse(question=question, type=response_type, content=body)

    if upload is None or not upload.filename:
        raise NoFileProvided()

    kind = classify(upload.filename, settings)

    if response_type is ResponseType.IMAGE_UPLOAD:
        if kind is not MediaKind.IMAGE:
            raise UnsupportedFormat(
                upload.filename,
                "Unsupported image format. Please upload JPG, PNG, GIF, or other supported image files.",
            )
        policy = SizePolicy(
            upload_limit_bytes=settings.image_limit_bytes,
            compress_threshold_bytes=settings.image_limit_bytes,
        )
        policy.enforce_upload(upload.declared_size)
        stored = save_upload(
            upload.stream,
            filename=upload.filename,
            content_type=upload.content_type,
            upload_dir=Path(settings.upload_dir),
            policy=policy,
            scratch=scratch,
        )
        logger.info("Image response received", extra={"file_name": upload.filename, "size_bytes": stored.size_bytes})
        return QuestionResponse(
            question=question,
            type=response_type,
            file_name=upload.filename,
            size_bytes=stored.size_bytes,
        )

    if kind is not MediaKind.AUDIO:
        raise UnsupportedFormat(
            upload.filename,
            "Unsupported audio format. Please upload MP3, WAV, M4A, or other supported audio files.",
        )

    pipeline.policy.enforce_upload(upload.declared_size)
    stored = save_upload(
        upload.stream,
        filename=upload.filename,
        content_type=upload.content_type,
        upload_dir=Path(settings.upload_dir),
        policy=pipeline.policy,
        scratch=scratch,
    )
    transcript = pipeline.run(stored, scratch).result()
    return QuestionResponse(
        question=question,
        type=response_type,
        content=transcript.text,
        file_name=upload.filename,
        size_bytes=stored.size_bytes,
    )

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, File, UploadFile
from pydantic import BaseModel

from studyreflect.dependencies import PipelineDep, SettingsDep
from studyreflect.exceptions import InternalError, NoFileProvided, StudyReflectError, UnsupportedFormat
from studyreflect.services.media_types import classify, is_transcribable
from studyreflect.services.uploads import ScratchFiles, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["transcribe"])


class TranscribeResponse(BaseModel):
    transcript: str


@router.post("/transcribe", response_model=TranscribeResponse)
def transcribe_upload(
    settings: SettingsDep,
    pipeline: PipelineDep,
    file: UploadFile | None = File(None),
) -> TranscribeResponse:
    """
    Upload an audio or video file and get its transcript back.

    Every temp file created for the request is removed before the response
    is sent, whether the request succeeds or fails.
    """
    if file is None or not file.filename:
        raise NoFileProvided()

    # Nothing has been written to disk yet.
    pipeline.policy.enforce_upload(file.size)
    if not is_transcribable(classify(file.filename, settings)):
        raise UnsupportedFormat(file.filename)

    logger.info(
        "Processing upload",
        extra={"file_name": file.filename, "content_type": file.content_type, "declared_size": file.size},
    )

    with ScratchFiles() as scratch:
        try:
            stored = save_upload(
                file.file,
                filename=file.filename,
                content_type=file.content_type,
                upload_dir=Path(settings.upload_dir),
                policy=pipeline.policy,
                scratch=scratch,
            )
            run = pipeline.run(stored, scratch)
        except StudyReflectError:
            raise
        except Exception as e:
            logger.exception("Error processing file", extra={"file_name": file.filename})
            raise InternalError(details=str(e)) from e

    return TranscribeResponse(transcript=run.result().text)

from __future__ import annotations

import logging

from fastapi import APIRouter, File, Form, UploadFile

from studyreflect.dependencies import PipelineDep, SettingsDep
from studyreflect.exceptions import InternalError, StudyReflectError
from studyreflect.services.responses import QuestionResponse, ResponseFile, ResponseType, record_response
from studyreflect.services.uploads import ScratchFiles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/questions", tags=["responses"])


@router.post("/respond", response_model=QuestionResponse)
def respond_to_question(
    settings: SettingsDep,
    pipeline: PipelineDep,
    question: str = Form(..., min_length=1),
    response_type: ResponseType = Form(...),
    text: str | None = Form(None),
    file: UploadFile | None = File(None),
) -> QuestionResponse:
    """Answer one quiz question with text, an audio clip, or an image."""
    upload = None
    if file is not None and file.filename:
        upload = ResponseFile(
            stream=file.file,
            filename=file.filename,
            content_type=file.content_type,
            declared_size=file.size,
        )

    with ScratchFiles() as scratch:
        try:
            return record_response(
                question,
                response_type,
                text=text,
                upload=upload,
                settings=settings,
                pipeline=pipeline,
                scratch=scratch,
            )
        except StudyReflectError:
            raise
        except Exception as e:
            logger.exception("Error recording response", extra={"response_type": response_type.value})
            raise InternalError(details=str(e)) from e

"""
Upload -> transcript pipeline.

The stages run in a fixed order:

    received -> type_detected -> audio_ready -> size_checked -> transcribed

and any stage may move the run to ``failed``. Each stage is one transition
function that reads and updates a ``PipelineRun`` and returns a tagged
``StepResult``. The pipeline never deletes files itself; every file it
derives is tracked in the request's ``ScratchFiles`` and removed by the
endpoint when the request completes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from studyreflect.core.config import Settings
from studyreflect.exceptions import InternalError, StudyReflectError, UnsupportedFormat
from studyreflect.models.media import AudioPayload, MediaKind, TranscriptResult, UploadedFile
from studyreflect.services.audio_utils import AudioCodec
from studyreflect.services.media_types import classify, is_transcribable
from studyreflect.services.size_policy import SizeDecision, SizePolicy
from studyreflect.services.stt import TranscriptionClient
from studyreflect.services.uploads import ScratchFiles

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    RECEIVED = "received"
    TYPE_DETECTED = "type_detected"
    AUDIO_READY = "audio_ready"
    SIZE_CHECKED = "size_checked"
    TRANSCRIBED = "transcribed"
    FAILED = "failed"


TERMINAL_STAGES = frozenset({Stage.TRANSCRIBED, Stage.FAILED})


@dataclass
class PipelineRun:
    upload: UploadedFile
    stage: Stage = Stage.RECEIVED
    kind: MediaKind | None = None
    audio: AudioPayload | None = None
    transcript: TranscriptResult | None = None
    error: StudyReflectError | None = None
    history: list[Stage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.stage is Stage.TRANSCRIBED

    def result(self) -> TranscriptResult:
        """Return the transcript, or raise the error that stopped the run."""
        if self.error is not None:
            raise self.error
        if self.transcript is None:
            raise InternalError(details=f"Pipeline stopped at {self.stage.value} without a transcript")
        return self.transcript

    def require_audio(self) -> AudioPayload:
        if self.audio is None:
            raise InternalError(details=f"No audio prepared before {self.stage.value}")
        return self.audio


@dataclass(frozen=True)
class StepResult:
    ok: bool
    stage: Stage
    error: StudyReflectError | None = None

    @classmethod
    def success(cls, stage: Stage) -> "StepResult":
        return cls(ok=True, stage=stage)

    @classmethod
    def failure(cls, error: StudyReflectError) -> "StepResult":
        return cls(ok=False, stage=Stage.FAILED, error=error)


class TranscriptionPipeline:
    def __init__(
        self,
        *,
        settings: Settings,
        codec: AudioCodec,
        transcriber: TranscriptionClient,
        policy: SizePolicy | None = None,
    ) -> None:
        self.settings = settings
        self.codec = codec
        self.transcriber = transcriber
        self.policy = policy or SizePolicy.from_settings(settings)

        self._transitions: dict[Stage, Callable[[PipelineRun, ScratchFiles], StepResult]] = {
            Stage.RECEIVED: self.detect_type,
            Stage.TYPE_DETECTED: self.prepare_audio,
            Stage.AUDIO_READY: self.apply_size_policy,
            Stage.SIZE_CHECKED: self.transcribe,
        }

    # ----------------------------
    # Transitions
    # ----------------------------

    def detect_type(self, run: PipelineRun, scratch: ScratchFiles) -> StepResult:
        kind = classify(run.upload.filename, self.settings)
        if not is_transcribable(kind):
            return StepResult.failure(UnsupportedFormat(run.upload.filename))
        run.kind = kind
        return StepResult.success(Stage.TYPE_DETECTED)

    def prepare_audio(self, run: PipelineRun, scratch: ScratchFiles) -> StepResult:
        if run.kind is MediaKind.VIDEO:
            logger.info("Extracting audio from video", extra={"file_name": run.upload.filename})
            audio_path = scratch.track(self.codec.extract_audio(run.upload.path))
            run.audio = AudioPayload(path=audio_path, size_bytes=audio_path.stat().st_size, extracted=True)
        else:
            run.audio = AudioPayload(path=run.upload.path, size_bytes=run.upload.size_bytes)
        return StepResult.success(Stage.AUDIO_READY)

    def apply_size_policy(self, run: PipelineRun, scratch: ScratchFiles) -> StepResult:
        audio = run.require_audio()

        if self.policy.check_audio(audio.size_bytes) is SizeDecision.PASS_THROUGH:
            return StepResult.success(Stage.SIZE_CHECKED)

        logger.info(
            "Audio over compression threshold, compressing",
            extra={"size_bytes": audio.size_bytes, "threshold_bytes": self.policy.compress_threshold_bytes},
        )
        compressed_path = scratch.track(self.codec.compress(audio.path))
        compressed_size = compressed_path.stat().st_size

        if compressed_size > audio.size_bytes:
            # Single fixed profile: no second attempt, keep the smaller source.
            logger.warning(
                "Compressed audio is larger than its source, sending source",
                extra={"source_bytes": audio.size_bytes, "compressed_bytes": compressed_size},
            )
            compressed_path.unlink(missing_ok=True)
            return StepResult.success(Stage.SIZE_CHECKED)

        run.audio = AudioPayload(
            path=compressed_path,
            size_bytes=compressed_size,
            extracted=audio.extracted,
            compressed=True,
        )
        return StepResult.success(Stage.SIZE_CHECKED)

    def transcribe(self, run: PipelineRun, scratch: ScratchFiles) -> StepResult:
        audio = run.require_audio()

        logger.info("Transcribing audio", extra={"path": str(audio.path), "size_bytes": audio.size_bytes})
        text = self.transcriber.transcribe(audio.path)
        run.transcript = TranscriptResult(text=text)
        return StepResult.success(Stage.TRANSCRIBED)

    # ----------------------------
    # Driver
    # ----------------------------

    def step(self, run: PipelineRun, scratch: ScratchFiles) -> StepResult:
        transition = self._transitions[run.stage]
        try:
            result = transition(run, scratch)
        except StudyReflectError as e:
            result = StepResult.failure(e)
        except Exception as e:
            logger.exception("Unexpected pipeline error", extra={"stage": run.stage.value})
            result = StepResult.failure(InternalError(details=str(e)))

        run.history.append(run.stage)
        run.stage = result.stage
        if not result.ok:
            run.error = result.error
        return result

    def run(self, upload: UploadedFile, scratch: ScratchFiles) -> PipelineRun:
        run = PipelineRun(upload=upload)
        while run.stage not in TERMINAL_STAGES:
            self.step(run, scratch)

        if run.ok:
            logger.info(
                "Pipeline completed",
                extra={
                    "file_name": upload.filename,
                    "kind": run.kind.value if run.kind else None,
                    "extracted": bool(run.audio and run.audio.extracted),
                    "compressed": bool(run.audio and run.audio.compressed),
                },
            )
        else:
            logger.error(
                "Pipeline failed",
                extra={"file_name": upload.filename, "failed_after": run.history[-1].value, "error": str(run.error)},
            )
        return run

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from studyreflect.core.config import Settings
from studyreflect.exceptions import TranscriptionServiceFailure

logger = logging.getLogger(__name__)


class TranscriptionClient(ABC):
    """Speech-to-text backend: one audio file in, plain text out."""

    @abstractmethod
    def transcribe(self, audio_path: Path) -> str:
        """
        Raises:
            TranscriptionServiceFailure: if the backend fails. The backend's
                own message is carried verbatim in ``details``.
        """


class OpenAIWhisperClient(TranscriptionClient):
    """
    OpenAI audio transcription API.

    No retries: the SDK's built-in retry loop is turned off so a remote
    failure reaches the caller as-is.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = "whisper-1",
        timeout_sec: float = 180.0,
        client: Any = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout_sec = timeout_sec
        self._client = client

    def _get_client(self):
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise TranscriptionServiceFailure("OPENAI_API_KEY is missing")

        from openai import OpenAI

        self._client = OpenAI(api_key=self.api_key, timeout=self.timeout_sec, max_retries=0)
        return self._client

    def transcribe(self, audio_path: Path) -> str:
        client = self._get_client()
        try:
            with open(audio_path, "rb") as fh:
                result = client.audio.transcriptions.create(file=fh, model=self.model)
        except Exception as e:
            logger.exception("Whisper transcription failed", extra={"audio_path": str(audio_path)})
            raise TranscriptionServiceFailure(str(e), cause=e) from e

        return (getattr(result, "text", None) or "").strip()


class LocalWhisperClient(TranscriptionClient):
    """
    faster-whisper running in-process.

    The model is loaded on first use and kept on the instance, so build one
    client per process (see dependencies.get_transcriber).
    """

    def __init__(self, model_size: str = "base", *, device: str = "cpu", compute_type: str = "int8") -> None:
        self.model_size = model_size
        self.device = device
        self.compute_type = compute_type
        self._model = None
        self._model_lock = threading.Lock()

    def _get_model(self):
        with self._model_lock:
            if self._model is None:
                from faster_whisper import WhisperModel

                self._model = WhisperModel(self.model_size, device=self.device, compute_type=self.compute_type)
        return self._model

    def transcribe(self, audio_path: Path) -> str:
        try:
            model = self._get_model()
            segments_iter, _info = model.transcribe(str(audio_path), vad_filter=True, beam_size=5)
            parts = [(s.text or "").strip() for s in segments_iter]
        except Exception as e:
            logger.exception("Local whisper transcription failed", extra={"audio_path": str(audio_path)})
            raise TranscriptionServiceFailure(str(e), cause=e) from e

        return " ".join(p for p in parts if p).strip()


def build_transcriber(settings: Settings) -> TranscriptionClient:
    backend = (settings.stt_backend or "openai").strip().lower()
    if backend == "local":
        return LocalWhisperClient(
            settings.local_whisper_model,
            device=settings.local_whisper_device,
            compute_type=settings.local_whisper_compute,
        )
    if backend == "openai":
        return OpenAIWhisperClient(
            settings.openai_api_key,
            model=settings.whisper_model,
            timeout_sec=settings.openai_timeout_sec,
        )
    raise ValueError(f"Unknown STT backend: {settings.stt_backend}")

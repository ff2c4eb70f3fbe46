"""FastAPI dependency injection configuration."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from studyreflect.core.config import Settings, get_settings
from studyreflect.services.audio_utils import AudioCodec, FfmpegCodec
from studyreflect.services.llm.client import ChatClient, build_chat_client
from studyreflect.services.pipeline import TranscriptionPipeline
from studyreflect.services.stt import TranscriptionClient, build_transcriber

SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache(maxsize=4)
def _transcriber_for(settings: Settings) -> TranscriptionClient:
    # One client per settings value, so a local whisper model is loaded once.
    return build_transcriber(settings)


def get_codec(settings: SettingsDep) -> AudioCodec:
    """Returns the ffmpeg-backed codec for the configured binary."""
    return FfmpegCodec(settings.ffmpeg_bin)


def get_transcriber(settings: SettingsDep) -> TranscriptionClient:
    """Returns the speech-to-text backend selected by settings."""
    return _transcriber_for(settings)


def get_chat_client(settings: SettingsDep) -> ChatClient:
    """Returns the chat-completion backend selected by settings."""
    return build_chat_client(settings)


def get_pipeline(
    settings: SettingsDep,
    codec: Annotated[AudioCodec, Depends(get_codec)],
    transcriber: Annotated[TranscriptionClient, Depends(get_transcriber)],
) -> TranscriptionPipeline:
    """Builds a pipeline from explicitly injected collaborators."""
    return TranscriptionPipeline(settings=settings, codec=codec, transcriber=transcriber)


PipelineDep = Annotated[TranscriptionPipeline, Depends(get_pipeline)]
ChatClientDep = Annotated[ChatClient, Depends(get_chat_client)]

from dataclasses import replace
from pathlib import Path

import pytest

from studyreflect.core.config import Settings, get_settings
from studyreflect.dependencies import get_chat_client, get_codec, get_transcriber
from studyreflect.exceptions import TranscodeFailure, TranscriptionServiceFailure
from studyreflect.main import app
from studyreflect.services.audio_utils import AudioCodec
from studyreflect.services.llm.client import ChatClient, ChatCompletionError
from studyreflect.services.stt import TranscriptionClient


class FakeCodec(AudioCodec):
    """Writes dummy files of a chosen size instead of calling ffmpeg."""

    def __init__(self, extracted_size: int = 1024, compressed_size: int = 256, fail_on: str | None = None):
        self.extracted_size = extracted_size
        self.compressed_size = compressed_size
        self.fail_on = fail_on
        self.calls: list[tuple[str, Path]] = []

    def extract_audio(self, input_path: Path) -> Path:
        self.calls.append(("extract", input_path))
        if self.fail_on == "extract":
            raise TranscodeFailure("extract", "Invalid data found when processing input")
        out = input_path.with_name(f"{input_path.stem}_audio.wav")
        out.write_bytes(b"\0" * self.extracted_size)
        return out

    def compress(self, input_path: Path) -> Path:
        self.calls.append(("compress", input_path))
        if self.fail_on == "compress":
            raise TranscodeFailure("compress", "Conversion failed!")
        out = input_path.with_name(f"{input_path.stem}_compressed.m4a")
        out.write_bytes(b"\0" * self.compressed_size)
        return out

    @property
    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


class FakeTranscriber(TranscriptionClient):
    def __init__(self, text: str = "photosynthesis turns light into chemical energy", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[Path] = []
        self.sizes: list[int] = []

    def transcribe(self, audio_path: Path) -> str:
        self.calls.append(audio_path)
        self.sizes.append(audio_path.stat().st_size)
        if self.error is not None:
            raise self.error
        return self.text


class FakeChat(ChatClient):
    """Answers each prompt kind with a canned reply."""

    def __init__(self, questions: str = "", summary: str = "", mind_map: str = "", fail: bool = False):
        self.replies = {"questions": questions, "summary": summary, "mind_map": mind_map}
        self.fail = fail
        self.prompts: list[str] = []

    def complete(self, prompt, *, system=None, max_tokens=400, temperature=0.7):
        self.prompts.append(prompt)
        if self.fail:
            raise ChatCompletionError("Failed to generate with ChatGPT: 500")
        if "mind map generator" in prompt:
            return self.replies["mind_map"]
        if "reflection transcript" in prompt:
            return self.replies["summary"]
        return self.replies["questions"]


def make_settings(tmp_path: Path, **overrides) -> Settings:
    return replace(Settings(), upload_dir=str(tmp_path / "uploads"), **overrides)


def leftover_files(settings: Settings) -> list[Path]:
    upload_dir = Path(settings.upload_dir)
    if not upload_dir.exists():
        return []
    return sorted(upload_dir.iterdir())


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def codec():
    return FakeCodec()


@pytest.fixture
def transcriber():
    return FakeTranscriber()


@pytest.fixture
def wire(settings, codec, transcriber):
    """
    Point the app at fake collaborators.

    Returns a function so a test can swap in its own settings/codec/
    transcriber/chat before making requests.
    """

    def _wire(settings=settings, codec=codec, transcriber=transcriber, chat=None):
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_codec] = lambda: codec
        app.dependency_overrides[get_transcriber] = lambda: transcriber
        if chat is not None:
            app.dependency_overrides[get_chat_client] = lambda: chat
        return settings

    _wire()
    yield _wire
    app.dependency_overrides.clear()

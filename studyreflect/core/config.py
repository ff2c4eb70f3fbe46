import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Always load .env from the project root (stable, regardless of CWD)
BASE_DIR = Path(__file__).resolve().parents[2]
load_dotenv(dotenv_path=BASE_DIR / ".env", override=False)

MB = 1024 * 1024


def _extensions(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    out: list[str] = []
    for part in raw.split(","):
        ext = part.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        out.append(ext)
    return tuple(out)


@dataclass(frozen=True)
class Settings:
    env: str = os.getenv("ENV", "local")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # OpenAI (Whisper + chat completions)
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_timeout_sec: float = float(os.getenv("OPENAI_TIMEOUT_SEC", "180"))
    openai_max_retries: int = int(os.getenv("OPENAI_MAX_RETRIES", "2"))
    whisper_model: str = os.getenv("STUDYREFLECT_WHISPER_MODEL", "whisper-1")

    # openai | local
    stt_backend: str = os.getenv("STUDYREFLECT_STT_BACKEND", "openai")
    local_whisper_model: str = os.getenv("STUDYREFLECT_LOCAL_WHISPER_MODEL", "base")  # tiny/base/small/medium/large-v3
    local_whisper_device: str = os.getenv("STUDYREFLECT_LOCAL_WHISPER_DEVICE", "cpu")
    local_whisper_compute: str = os.getenv("STUDYREFLECT_LOCAL_WHISPER_COMPUTE", "int8")

    # openai | ollama
    llm_backend: str = os.getenv("STUDYREFLECT_LLM_BACKEND", "openai")
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "qwen2.5:7b-instruct")

    ffmpeg_bin: str = os.getenv("FFMPEG_BIN", "ffmpeg")
    upload_dir: str = os.getenv(
        "STUDYREFLECT_UPLOAD_DIR",
        str(Path(tempfile.gettempdir()) / "studyreflect-uploads"),
    )

    # Size policy
    upload_limit_bytes: int = int(float(os.getenv("STUDYREFLECT_MAX_UPLOAD_MB", "100")) * MB)
    compress_threshold_bytes: int = int(float(os.getenv("STUDYREFLECT_COMPRESS_THRESHOLD_MB", "24")) * MB)
    image_limit_bytes: int = int(float(os.getenv("STUDYREFLECT_MAX_IMAGE_MB", "10")) * MB)

    audio_extensions: tuple[str, ...] = _extensions(
        "STUDYREFLECT_AUDIO_EXTENSIONS",
        ".mp3,.wav,.m4a,.aac,.ogg,.flac,.amr,.wma",
    )
    video_extensions: tuple[str, ...] = _extensions(
        "STUDYREFLECT_VIDEO_EXTENSIONS",
        ".mp4,.mov,.avi,.mkv,.wmv,.flv,.webm",
    )
    image_extensions: tuple[str, ...] = _extensions(
        "STUDYREFLECT_IMAGE_EXTENSIONS",
        ".jpg,.jpeg,.png,.gif,.bmp,.webp",
    )

    cors_origins: tuple[str, ...] = tuple(
        o.strip() for o in os.getenv("STUDYREFLECT_CORS_ORIGINS", "*").split(",") if o.strip()
    )
    port: int = int(os.getenv("PORT", "3001"))


settings = Settings()


def get_settings() -> Settings:
    return settings

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from studyreflect.exceptions import TranscodeFailure

logger = logging.getLogger(__name__)


class AudioCodec(ABC):
    """
    Media decoding capability used by the pipeline.

    Each call writes exactly one new file and returns its path; the caller
    owns deletion. On failure no output file is left behind.
    """

    @abstractmethod
    def extract_audio(self, input_path: Path) -> Path:
        """Demultiplex a video container into an audio-only file."""

    @abstractmethod
    def compress(self, input_path: Path) -> Path:
        """Re-encode audio to a smaller mono, low-bitrate file."""


class FfmpegCodec(AudioCodec):
    """
    ffmpeg command-line backend.

    Profiles are fixed:
      extract  -> 16-bit PCM WAV, mono, 16 kHz
      compress -> AAC 64 kbit/s in .m4a, mono, 16 kHz
    """

    def __init__(self, ffmpeg_bin: str = "ffmpeg") -> None:
        self.ffmpeg_bin = ffmpeg_bin

    def extract_audio(self, input_path: Path) -> Path:
        out_wav = input_path.with_name(f"{input_path.stem}_audio.wav")
        args = [
            self.ffmpeg_bin,
            "-y",
            "-i",
            str(input_path),
            "-vn",
            "-acodec",
            "pcm_s16le",
            "-ac",
            "1",
            "-ar",
            "16000",
            str(out_wav),
        ]
        return self._run("extract", args, out_wav)

    def compress(self, input_path: Path) -> Path:
        out_m4a = input_path.with_name(f"{input_path.stem}_compressed.m4a")
        args = [
            self.ffmpeg_bin,
            "-y",
            "-i",
            str(input_path),
            "-vn",
            "-c:a",
            "aac",
            "-b:a",
            "64k",
            "-ac",
            "1",
            "-ar",
            "16000",
            str(out_m4a),
        ]
        return self._run("compress", args, out_m4a)

    def _run(self, operation: str, args: list[str], out_path: Path) -> Path:
        logger.info("ffmpeg %s started", operation, extra={"input": args[3], "output": str(out_path)})
        try:
            p = subprocess.run(args, capture_output=True, text=True)
        except OSError as e:
            out_path.unlink(missing_ok=True)
            raise TranscodeFailure(operation, f"ffmpeg not found or not working: {e}") from e

        if p.returncode != 0:
            out_path.unlink(missing_ok=True)
            raise TranscodeFailure(operation, p.stderr.strip() or p.stdout.strip() or None)

        if not out_path.exists():
            raise TranscodeFailure(operation, "ffmpeg succeeded but produced no output file")

        logger.info(
            "ffmpeg %s completed",
            operation,
            extra={"output": str(out_path), "size_bytes": out_path.stat().st_size},
        )
        return out_path

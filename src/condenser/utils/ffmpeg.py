from __future__ import annotations

import json
import subprocess
from pathlib import Path

from condenser.exceptions import CondenserError
from condenser.utils.checks import find_binary, require_binary

PCM_CODEC = "pcm_s16le"
PCM_FORMAT = "s16le"
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHANNELS = 2

ENCODE_ARGS: dict[str, list[str]] = {
    "mp3": ["-c:a", "libmp3lame", "-b:a", "192k", "-f", "mp3"],
    "wav": ["-c:a", PCM_CODEC, "-f", "wav"],
    "flac": ["-c:a", "flac", "-f", "flac"],
    "aac": ["-c:a", "aac", "-b:a", "192k", "-f", "adts"],
}


def ensure_ffmpeg() -> None:
    require_binary("ffmpeg")


def build_decode_cmd(
    media: str | Path,
    *,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    channels: int = DEFAULT_CHANNELS,
) -> list[str]:
    """Decode the first audio stream of `media` to raw PCM on stdout."""
    return [
        "ffmpeg",
        "-hide_banner",
        "-loglevel",
        "error",
        "-i",
        str(media),
        "-vn",
        "-acodec",
        PCM_CODEC,
        "-ar",
        str(sample_rate),
        "-ac",
        str(channels),
        "-f",
        PCM_FORMAT,
        "pipe:1",
    ]


def build_encode_cmd(fmt: str, *, sample_rate: int, channels: int) -> list[str]:
    """Encode raw PCM read from stdin into `fmt`, written to stdout."""
    try:
        codec_args = ENCODE_ARGS[fmt]
    except KeyError:
        raise CondenserError(
            f"Unsupported output format '{fmt}'. Use one of: {', '.join(ENCODE_ARGS)}."
        ) from None
    return [
        "ffmpeg",
        "-hide_banner",
        "-loglevel",
        "error",
        "-f",
        PCM_FORMAT,
        "-ar",
        str(sample_rate),
        "-ac",
        str(channels),
        "-i",
        "pipe:0",
        *codec_args,
        "pipe:1",
    ]


def run_ffmpeg_bytes(cmd: list[str], *, input_bytes: bytes | None = None) -> bytes:
    """Run ffmpeg with binary pipes; returns stdout."""
    proc = subprocess.run(cmd, input=input_bytes, capture_output=True)
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise RuntimeError(f"ffmpeg failed.\nSTDERR:\n{stderr}")
    return proc.stdout


def probe_audio_streams(path: str | Path) -> list[dict] | None:
    ffprobe = find_binary("ffprobe")
    if not ffprobe:
        return None
    proc = subprocess.run(
        [
            ffprobe,
            "-v",
            "error",
            "-select_streams",
            "a",
            "-show_streams",
            "-of",
            "json",
            str(path),
        ],
        capture_output=True,
        text=True,
    )
    if proc.returncode != 0:
        return None
    try:
        data = json.loads(proc.stdout)
    except json.JSONDecodeError:
        return None
    return [
        {
            "index": stream.get("index"),
            "codec": stream.get("codec_name"),
            "channels": stream.get("channels"),
            "sample_rate": int(stream["sample_rate"]) if stream.get("sample_rate") else None,
            "language": (stream.get("tags") or {}).get("language"),
        }
        for stream in data.get("streams", [])
    ]

"""
Audio backend for condenser.

This module decodes media to PCM, cuts out the speech periods, joins them
and encodes the result.

Responsibilities:
- Decode the first audio stream of a media file to 16-bit PCM
- Slice PCM by millisecond periods and concatenate the slices
- Encode PCM to the configured output format

Does NOT:
- Decide which periods to keep (see services.periods)
- Write files (the pipeline does)

Notes:
- The core treats the backend as opaque; anything satisfying AudioBackend
  can be injected, which is how tests avoid ffmpeg.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

from condenser.domain.subtitles import Period
from condenser.exceptions import CondenserError, DecodeError
from condenser.utils import ffmpeg
from condenser.utils.logging import get_logger

log = get_logger(__name__)

BYTES_PER_SAMPLE = 2


@dataclass(frozen=True)
class DecodedAudio:
    sample_rate: int
    channel_count: int
    pcm: bytes = b""

    @property
    def frame_size(self) -> int:
        return self.channel_count * BYTES_PER_SAMPLE

    @property
    def total_samples(self) -> int:
        return len(self.pcm) // self.frame_size

    @property
    def duration_ms(self) -> int:
        return self.total_samples * 1000 // self.sample_rate


@dataclass(frozen=True)
class PCMSegment:
    start_sample: int
    pcm: bytes


class AudioBackend(Protocol):
    def extract(self, media: Path) -> DecodedAudio: ...

    def slice(self, audio: DecodedAudio, periods: Sequence[Period]) -> list[PCMSegment]: ...

    def concatenate(self, segments: Sequence[PCMSegment]) -> DecodedAudio: ...

    def encode(self, audio: DecodedAudio, fmt: str) -> bytes: ...


def ms_to_sample(ms: int, sample_rate: int) -> int:
    return ms * sample_rate // 1000


class FfmpegAudioBackend:
    """ffmpeg-backed implementation of AudioBackend (subprocess pipes)."""

    def __init__(
        self,
        *,
        sample_rate: int = ffmpeg.DEFAULT_SAMPLE_RATE,
        channels: int = ffmpeg.DEFAULT_CHANNELS,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels

    def extract(self, media: Path) -> DecodedAudio:
        streams = ffmpeg.probe_audio_streams(media)
        if streams == []:
            raise DecodeError(f"No audio stream found in {media}")
        log.info("Decoding audio from %s", media)
        cmd = ffmpeg.build_decode_cmd(media, sample_rate=self.sample_rate, channels=self.channels)
        try:
            pcm = ffmpeg.run_ffmpeg_bytes(cmd)
        except RuntimeError as exc:
            raise DecodeError(f"Could not decode {media}: {exc}") from exc
        if not pcm:
            raise DecodeError(f"Decoded no audio from {media}")
        return DecodedAudio(self.sample_rate, self.channels, pcm)

    def slice(self, audio: DecodedAudio, periods: Sequence[Period]) -> list[PCMSegment]:
        frame = audio.frame_size
        total = audio.total_samples
        segments: list[PCMSegment] = []
        for period in periods:
            start = min(ms_to_sample(period.start_ms, audio.sample_rate), total)
            end = min(ms_to_sample(period.end_ms, audio.sample_rate), total)
            if end <= start:
                continue
            segments.append(PCMSegment(start, audio.pcm[start * frame : end * frame]))
        if len(segments) < len(periods):
            log.warning(
                "%d of %d periods fall outside the audio stream",
                len(periods) - len(segments),
                len(periods),
            )
        return segments

    def concatenate(self, segments: Sequence[PCMSegment]) -> DecodedAudio:
        return DecodedAudio(
            self.sample_rate,
            self.channels,
            b"".join(segment.pcm for segment in segments),
        )

    def encode(self, audio: DecodedAudio, fmt: str) -> bytes:
        cmd = ffmpeg.build_encode_cmd(
            fmt,
            sample_rate=audio.sample_rate,
            channels=audio.channel_count,
        )
        log.info("Encoding %d ms of audio as %s", audio.duration_ms, fmt)
        try:
            return ffmpeg.run_ffmpeg_bytes(cmd, input_bytes=audio.pcm)
        except RuntimeError as exc:
            raise CondenserError(f"Audio encoding failed: {exc}") from exc


def create_audio_backend() -> AudioBackend:
    """Factory: ffmpeg is the only backend; fail early when it is missing."""
    ffmpeg.ensure_ffmpeg()
    return FfmpegAudioBackend()

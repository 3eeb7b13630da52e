"""
Condensing pipeline for condenser.

A single run turns one video and its subtitle into condensed audio:

1) Read subtitles
2) Extract speech periods
3) Decode audio
4) Slice and concatenate the periods
5) Encode and write `<stem>_con.<format>`
6) Optionally write re-timed subtitles `<stem>_con.<srt|lrc>`

Responsibilities:
- Coordinate service execution order
- Own output paths

Does NOT:
- Implement codec details (the audio backend does)
- Decide which subtitle belongs to which video (services.matching does)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from condenser.config.settings import Settings
from condenser.domain.matching import MatchResult
from condenser.exceptions import CondenserError, DependencyMissingError
from condenser.services.audio import AudioBackend, create_audio_backend
from condenser.services.condensed import create_condensed_subtitles
from condenser.services.files import classify_files, condensed_output_path, expand_paths
from condenser.services.matching import find_matches_for_batch
from condenser.services.periods import extract_periods, total_duration_ms
from condenser.services.subtitles import read_subtitle_text
from condenser.utils.logging import get_logger
from condenser.utils.timing import StepTimer

log = get_logger(__name__)


@dataclass(frozen=True)
class CondenseResult:
    video: Path
    subtitle: Path
    audio_path: Path
    subtitle_path: Path | None
    period_count: int
    original_duration_ms: int
    condensed_duration_ms: int
    timings: dict[str, float] = field(default_factory=dict)


@dataclass
class BatchReport:
    matches: list[MatchResult] = field(default_factory=list)
    results: list[CondenseResult] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def unmatched(self) -> list[str]:
        return [m.video for m in self.matches if not m.matched]


class CondensePipeline:
    """
    Runs the condensing steps with an injectable audio backend.

    The backend is created lazily so that subtitle-only failures surface
    before ffmpeg is looked up.
    """

    def __init__(self, settings: Settings, *, audio: AudioBackend | None = None) -> None:
        self.settings = settings
        self.audio = audio

    def _backend(self) -> AudioBackend:
        if self.audio is None:
            self.audio = create_audio_backend()
        return self.audio

    def run(self, video: str | Path, subtitle: str | Path) -> CondenseResult:
        video = Path(video)
        subtitle = Path(subtitle)
        settings = self.settings
        timer = StepTimer(video.name)

        with timer.step("read_subtitles"):
            subtitle_text = read_subtitle_text(subtitle)

        with timer.step("extract_periods"):
            periods = extract_periods(subtitle_text, settings)

        backend = self._backend()
        with timer.step("decode_audio"):
            decoded = backend.extract(video)

        with timer.step("slice_audio"):
            segments = backend.slice(decoded, periods)
            condensed = backend.concatenate(segments)

        with timer.step("encode_audio"):
            encoded = backend.encode(condensed, settings.output_format)

        audio_path = condensed_output_path(video, settings.output_format, settings.output_dir)
        audio_path.parent.mkdir(parents=True, exist_ok=True)
        audio_path.write_bytes(encoded)

        subtitle_path = None
        if settings.output_condensed_subtitles:
            with timer.step("condense_subtitles"):
                fmt = settings.condensed_subtitles_format
                subtitle_path = condensed_output_path(video, fmt, settings.output_dir)
                subtitle_path.write_text(
                    create_condensed_subtitles(periods, subtitle_text, fmt),
                    encoding="utf-8",
                )

        log.info(
            "Condensed %s: %d periods, %d ms -> %d ms (%d ms of speech)",
            video.name,
            len(periods),
            decoded.duration_ms,
            condensed.duration_ms,
            total_duration_ms(periods),
        )
        return CondenseResult(
            video=video,
            subtitle=subtitle,
            audio_path=audio_path,
            subtitle_path=subtitle_path,
            period_count=len(periods),
            original_duration_ms=decoded.duration_ms,
            condensed_duration_ms=condensed.duration_ms,
            timings=timer.summary(),
        )

    def run_batch(self, paths: Iterable[str | Path]) -> BatchReport:
        """Match every media file to a subtitle and condense each pair.

        A failing file is recorded and the batch continues. Missing
        dependencies abort the batch.
        """
        selection = classify_files(expand_paths(paths))
        report = BatchReport(
            matches=find_matches_for_batch(selection.videos, selection.subtitles, self.settings)
        )
        for match in report.matches:
            if not match.matched:
                continue
            try:
                report.results.append(self.run(match.video, match.subtitle))
            except CondenserError as exc:
                if isinstance(exc, DependencyMissingError):
                    raise
                log.error("Failed to condense %s: %s", match.video, exc.message)
                report.failures[match.video] = exc.message
        log.info(
            "Successfully processed %d/%d files",
            len(report.results),
            sum(1 for m in report.matches if m.matched),
        )
        return report

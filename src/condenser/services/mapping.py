"""
Cross-format episode mapping.

When one side of a batch numbers episodes sequentially ("Episode 14") and
the other by season ("S02E01"), a batch-wide bijection between the two
schemes is built from the seasonal side.

Notes:
- Each season is assumed to run 1..max(episode) without gaps. A missing
  episode in the batch shifts every later running number; this is not
  corrected.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from condenser.domain.matching import FilenameAnalysis, MappingDirection, SeasonMapping
from condenser.utils.logging import get_logger

log = get_logger(__name__)


def is_sequential_side(analyses: Sequence[FilenameAnalysis]) -> bool:
    numbered = [a for a in analyses if a.episode is not None]
    return bool(numbered) and all(a.season is None for a in numbered)


def is_seasonal_side(analyses: Sequence[FilenameAnalysis]) -> bool:
    return any(a.is_seasonal for a in analyses)


def detect_direction(
    videos: Sequence[FilenameAnalysis],
    subtitles: Sequence[FilenameAnalysis],
) -> MappingDirection | None:
    if is_seasonal_side(videos) and is_sequential_side(subtitles):
        return MappingDirection.SEASONAL_TO_SEQUENTIAL
    if is_sequential_side(videos) and is_seasonal_side(subtitles):
        return MappingDirection.SEQUENTIAL_TO_SEASONAL
    return None


def build_mapping(
    seasonal: Iterable[FilenameAnalysis],
    direction: MappingDirection,
) -> SeasonMapping:
    episodes: dict[int, list[int]] = defaultdict(list)
    for analysis in seasonal:
        if analysis.is_seasonal:
            episodes[analysis.season].append(analysis.episode)

    counts = {season: max(eps) for season, eps in sorted(episodes.items())}
    forward: dict[tuple[int, int], int] = {}
    backward: dict[int, tuple[int, int]] = {}
    sequential = 1
    for season, count in counts.items():
        for episode in range(1, count + 1):
            forward[(season, episode)] = sequential
            backward[sequential] = (season, episode)
            sequential += 1

    return SeasonMapping(
        direction=direction,
        season_episode_to_sequential=forward,
        sequential_to_season_episode=backward,
        per_season_episode_count=counts,
    )


def build_season_mapping(
    videos: Sequence[FilenameAnalysis],
    subtitles: Sequence[FilenameAnalysis],
) -> SeasonMapping | None:
    """Build the batch mapping, or None when both sides share a scheme."""
    direction = detect_direction(videos, subtitles)
    if direction is None:
        return None
    seasonal = videos if direction is MappingDirection.SEASONAL_TO_SEQUENTIAL else subtitles
    mapping = build_mapping(seasonal, direction)
    log.info(
        "Cross-format mapping (%s): %s",
        direction.value,
        ", ".join(f"S{s}={n}" for s, n in mapping.per_season_episode_count.items()),
    )
    return mapping

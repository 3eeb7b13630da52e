from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class FilenameAnalysis:
    original_name: str
    title_tokens: frozenset[str] = frozenset()
    episode: int | None = None
    season: int | None = None
    pattern_rank: int | None = None
    confidence: float = 0.0

    @property
    def is_sequential(self) -> bool:
        return self.episode is not None and self.season is None

    @property
    def is_seasonal(self) -> bool:
        return self.episode is not None and self.season is not None

    def to_dict(self) -> dict:
        return {
            "original_name": self.original_name,
            "title_tokens": sorted(self.title_tokens),
            "episode": self.episode,
            "season": self.season,
            "pattern_rank": self.pattern_rank,
            "confidence": self.confidence,
        }


class MatchKind(str, Enum):
    EXACT = "exact"
    DIRECT = "direct"
    CROSS_FORMAT = "cross_format"


class MappingDirection(str, Enum):
    # videos carry (season, episode), subtitles a running number
    SEASONAL_TO_SEQUENTIAL = "seasonal_to_sequential"
    # videos carry a running number, subtitles (season, episode)
    SEQUENTIAL_TO_SEASONAL = "sequential_to_seasonal"


@dataclass(frozen=True)
class SeasonMapping:
    direction: MappingDirection
    season_episode_to_sequential: dict[tuple[int, int], int] = field(default_factory=dict)
    sequential_to_season_episode: dict[int, tuple[int, int]] = field(default_factory=dict)
    per_season_episode_count: dict[int, int] = field(default_factory=dict)

    def to_sequential(self, season: int, episode: int) -> int | None:
        return self.season_episode_to_sequential.get((season, episode))

    def to_season_episode(self, sequential: int) -> tuple[int, int] | None:
        return self.sequential_to_season_episode.get(sequential)


@dataclass(frozen=True)
class MatchCandidate:
    subtitle: str
    score: int
    kind: MatchKind


@dataclass(frozen=True)
class MatchResult:
    video: str
    subtitle: str | None = None
    kind: MatchKind | None = None
    score: int | None = None

    @property
    def matched(self) -> bool:
        return self.subtitle is not None

    def to_dict(self) -> dict:
        return {
            "video": self.video,
            "subtitle": self.subtitle,
            "kind": self.kind.value if self.kind else None,
            "score": self.score,
        }

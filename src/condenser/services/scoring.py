"""
Match scoring between two filename analyses.

The episode number is a hard gate: when either side has none, or the two
differ, the score is 0 and title similarity is never consulted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet

from condenser.domain.matching import FilenameAnalysis, MappingDirection, SeasonMapping

LOW_CONFIDENCE = 0.8
SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class ScoreWeights:
    base: int
    title: int
    bonus: int = 0


DIRECT_WEIGHTS = ScoreWeights(base=50, title=20)
CROSS_FORMAT_WEIGHTS = ScoreWeights(base=45, title=15, bonus=5)

SEASON_MATCH_BONUS = 20
SEASON_MISMATCH_PENALTY = 10
SAME_PATTERN_BONUS = 5
LOW_CONFIDENCE_PENALTY = 10


def jaccard_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def _finish(a: FilenameAnalysis, b: FilenameAnalysis, score: float, weights: ScoreWeights) -> int:
    score += weights.title * jaccard_similarity(a.title_tokens, b.title_tokens)
    score += weights.bonus
    if a.pattern_rank is not None and a.pattern_rank == b.pattern_rank:
        score += SAME_PATTERN_BONUS
    if a.confidence < LOW_CONFIDENCE or b.confidence < LOW_CONFIDENCE:
        score -= LOW_CONFIDENCE_PENALTY
    return max(SCORE_MIN, min(SCORE_MAX, int(round(score))))


def score_match(a: FilenameAnalysis, b: FilenameAnalysis) -> int:
    """Direct score (0..100) for two analyses."""
    if a.episode is None or b.episode is None or a.episode != b.episode:
        return 0

    score: float = DIRECT_WEIGHTS.base
    if a.season is not None and b.season is not None:
        if a.season == b.season:
            score += SEASON_MATCH_BONUS
        else:
            score -= SEASON_MISMATCH_PENALTY
    return _finish(a, b, score, DIRECT_WEIGHTS)


def score_cross_format(
    video: FilenameAnalysis,
    subtitle: FilenameAnalysis,
    mapping: SeasonMapping,
) -> int:
    """Score a pair whose sides use different numbering schemes.

    The seasonal side is translated to its running number through the
    batch mapping before the episode gate applies.
    """
    if mapping.direction is MappingDirection.SEASONAL_TO_SEQUENTIAL:
        seasonal, sequential = video, subtitle
    else:
        seasonal, sequential = subtitle, video

    if not seasonal.is_seasonal or not sequential.is_sequential:
        return 0
    translated = mapping.to_sequential(seasonal.season, seasonal.episode)
    if translated is None or translated != sequential.episode:
        return 0
    return _finish(video, subtitle, CROSS_FORMAT_WEIGHTS.base, CROSS_FORMAT_WEIGHTS)

"""
Batch matching of videos to subtitles.

Each video gets at most one subtitle:

1) Exact names first: ``<video stem><suffix><ext>`` for every subtitle
   extension. An exact match bypasses all heuristics.
2) Remaining videos, strictly in input order, take the best-scoring
   unconsumed subtitle at or above the threshold. Cross-format scores are
   only computed when the best direct score misses the threshold and the
   batch has a season mapping.

Notes:
- Assignment is greedy. A contested subtitle goes to the earlier video,
  which keeps results reproducible for a given input order.
- "No match" is a normal result, logged as a warning, never raised.
"""

from __future__ import annotations

import os
from typing import Sequence

from condenser.config.settings import Settings
from condenser.domain.matching import (
    FilenameAnalysis,
    MatchCandidate,
    MatchKind,
    MatchResult,
    SeasonMapping,
)
from condenser.services.filenames import analyze_filename
from condenser.services.mapping import build_season_mapping
from condenser.services.scoring import score_cross_format, score_match
from condenser.services.subtitles import SUBTITLE_EXTENSIONS
from condenser.utils.logging import get_logger

log = get_logger(__name__)

EXACT_SCORE = 100


def find_exact_match(video: str, subtitles: Sequence[str], suffix: str = "") -> str | None:
    stem = os.path.splitext(video)[0]
    available = set(subtitles)
    for ext in SUBTITLE_EXTENSIONS:
        candidate = f"{stem}{suffix}{ext}"
        if candidate in available:
            return candidate
    return None


def collect_candidates(
    video: FilenameAnalysis,
    subtitles: Sequence[FilenameAnalysis],
    *,
    threshold: int,
    mapping: SeasonMapping | None = None,
) -> list[MatchCandidate]:
    pool = [
        MatchCandidate(subtitle=s.original_name, score=score_match(video, s), kind=MatchKind.DIRECT)
        for s in subtitles
    ]
    best_direct = max((c.score for c in pool), default=0)
    if best_direct < threshold and mapping is not None:
        pool.extend(
            MatchCandidate(
                subtitle=s.original_name,
                score=score_cross_format(video, s, mapping),
                kind=MatchKind.CROSS_FORMAT,
            )
            for s in subtitles
        )
    return pool


def select_candidate(pool: Sequence[MatchCandidate], threshold: int) -> MatchCandidate | None:
    best: MatchCandidate | None = None
    for candidate in pool:
        if candidate.score < threshold:
            continue
        if best is None or candidate.score > best.score:
            best = candidate
    return best


def find_matches_for_batch(
    video_names: Sequence[str],
    subtitle_names: Sequence[str],
    settings: Settings | None = None,
) -> list[MatchResult]:
    settings = settings or Settings()
    threshold = settings.minimum_match_score

    video_info = {name: analyze_filename(name) for name in video_names}
    subtitle_info = {name: analyze_filename(name) for name in subtitle_names}
    mapping = build_season_mapping(list(video_info.values()), list(subtitle_info.values()))

    results: list[MatchResult | None] = [None] * len(video_names)
    consumed: set[str] = set()

    for i, video in enumerate(video_names):
        available = [s for s in subtitle_names if s not in consumed]
        exact = find_exact_match(video, available, settings.subtitle_suffix)
        if exact is not None:
            results[i] = MatchResult(video, exact, MatchKind.EXACT, EXACT_SCORE)
            consumed.add(exact)
            log.info("Exact subtitle for %s: %s", video, exact)

    for i, video in enumerate(video_names):
        if results[i] is not None:
            continue
        available = [subtitle_info[s] for s in subtitle_names if s not in consumed]
        pool = collect_candidates(
            video_info[video],
            available,
            threshold=threshold,
            mapping=mapping,
        )
        best = select_candidate(pool, threshold)
        if best is None:
            results[i] = MatchResult(video)
            log.warning("No subtitle found for %s", video)
            continue
        results[i] = MatchResult(video, best.subtitle, best.kind, best.score)
        consumed.add(best.subtitle)
        log.info("Matched %s -> %s (%s, score=%d)", video, best.subtitle, best.kind.value, best.score)

    return [r for r in results if r is not None]


def explain_match(
    video_name: str,
    subtitle_names: Sequence[str],
    settings: Settings | None = None,
) -> dict:
    """Score every subtitle against one video, best first, for debugging."""
    settings = settings or Settings()
    video = analyze_filename(video_name)
    candidates = []
    for name in subtitle_names:
        subtitle = analyze_filename(name)
        score = score_match(video, subtitle)
        candidates.append(
            {
                "subtitle": name,
                "analysis": subtitle.to_dict(),
                "score": score,
                "would_match": score >= settings.minimum_match_score,
            }
        )
    candidates.sort(key=lambda c: c["score"], reverse=True)
    return {"video": video_name, "analysis": video.to_dict(), "candidates": candidates}

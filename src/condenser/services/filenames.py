"""
Filename analysis for subtitle matching.

Extracts the episode identity (season, episode) and a set of normalized
title tokens from a media or subtitle filename.

Episode patterns are tried from most to least specific; the first one that
matches wins. Its rank sets the base confidence (1.0 - 0.1 * rank), and a
plausible episode number adds 0.1.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Pattern

from condenser.domain.matching import FilenameAnalysis

# (pattern, captures season) ordered by specificity; list index is the rank.
EPISODE_PATTERNS: tuple[tuple[Pattern[str], bool], ...] = (
    (re.compile(r"S(\d+)E(\d+)", re.IGNORECASE), True),
    (re.compile(r"Season[\s._-]*(\d+).*?Episode[\s._-]*(\d+)", re.IGNORECASE), True),
    (re.compile(r"\b(\d{1,2})x(\d{1,3})\b"), True),
    (re.compile(r"\[(\d+)\]"), False),
    (re.compile(r"\((\d+)\)"), False),
    (re.compile(r"\b(?:Episode|Ep|E)[\s._-]*(\d+)", re.IGNORECASE), False),
    (re.compile(r"(?:^|[\s._\[(-])(\d{2,3})(?=[\s._\])-]|$)"), False),
    (re.compile(r"(?:^|[\s._\[(-])(\d)(?=[\s._\])-]|$)"), False),
)

TITLE_EPISODE_PATTERNS: tuple[Pattern[str], ...] = (
    re.compile(r"\bs\d+\s*e\d+(?:v\d+)?(?=\D|$)", re.IGNORECASE),
    re.compile(r"\bseason\s*\d+", re.IGNORECASE),
    re.compile(r"\b\d{1,2}x\d{1,3}\b", re.IGNORECASE),
    re.compile(r"\b(?:episode|ep|e)[\s.]*\d+\b", re.IGNORECASE),
    re.compile(r"\(\d+\)"),
)

SEPARATORS_RE = re.compile(r"[\s\-_.\[\]()]+")
NORMALIZE_RE = re.compile(r"[\[\]_\-]")
WHITESPACE_RE = re.compile(r"\s+")

STOP_WORDS: frozenset[str] = frozenset(
    {
        "episode", "ep", "season", "series", "vol", "volume", "part", "pt",
        "the", "and", "or", "of", "in", "on", "at", "to", "for", "with",
        "bd", "bluray", "dvd", "web", "webrip", "bdrip", "hdtv",
        "x264", "x265", "h264", "h265", "avc", "hevc",
        "flac", "aac", "mp3", "dts", "ac3",
        "1080p", "720p", "480p", "4k", "uhd", "hd",
        "jpn", "eng", "sub", "dub", "subbed", "dubbed",
        "vcb", "studio", "group", "release",
    }
)

EPISODE_MIN = 1
EPISODE_MAX = 999
YEAR_MIN = 1900
YEAR_MAX = 2030
RANK_STEP = 0.1
PLAUSIBLE_BONUS = 0.1


def base_name(filename: str) -> str:
    """Filename without directories and without its last extension."""
    name = PurePath(filename).name
    stem, dot, _ext = name.rpartition(".")
    return stem if dot and stem else name


def clean_name(name: str) -> str:
    return WHITESPACE_RE.sub(" ", NORMALIZE_RE.sub(" ", name)).strip()


def looks_like_year(number: int, name: str) -> bool:
    if not YEAR_MIN <= number <= YEAR_MAX:
        return False
    # "Episode 1999" is an episode, "Show 1999" is a year.
    marked = re.search(rf"\b(?:episode|ep|e)[\s._-]*{number}\b", name, re.IGNORECASE)
    return marked is None


def is_plausible_episode(number: int, name: str) -> bool:
    if not EPISODE_MIN <= number <= EPISODE_MAX:
        return False
    return not looks_like_year(number, name)


def extract_episode_info(name: str) -> tuple[int | None, int | None, int | None, float]:
    """Return (episode, season, pattern rank, confidence) for a base name."""
    for rank, (pattern, has_season) in enumerate(EPISODE_PATTERNS):
        match = pattern.search(name)
        if not match:
            continue
        if has_season:
            season, episode = int(match.group(1)), int(match.group(2))
        else:
            season, episode = None, int(match.group(1))
        confidence = 1.0 - RANK_STEP * rank
        if is_plausible_episode(episode, name):
            confidence += PLAUSIBLE_BONUS
        return episode, season, rank, round(min(1.0, max(0.0, confidence)), 2)
    return None, None, None, 0.0


def extract_title_tokens(cleaned: str) -> frozenset[str]:
    title = cleaned
    for pattern in TITLE_EPISODE_PATTERNS:
        title = pattern.sub(" ", title)
    words = SEPARATORS_RE.split(title.lower())
    return frozenset(
        w for w in words if w and w not in STOP_WORDS and not w.isdigit()
    )


def analyze_filename(filename: str) -> FilenameAnalysis:
    base = base_name(filename)
    episode, season, rank, confidence = extract_episode_info(base)
    return FilenameAnalysis(
        original_name=filename,
        title_tokens=extract_title_tokens(clean_name(base)),
        episode=episode,
        season=season,
        pattern_rank=rank,
        confidence=confidence,
    )

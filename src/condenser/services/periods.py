"""
Speech period extraction for condenser.

Pipeline: strip markup -> drop empty -> drop wholly bracketed entries ->
remove filtered characters -> drop empty -> pad -> trim the last period ->
merge overlapping ranges.

Notes:
- Periods are merged in source order without sorting first. Out-of-order
  subtitle files therefore merge on a best-effort basis only.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from condenser.config.settings import Settings
from condenser.domain.subtitles import DialogueEntry, Period
from condenser.exceptions import ValidationError
from condenser.services.subtitles import parse_subtitles
from condenser.utils.logging import get_logger

log = get_logger(__name__)

MARKUP_RE = re.compile(r"<[^<>]+?>")
ENCLOSING_PAIRS: tuple[tuple[str, str], ...] = (
    ("(", ")"),
    ("（", "）"),
    ("[", "]"),
    ("{", "}"),
)


def strip_markup(text: str) -> str:
    return MARKUP_RE.sub("", text)


def is_enclosed(text: str) -> bool:
    """True when the first and last characters form one enclosing pair.

    Whole-string test only: "(a) b (c)" counts as enclosed.
    """
    text = text.strip()
    if len(text) < 2:
        return False
    return any(text[0] == left and text[-1] == right for left, right in ENCLOSING_PAIRS)


def remove_characters(text: str, characters: str) -> str:
    if not characters:
        return text
    return text.translate({ord(ch): None for ch in characters})


def filter_entries(
    entries: Iterable[DialogueEntry],
    *,
    filter_parentheses: bool,
    filtered_characters: str,
) -> list[DialogueEntry]:
    """Return the entries that carry speech, with their cleaned text."""
    kept: list[DialogueEntry] = []
    for entry in entries:
        text = strip_markup(entry.text)
        if not text.strip():
            continue
        if filter_parentheses and is_enclosed(text):
            continue
        text = remove_characters(text, filtered_characters)
        if not text.strip():
            continue
        kept.append(
            DialogueEntry(
                index=entry.index,
                start_ms=entry.start_ms,
                end_ms=entry.end_ms,
                text=text.strip(),
            )
        )
    return kept


def build_raw_periods(entries: Sequence[DialogueEntry], padding_ms: int) -> list[Period]:
    periods = [
        Period(max(0, entry.start_ms - padding_ms), entry.end_ms + padding_ms)
        for entry in entries
    ]
    if periods:
        # Only the trailing edge of the final period loses its padding.
        last = periods[-1]
        periods[-1] = Period(last.start_ms, last.end_ms - padding_ms)
    return periods


def merge_periods(periods: Sequence[Period]) -> list[Period]:
    """Merge touching or overlapping neighbours, left to right.

    Input order is kept as is; the input sequence is not modified.
    """
    merged: list[Period] = []
    i = 0
    while i < len(periods):
        start = periods[i].start_ms
        end = periods[i].end_ms
        j = i + 1
        while j < len(periods) and end >= periods[j].start_ms:
            end = max(end, periods[j].end_ms)
            j += 1
        if end > start:
            merged.append(Period(start, end))
        else:
            log.debug("Dropping empty period at %d ms", start)
        i = j
    return merged


def periods_from_entries(entries: Sequence[DialogueEntry], settings: Settings) -> list[Period]:
    kept = filter_entries(
        entries,
        filter_parentheses=settings.filter_parentheses,
        filtered_characters=settings.filtered_characters,
    )
    log.info("All period count: %d (%d filtered)", len(entries), len(entries) - len(kept))

    merged = merge_periods(build_raw_periods(kept, settings.padding_ms))
    log.info("Merged period count: %d", len(merged))
    if not merged:
        raise ValidationError("No speech periods left after filtering.")
    return merged


def extract_periods(subtitle_text: str, settings: Settings) -> list[Period]:
    """Parse subtitle text and return the merged speech periods.

    Raises ParseError for files without entries and ValidationError when
    filtering removes everything.
    """
    return periods_from_entries(parse_subtitles(subtitle_text), settings)


def total_duration_ms(periods: Iterable[Period]) -> int:
    return sum(p.duration_ms for p in periods)

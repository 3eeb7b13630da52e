"""
Condensed subtitle rebuilding.

Re-times the original entries onto the condensed timeline, where the
periods are played back to back. Entries that straddle a period boundary
are dropped, never clipped, so every emitted entry keeps its original
duration.
"""

from __future__ import annotations

from typing import Sequence

from condenser.domain.subtitles import CondensedFormat, DialogueEntry, Period
from condenser.services.subtitles import parse_subtitles
from condenser.utils import timecodes


def retime_entries(
    periods: Sequence[Period],
    entries: Sequence[DialogueEntry],
) -> list[DialogueEntry]:
    condensed: list[DialogueEntry] = []
    offset = 0
    for period in periods:
        for entry in entries:
            if not period.contains(entry):
                continue
            shift = offset - period.start_ms
            condensed.append(
                DialogueEntry(
                    index=len(condensed) + 1,
                    start_ms=entry.start_ms + shift,
                    end_ms=entry.end_ms + shift,
                    text=entry.text,
                )
            )
        offset += period.duration_ms
    return condensed


def to_srt(entries: Sequence[DialogueEntry]) -> str:
    blocks = [
        f"{e.index}\n"
        f"{timecodes.format_srt_time(e.start_ms)} --> {timecodes.format_srt_time(e.end_ms)}\n"
        f"{e.text}\n"
        for e in entries
    ]
    return "\n".join(blocks)


def to_lrc(entries: Sequence[DialogueEntry]) -> str:
    # Each line is followed by an empty marker so players clear it at its end time.
    lines = []
    for e in entries:
        text = e.text.replace("\n", " ")
        lines.append(f"[{timecodes.format_lrc_time(e.start_ms)}]{text}\n")
        lines.append(f"[{timecodes.format_lrc_time(e.end_ms)}]\n")
    return "".join(lines)


def create_condensed_subtitles(
    periods: Sequence[Period],
    original_subtitle_text: str,
    fmt: CondensedFormat | str = CondensedFormat.SRT,
) -> str:
    fmt = CondensedFormat(fmt.lower())
    entries = retime_entries(periods, parse_subtitles(original_subtitle_text))
    if fmt is CondensedFormat.LRC:
        return to_lrc(entries)
    return to_srt(entries)

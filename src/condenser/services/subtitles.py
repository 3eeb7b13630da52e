"""
Subtitle parsing for condenser.

This module turns subtitle text into an ordered list of DialogueEntry values.

Responsibilities:
- Detect the dialect (WebVTT, ASS/SSA, SRT as the fallback)
- Parse each dialect, reindexing entries from 1
- Skip malformed entries without aborting the file

Does NOT:
- Filter or pad entries (see services.periods)
- Pair subtitles with videos (see services.matching)

Notes:
- ASS text is rebuilt by rejoining every field after the 9th comma, so an
  earlier field containing a literal comma shifts the columns. Accepted gap.
- A blank line ends a VTT cue, as WebVTT requires. Text after the blank
  line is not appended to the previous cue even when no new timing line
  has appeared yet.
"""

from __future__ import annotations

import re
from pathlib import Path

from condenser.domain.subtitles import DialogueEntry, SubtitleDialect
from condenser.exceptions import FormatError, ParseError
from condenser.utils import timecodes
from condenser.utils.logging import get_logger

log = get_logger(__name__)

SUBTITLE_EXTENSIONS: tuple[str, ...] = (".srt", ".ass", ".ssa", ".vtt")

SRT_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
SRT_INDEX_RE = re.compile(r"^\d+$")
SRT_TIMING_RE = re.compile(
    r"(\d{2,}:\d{2}:\d{2},\d{3})\s*-->\s*(\d{2,}:\d{2}:\d{2},\d{3})"
)
VTT_TIMING_RE = re.compile(
    r"((?:\d{2,}:)?\d{2}:\d{2}\.\d{3})\s*-->\s*((?:\d{2,}:)?\d{2}:\d{2}\.\d{3})"
)
ASS_DIALOGUE_PREFIX = "Dialogue:"
ASS_TEXT_FIELD = 9
ASS_OVERRIDE_RE = re.compile(r"\{[^}]*\}")


def _normalize_newlines(content: str) -> str:
    if content.startswith("\ufeff"):
        content = content[1:]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def detect_dialect(content: str) -> SubtitleDialect:
    stripped = _normalize_newlines(content).strip()
    if stripped.startswith("WEBVTT"):
        return SubtitleDialect.VTT
    if "[Script Info]" in stripped or "[V4+ Styles]" in stripped:
        return SubtitleDialect.ASS
    return SubtitleDialect.SRT


def _make_entry(entries: list[DialogueEntry], start_ms: int, end_ms: int, text: str) -> None:
    if end_ms < start_ms:
        log.debug("Skipping entry with end before start (%d > %d)", start_ms, end_ms)
        return
    entries.append(
        DialogueEntry(index=len(entries) + 1, start_ms=start_ms, end_ms=end_ms, text=text)
    )


def parse_srt(content: str) -> list[DialogueEntry]:
    entries: list[DialogueEntry] = []
    for block in SRT_BLOCK_SPLIT_RE.split(_normalize_newlines(content).strip()):
        lines = block.strip().split("\n")
        if len(lines) < 3:
            continue
        if not SRT_INDEX_RE.match(lines[0].strip()):
            continue
        timing = SRT_TIMING_RE.search(lines[1])
        if not timing:
            log.debug("Skipping SRT block without timing line: %r", lines[1])
            continue
        try:
            start_ms = timecodes.parse_srt_time(timing.group(1))
            end_ms = timecodes.parse_srt_time(timing.group(2))
        except FormatError as exc:
            log.debug("Skipping SRT block: %s", exc)
            continue
        text = "\n".join(lines[2:]).strip()
        if text:
            _make_entry(entries, start_ms, end_ms, text)
    return entries


def parse_vtt(content: str) -> list[DialogueEntry]:
    entries: list[DialogueEntry] = []
    current: tuple[int, int] | None = None
    text_lines: list[str] = []
    in_cue = False

    def flush() -> None:
        if current is not None and text_lines:
            _make_entry(entries, current[0], current[1], "\n".join(text_lines))

    for raw in _normalize_newlines(content).split("\n"):
        line = raw.strip()
        timing = VTT_TIMING_RE.search(line) if "-->" in line else None
        if timing:
            flush()
            text_lines = []
            try:
                current = (
                    timecodes.parse_vtt_time(timing.group(1)),
                    timecodes.parse_vtt_time(timing.group(2)),
                )
                in_cue = True
            except FormatError as exc:
                log.debug("Skipping VTT cue: %s", exc)
                current = None
                in_cue = False
            continue
        if not line:
            # A blank line closes the cue; identifiers and NOTE bodies that
            # follow are never attached to its text.
            in_cue = False
            continue
        if line.startswith("WEBVTT") or line.startswith("NOTE"):
            continue
        if in_cue:
            text_lines.append(line)
    flush()
    return entries


def _clean_ass_text(text: str) -> str:
    text = ASS_OVERRIDE_RE.sub("", text)
    text = text.replace(r"\N", "\n").replace(r"\n", "\n").replace(r"\h", " ")
    return text.strip()


def parse_ass(content: str) -> list[DialogueEntry]:
    entries: list[DialogueEntry] = []
    for raw in _normalize_newlines(content).split("\n"):
        line = raw.strip()
        if not line.startswith(ASS_DIALOGUE_PREFIX):
            continue
        fields = line[len(ASS_DIALOGUE_PREFIX):].split(",")
        if len(fields) <= ASS_TEXT_FIELD:
            log.debug("Skipping ASS dialogue with %d fields", len(fields))
            continue
        try:
            start_ms = timecodes.parse_ass_time(fields[1])
            end_ms = timecodes.parse_ass_time(fields[2])
        except FormatError as exc:
            log.debug("Skipping ASS dialogue: %s", exc)
            continue
        text = _clean_ass_text(",".join(fields[ASS_TEXT_FIELD:]))
        if text:
            _make_entry(entries, start_ms, end_ms, text)
    return entries


_PARSERS = {
    SubtitleDialect.SRT: parse_srt,
    SubtitleDialect.VTT: parse_vtt,
    SubtitleDialect.ASS: parse_ass,
}


def parse_subtitles(content: str) -> list[DialogueEntry]:
    """Parse subtitle text of any supported dialect.

    Raises ParseError when the file yields no entries at all.
    """
    dialect = detect_dialect(content)
    entries = _PARSERS[dialect](content)
    if not entries:
        raise ParseError("no entries found")
    log.debug("Parsed %d %s entries", len(entries), dialect.value)
    return entries


def is_subtitle_file(name: str) -> bool:
    return Path(name).suffix.lower() in SUBTITLE_EXTENSIONS


def read_subtitle_text(path: str | Path) -> str:
    data = Path(path).read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")

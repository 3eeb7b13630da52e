"""
Timestamp conversion between integer milliseconds and subtitle dialects.

Supported shapes:
- SRT  ``HH:MM:SS,mmm``
- VTT  ``HH:MM:SS.mmm`` (hours optional on input)
- ASS  ``H:MM:SS.cc`` (centiseconds)
- LRC  ``MM:SS.cc`` (output only)

SRT and VTT round-trip exactly. ASS input is lossless (centiseconds scale
to ms x 10); ASS and LRC output truncate to centiseconds.
"""

from __future__ import annotations

import re

from condenser.exceptions import FormatError

SRT_TIME_RE = re.compile(r"^(\d{2,}):(\d{2}):(\d{2}),(\d{3})$")
VTT_TIME_RE = re.compile(r"^(?:(\d{2,}):)?(\d{2}):(\d{2})\.(\d{3})$")
ASS_TIME_RE = re.compile(r"^(\d+):(\d{2}):(\d{2})\.(\d{2})$")

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE


def _to_ms(hours: int, minutes: int, seconds: int, millis: int, raw: str) -> int:
    if minutes >= 60 or seconds >= 60:
        raise FormatError(f"Timestamp out of range: {raw!r}")
    return hours * MS_PER_HOUR + minutes * MS_PER_MINUTE + seconds * MS_PER_SECOND + millis


def _split_ms(ms: int) -> tuple[int, int, int, int]:
    if ms < 0:
        raise FormatError(f"Negative timestamp: {ms}")
    hours, rest = divmod(ms, MS_PER_HOUR)
    minutes, rest = divmod(rest, MS_PER_MINUTE)
    seconds, millis = divmod(rest, MS_PER_SECOND)
    return hours, minutes, seconds, millis


def parse_srt_time(value: str) -> int:
    m = SRT_TIME_RE.match(value.strip())
    if not m:
        raise FormatError(f"Invalid SRT timestamp: {value!r}")
    h, mi, s, ms = (int(g) for g in m.groups())
    return _to_ms(h, mi, s, ms, value)


def parse_vtt_time(value: str) -> int:
    m = VTT_TIME_RE.match(value.strip())
    if not m:
        raise FormatError(f"Invalid VTT timestamp: {value!r}")
    hours = int(m.group(1)) if m.group(1) else 0
    return _to_ms(hours, int(m.group(2)), int(m.group(3)), int(m.group(4)), value)


def parse_ass_time(value: str) -> int:
    m = ASS_TIME_RE.match(value.strip())
    if not m:
        raise FormatError(f"Invalid ASS timestamp: {value!r}")
    h, mi, s, cs = (int(g) for g in m.groups())
    return _to_ms(h, mi, s, cs * 10, value)


def format_srt_time(ms: int) -> str:
    h, m, s, millis = _split_ms(ms)
    return f"{h:02d}:{m:02d}:{s:02d},{millis:03d}"


def format_vtt_time(ms: int) -> str:
    h, m, s, millis = _split_ms(ms)
    return f"{h:02d}:{m:02d}:{s:02d}.{millis:03d}"


def format_ass_time(ms: int) -> str:
    h, m, s, millis = _split_ms(ms)
    return f"{h}:{m:02d}:{s:02d}.{millis // 10:02d}"


def format_lrc_time(ms: int) -> str:
    # LRC has no hour field; minutes keep counting past 59.
    _h, _m, s, millis = _split_ms(ms)
    minutes = ms // MS_PER_MINUTE
    return f"{minutes:02d}:{s:02d}.{millis // 10:02d}"

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SubtitleDialect(str, Enum):
    SRT = "srt"
    VTT = "vtt"
    ASS = "ass"


class CondensedFormat(str, Enum):
    SRT = "srt"
    LRC = "lrc"


@dataclass(frozen=True)
class DialogueEntry:
    index: int
    start_ms: int
    end_ms: int
    text: str

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class Period:
    """A contiguous range of retained speech, in milliseconds."""

    start_ms: int
    end_ms: int

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def contains(self, entry: DialogueEntry) -> bool:
        return self.start_ms <= entry.start_ms and entry.end_ms <= self.end_ms

    def as_list(self) -> list[int]:
        return [self.start_ms, self.end_ms]

from __future__ import annotations

from condenser.domain.subtitles import DialogueEntry, Period
from condenser.services import condensed
from condenser.services.subtitles import parse_subtitles

ORIGINAL = """1
00:00:01,000 --> 00:00:02,000
a

2
00:00:02,500 --> 00:00:03,500
straddle

3
00:00:05,000 --> 00:00:06,000
b

4
00:00:07,000 --> 00:00:08,000
c
"""

PERIODS = [Period(1_000, 3_000), Period(5_000, 8_000)]


def test_retime_drops_straddling_entries_and_keeps_durations() -> None:
    originals = parse_subtitles(ORIGINAL)
    retimed = condensed.retime_entries(PERIODS, originals)

    assert [(e.index, e.start_ms, e.end_ms, e.text) for e in retimed] == [
        (1, 0, 1_000, "a"),
        (2, 2_000, 3_000, "b"),
        (3, 4_000, 5_000, "c"),
    ]
    by_text = {e.text: e.duration_ms for e in originals}
    for entry in retimed:
        assert entry.duration_ms == by_text[entry.text]


def test_entries_on_period_boundaries_are_kept() -> None:
    entry = DialogueEntry(index=1, start_ms=1_000, end_ms=3_000, text="edge")
    retimed = condensed.retime_entries([Period(1_000, 3_000)], [entry])
    assert [(e.start_ms, e.end_ms) for e in retimed] == [(0, 2_000)]


def test_condensed_srt_output() -> None:
    content = condensed.create_condensed_subtitles(PERIODS, ORIGINAL, "srt")
    assert content == (
        "1\n00:00:00,000 --> 00:00:01,000\na\n"
        "\n"
        "2\n00:00:02,000 --> 00:00:03,000\nb\n"
        "\n"
        "3\n00:00:04,000 --> 00:00:05,000\nc\n"
    )


def test_condensed_lrc_output() -> None:
    content = condensed.create_condensed_subtitles(PERIODS, ORIGINAL, "LRC")
    assert content == (
        "[00:00.00]a\n[00:01.00]\n"
        "[00:02.00]b\n[00:03.00]\n"
        "[00:04.00]c\n[00:05.00]\n"
    )


def test_lrc_joins_multiline_text() -> None:
    entries = [DialogueEntry(index=1, start_ms=0, end_ms=1_000, text="one\ntwo")]
    assert condensed.to_lrc(entries) == "[00:00.00]one two\n[00:01.00]\n"

from __future__ import annotations

from condenser.domain.matching import FilenameAnalysis
from condenser.services.filenames import analyze_filename
from condenser.services.mapping import build_season_mapping
from condenser.services.scoring import jaccard_similarity, score_cross_format, score_match


def test_bracket_episode_matches_seasonal_name() -> None:
    score = score_match(analyze_filename("Show [01].mkv"), analyze_filename("Show S01E01.srt"))
    assert score == 70
    assert score >= 50


def test_episode_gate_ignores_title_similarity() -> None:
    pairs = [
        ("Show S01E01.mkv", "Show S01E02.srt"),
        ("Show [03].mkv", "Show [04].srt"),
        ("Show.mkv", "Show.srt"),
        ("Show S01E01.mkv", "Show.srt"),
    ]
    for video, subtitle in pairs:
        assert score_match(analyze_filename(video), analyze_filename(subtitle)) == 0


def test_season_bonus_and_penalty() -> None:
    same = score_match(analyze_filename("Show S01E02.mkv"), analyze_filename("Show 1x02.srt"))
    assert same == 90

    other = score_match(analyze_filename("Show S01E02.mkv"), analyze_filename("Show S02E02.srt"))
    assert other == 65


def test_low_confidence_penalty() -> None:
    score = score_match(analyze_filename("Show Ep 3.mkv"), analyze_filename("Show Ep 3.srt"))
    # base + full title + same pattern - low confidence
    assert score == 50 + 20 + 5 - 10


def test_scores_stay_in_range() -> None:
    a = FilenameAnalysis("a", frozenset({"x"}), episode=1, season=1, pattern_rank=0, confidence=1.0)
    assert 0 <= score_match(a, a) <= 100


def test_jaccard_similarity() -> None:
    assert jaccard_similarity({"a", "b"}, {"b", "c"}) == 1 / 3
    assert jaccard_similarity(set(), {"a"}) == 0.0
    assert jaccard_similarity(set(), set()) == 0.0


def test_cross_format_score() -> None:
    videos = [analyze_filename(f"Show S01E{n:02d}.mkv") for n in range(1, 14)]
    videos.append(analyze_filename("Show S02E01.mkv"))
    subtitles = [analyze_filename(f"Show Episode {n}.srt") for n in range(1, 15)]
    mapping = build_season_mapping(videos, subtitles)
    assert mapping is not None

    assert score_cross_format(videos[-1], subtitles[-1], mapping) == 45 + 15 + 5 - 10
    assert score_cross_format(videos[-1], subtitles[0], mapping) == 0


def test_release_version_suffix_keeps_full_title_similarity() -> None:
    score = score_match(analyze_filename("Show S01E01v2.mkv"), analyze_filename("Show S01E01.srt"))
    assert score == 50 + 20 + 20 + 5

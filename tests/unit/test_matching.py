from __future__ import annotations

from condenser.config.settings import Settings
from condenser.domain.matching import MatchKind
from condenser.services.matching import (
    explain_match,
    find_exact_match,
    find_matches_for_batch,
)


def test_exact_match_uses_stem_and_suffix() -> None:
    subtitles = ["Show 01.ja.srt", "Show 01.srt"]
    assert find_exact_match("dir/Show 01.mkv", ["dir/Show 01.ass"]) == "dir/Show 01.ass"
    assert find_exact_match("Show 01.mkv", subtitles) == "Show 01.srt"
    assert find_exact_match("Show 01.mkv", subtitles, ".ja") == "Show 01.ja.srt"
    assert find_exact_match("Show 01.mkv", ["Other.srt"]) is None


def test_exact_match_bypasses_heuristics() -> None:
    results = find_matches_for_batch(
        ["Show 01.mkv"],
        ["Other S01E01.srt", "Show 01.srt"],
        Settings(),
    )
    assert results[0].subtitle == "Show 01.srt"
    assert results[0].kind is MatchKind.EXACT
    assert results[0].score == 100


def test_exact_pass_runs_before_heuristics() -> None:
    # "A [01]" would score well against "B 01.srt", but B claims it by name first
    results = find_matches_for_batch(["A [01].mkv", "B 01.mkv"], ["B 01.srt"], Settings())
    assert results[0].video == "A [01].mkv"
    assert results[0].subtitle is None
    assert results[1].kind is MatchKind.EXACT


def test_heuristic_match() -> None:
    results = find_matches_for_batch(
        ["Show [01].mkv"],
        ["Show S01E02.srt", "Show S01E01.srt"],
        Settings(),
    )
    assert results[0].subtitle == "Show S01E01.srt"
    assert results[0].kind is MatchKind.DIRECT
    assert results[0].score == 70


def test_batch_pairs_by_episode() -> None:
    videos = [f"[Group] Fullmetal Alchemist - {n:02d} [1080p].mkv" for n in (1, 2, 3)]
    subtitles = [f"Fullmetal Alchemist Brotherhood Episode {n}.srt" for n in (3, 1, 2)]

    results = find_matches_for_batch(videos, subtitles, Settings())

    assert [r.video for r in results] == videos
    assert [r.subtitle for r in results] == [
        "Fullmetal Alchemist Brotherhood Episode 1.srt",
        "Fullmetal Alchemist Brotherhood Episode 2.srt",
        "Fullmetal Alchemist Brotherhood Episode 3.srt",
    ]


def test_contested_subtitle_goes_to_earlier_video() -> None:
    results = find_matches_for_batch(
        ["Show [01].mkv", "Show (01).mkv"],
        ["Show S01E01.srt"],
        Settings(),
    )
    assert results[0].subtitle == "Show S01E01.srt"
    assert results[1].subtitle is None
    assert not results[1].matched


def test_no_subtitle_reused() -> None:
    videos = ["Show [01].mkv", "Show (01).mkv", "Show 01.mkv", "Show S01E02.mkv"]
    subtitles = ["Show S01E01.srt", "Show Episode 1.srt", "Show S01E02.srt"]
    results = find_matches_for_batch(videos, subtitles, Settings())
    assigned = [r.subtitle for r in results if r.matched]
    assert len(assigned) == len(set(assigned))


def test_no_match_is_a_normal_result() -> None:
    results = find_matches_for_batch(["Movie.mkv"], ["Other.srt"], Settings())
    assert len(results) == 1
    assert results[0].subtitle is None
    assert results[0].kind is None
    assert results[0].to_dict() == {"video": "Movie.mkv", "subtitle": None, "kind": None, "score": None}


def test_threshold_is_configurable() -> None:
    videos = ["Show [01].mkv"]
    subtitles = ["Show S01E01.srt"]
    assert find_matches_for_batch(videos, subtitles, Settings(minimum_match_score=71))[0].subtitle is None
    assert find_matches_for_batch(videos, subtitles, Settings(minimum_match_score=70))[0].matched


def test_cross_format_match_into_second_season() -> None:
    videos = [f"Show S01E{n:02d}.mkv" for n in range(1, 14)] + ["Show S02E01.mkv"]
    subtitles = [f"Show Episode {n}.srt" for n in range(1, 15)]

    results = find_matches_for_batch(videos, subtitles, Settings())

    for n, result in enumerate(results[:13], start=1):
        assert result.subtitle == f"Show Episode {n}.srt"
        assert result.kind is MatchKind.DIRECT
    assert results[-1].subtitle == "Show Episode 14.srt"
    assert results[-1].kind is MatchKind.CROSS_FORMAT
    assert results[-1].score == 55


def test_explain_match_sorts_candidates() -> None:
    report = explain_match(
        "Show [01].mkv",
        ["Show S01E02.srt", "Show S01E01.srt", "Other.srt"],
        Settings(),
    )
    assert report["video"] == "Show [01].mkv"
    assert report["analysis"]["episode"] == 1
    assert [c["subtitle"] for c in report["candidates"]][0] == "Show S01E01.srt"
    assert report["candidates"][0]["would_match"] is True
    assert all(c["would_match"] is False for c in report["candidates"][1:])

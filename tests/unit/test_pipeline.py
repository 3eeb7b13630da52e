from __future__ import annotations

from pathlib import Path

import pytest

from condenser.config.settings import Settings
from condenser.exceptions import DependencyMissingError
from condenser.pipeline import CondensePipeline

CUES = [
    ("00:00:01,000", "00:00:02,000", "Hello"),
    ("00:00:05,000", "00:00:06,000", "World"),
]


def test_run_writes_condensed_audio_and_subtitles(tmp_path: Path, write_srt, fake_audio) -> None:
    video = tmp_path / "Show 01.mkv"
    video.write_bytes(b"")
    subtitle = write_srt("Show 01.srt", CUES)
    settings = Settings(padding_ms=0, output_condensed_subtitles=True)

    result = CondensePipeline(settings, audio=fake_audio).run(video, subtitle)

    assert result.audio_path == tmp_path / "Show 01_con.mp3"
    assert result.audio_path.read_bytes() == b"mp3:2000"
    assert result.period_count == 2
    assert result.original_duration_ms == 20_000
    assert result.condensed_duration_ms == 2_000
    assert result.subtitle_path == tmp_path / "Show 01_con.srt"
    assert result.subtitle_path.read_text(encoding="utf-8").startswith(
        "1\n00:00:00,000 --> 00:00:01,000\nHello\n"
    )
    assert set(result.timings) >= {"read_subtitles", "extract_periods", "decode_audio", "encode_audio"}
    assert fake_audio.extracted == [video]


def test_run_honours_output_dir_and_format(tmp_path: Path, write_srt, fake_audio) -> None:
    video = tmp_path / "Show 01.mkv"
    video.write_bytes(b"")
    subtitle = write_srt("Show 01.srt", CUES)
    settings = Settings(output_format="wav", output_dir=str(tmp_path / "out"))

    result = CondensePipeline(settings, audio=fake_audio).run(video, subtitle)

    assert result.audio_path == tmp_path / "out" / "Show 01_con.wav"
    assert result.audio_path.exists()
    assert result.subtitle_path is None


def test_run_batch_records_failures_and_unmatched(tmp_path: Path, write_srt, fake_audio) -> None:
    for name in ("Show [01].mkv", "Show [02].mkv", "Other [05].mkv"):
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "notes.txt").write_text("ignore me", encoding="utf-8")
    write_srt("Show S01E01.srt", CUES)
    (tmp_path / "Show S01E02.srt").write_text("not a subtitle", encoding="utf-8")

    report = CondensePipeline(Settings(), audio=fake_audio).run_batch([tmp_path])

    assert [r.video.name for r in report.results] == ["Show [01].mkv"]
    assert list(report.failures) == [str(tmp_path / "Show [02].mkv")]
    assert "no entries found" in report.failures[str(tmp_path / "Show [02].mkv")]
    assert report.unmatched == [str(tmp_path / "Other [05].mkv")]
    assert (tmp_path / "Show [01]_con.mp3").exists()


def test_run_batch_aborts_on_missing_dependency(tmp_path: Path, write_srt, monkeypatch) -> None:
    import condenser.pipeline as pipeline_module

    def missing():
        raise DependencyMissingError("ffmpeg missing")

    monkeypatch.setattr(pipeline_module, "create_audio_backend", missing)
    (tmp_path / "Show 01.mkv").write_bytes(b"")
    write_srt("Show 01.srt", CUES)

    with pytest.raises(DependencyMissingError):
        CondensePipeline(Settings()).run_batch([tmp_path])

from __future__ import annotations

import inspect
from pathlib import Path

import pytest
import typer.testing

from condenser.services.audio import DecodedAudio, FfmpegAudioBackend


def _patch_clirunner() -> None:
    if "mix_stderr" in inspect.signature(typer.testing.CliRunner).parameters:
        return

    class PatchedCliRunner(typer.testing.CliRunner):
        def __init__(self, *args, **kwargs):  # noqa: ANN002, ANN003
            kwargs.pop("mix_stderr", None)
            super().__init__(*args, **kwargs)

    typer.testing.CliRunner = PatchedCliRunner


_patch_clirunner()


class FakeAudioBackend(FfmpegAudioBackend):
    """Slices and joins like the real backend; decode/encode never touch ffmpeg."""

    def __init__(self, *, duration_ms: int = 20_000) -> None:
        super().__init__(sample_rate=1000, channels=1)
        self.duration_ms = duration_ms
        self.extracted: list[Path] = []

    def extract(self, media: Path) -> DecodedAudio:
        self.extracted.append(Path(media))
        samples = self.duration_ms * self.sample_rate // 1000
        return DecodedAudio(self.sample_rate, self.channels, b"\x00\x00" * samples)

    def encode(self, audio: DecodedAudio, fmt: str) -> bytes:
        return f"{fmt}:{audio.duration_ms}".encode("utf-8")


@pytest.fixture
def fake_audio() -> FakeAudioBackend:
    return FakeAudioBackend()


@pytest.fixture
def write_srt(tmp_path: Path):
    def _write(name: str, cues: list[tuple[str, str, str]]) -> Path:
        blocks = [
            f"{i}\n{start} --> {end}\n{text}\n"
            for i, (start, end, text) in enumerate(cues, start=1)
        ]
        path = tmp_path / name
        path.write_text("\n".join(blocks), encoding="utf-8")
        return path

    return _write

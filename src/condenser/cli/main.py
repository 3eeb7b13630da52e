from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

import typer

from condenser.config.settings import Settings
from condenser.exceptions import CondenserError
from condenser.pipeline import CondensePipeline
from condenser.services.condensed import create_condensed_subtitles
from condenser.services.files import classify_files, condensed_output_path, expand_paths
from condenser.services.filenames import analyze_filename
from condenser.services.matching import explain_match, find_matches_for_batch
from condenser.services.periods import extract_periods
from condenser.services.subtitles import read_subtitle_text
from condenser.utils.logging import configure_logging, get_logger

app = typer.Typer(add_completion=False)
log = get_logger(__name__)


@contextmanager
def _cli_errors() -> Iterator[None]:
    try:
        yield
    except CondenserError as exc:
        typer.echo(f"{exc.label()}: {exc.message}", err=True)
        raise typer.Exit(code=exc.exit_code or 1) from exc


def _load_settings(
    *,
    padding: int | None = None,
    suffix: str | None = None,
    log_level: str | None = None,
) -> Settings:
    settings = Settings()

    # Apply CLI overrides on top of env/.env settings
    if padding is not None:
        if padding < 0:
            raise typer.BadParameter("--padding must be >= 0.")
        settings.padding_ms = padding
    if suffix is not None:
        settings.subtitle_suffix = suffix

    with _cli_errors():
        configure_logging(log_level or settings.log_level)
    return settings


@app.command()
def config() -> None:
    """Print resolved config."""
    s = Settings()
    typer.echo(json.dumps(s.to_public_dict(), indent=2, ensure_ascii=False))


@app.command()
def periods(
    subtitle: Path = typer.Argument(..., exists=True, dir_okay=False, help="Subtitle file."),
    padding: int = typer.Option(None, help="Padding in ms (overrides config)."),
    json_output: bool = typer.Option(False, "--json", help="Output periods as JSON."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Print the merged speech periods of a subtitle file."""
    settings = _load_settings(padding=padding, log_level=log_level)
    with _cli_errors():
        result = extract_periods(read_subtitle_text(subtitle), settings)

    if json_output:
        typer.echo(json.dumps([p.as_list() for p in result]))
        return
    typer.echo("start_ms\tend_ms\tduration_ms")
    for p in result:
        typer.echo(f"{p.start_ms}\t{p.end_ms}\t{p.duration_ms}")


@app.command()
def subs(
    subtitle: Path = typer.Argument(..., exists=True, dir_okay=False, help="Subtitle file."),
    fmt: str = typer.Option("srt", "--format", help="Output format: srt or lrc."),
    out: Path = typer.Option(None, help="Output path (defaults to <stem>_con.<format>)."),
    padding: int = typer.Option(None, help="Padding in ms (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Write subtitles re-timed onto the condensed timeline."""
    fmt = fmt.strip().lower()
    if fmt not in {"srt", "lrc"}:
        raise typer.BadParameter("Invalid --format. Use: srt, lrc.")
    settings = _load_settings(padding=padding, log_level=log_level)
    with _cli_errors():
        text = read_subtitle_text(subtitle)
        content = create_condensed_subtitles(extract_periods(text, settings), text, fmt)

    target = out or condensed_output_path(subtitle, fmt)
    target.write_text(content, encoding="utf-8")
    typer.echo(f"Wrote {target}")


@app.command()
def analyze(
    names: List[str] = typer.Argument(..., help="Filenames to analyze."),
) -> None:
    """Show episode/season/title analysis for filenames."""
    typer.echo(
        json.dumps([analyze_filename(n).to_dict() for n in names], indent=2, ensure_ascii=False)
    )


@app.command()
def match(
    paths: List[str] = typer.Argument(..., help="Files or directories holding videos and subtitles."),
    suffix: str = typer.Option(None, help="Subtitle suffix for exact matches (overrides config)."),
    explain: bool = typer.Option(False, help="Show every candidate score per video."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Pair videos with subtitles and print the assignment."""
    settings = _load_settings(suffix=suffix, log_level=log_level)
    selection = classify_files(expand_paths(paths))

    if explain:
        report = [explain_match(v, selection.subtitles, settings) for v in selection.videos]
        typer.echo(json.dumps(report, indent=2, ensure_ascii=False))
        return

    typer.echo("video\tsubtitle\tkind\tscore")
    for result in find_matches_for_batch(selection.videos, selection.subtitles, settings):
        kind = result.kind.value if result.kind else "-"
        score = "-" if result.score is None else str(result.score)
        typer.echo(f"{result.video}\t{result.subtitle or '-'}\t{kind}\t{score}")


@app.command()
def condense(
    paths: List[str] = typer.Argument(..., help="Files or directories holding videos and subtitles."),
    output_format: str = typer.Option(None, help="Audio format: mp3, wav, flac, aac (overrides config)."),
    output_dir: str = typer.Option(None, help="Output directory (overrides config)."),
    with_subtitles: bool = typer.Option(None, help="Also write condensed subtitles (overrides config)."),
    padding: int = typer.Option(None, help="Padding in ms (overrides config)."),
    suffix: str = typer.Option(None, help="Subtitle suffix for exact matches (overrides config)."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Condense every matched video to its spoken audio."""
    settings = _load_settings(padding=padding, suffix=suffix, log_level=log_level)
    if output_format is not None:
        output_format = output_format.strip().lower()
        if output_format not in {"mp3", "wav", "flac", "aac"}:
            raise typer.BadParameter("Invalid --output-format. Use: mp3, wav, flac, aac.")
        settings.output_format = output_format
    if output_dir is not None:
        settings.output_dir = output_dir
    if with_subtitles is not None:
        settings.output_condensed_subtitles = with_subtitles

    with _cli_errors():
        report = CondensePipeline(settings).run_batch(paths)

    for result in report.results:
        typer.echo(f"✅ {result.video.name} -> {result.audio_path} ({result.period_count} periods)")
    for video in report.unmatched:
        typer.echo(f"⚠️ No subtitle for {video}", err=True)
    for video, message in report.failures.items():
        typer.echo(f"❌ {video}: {message}", err=True)
    if report.failures:
        raise typer.Exit(code=1)


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from condenser.services.subtitles import SUBTITLE_EXTENSIONS

MEDIA_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".mkv", ".mp4", ".webm", ".mpg", ".mp2", ".mpeg", ".mpe", ".mpv",
        ".ogg", ".m4p", ".m4v", ".avi", ".wmv", ".mov", ".qt", ".flv",
        ".swf", ".mp3", ".wav", ".flac", ".m4a", ".aac",
    }
)

CONDENSED_SUFFIX = "_con"


@dataclass
class FileSelection:
    videos: list[str] = field(default_factory=list)
    subtitles: list[str] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)


def extension(name: str) -> str:
    return os.path.splitext(name)[1].lower()


def is_media_file(name: str) -> bool:
    return extension(name) in MEDIA_EXTENSIONS


def classify_files(names: Iterable[str]) -> FileSelection:
    """Split names into media, subtitles and everything else, keeping order."""
    selection = FileSelection()
    for name in names:
        if is_media_file(name):
            selection.videos.append(name)
        elif extension(name) in SUBTITLE_EXTENSIONS:
            selection.subtitles.append(name)
        else:
            selection.ignored.append(name)
    return selection


def expand_paths(paths: Iterable[str | Path]) -> list[str]:
    """Files as given, directories expanded to their sorted direct children."""
    expanded: list[str] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            expanded.extend(str(p) for p in sorted(path.iterdir()) if p.is_file())
        else:
            expanded.append(str(path))
    return expanded


def condensed_output_path(video: str | Path, fmt: str, output_dir: str | Path | None = None) -> Path:
    video = Path(video)
    directory = Path(output_dir) if output_dir else video.parent
    return directory / f"{video.stem}{CONDENSED_SUFFIX}.{fmt}"

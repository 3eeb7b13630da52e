from __future__ import annotations

import shutil

from condenser.exceptions import DependencyMissingError

INSTALL_HINTS = {
    "ffmpeg": "Install ffmpeg (https://ffmpeg.org/download.html) and make sure it is on PATH.",
}


def find_binary(binary: str) -> str | None:
    """Path of an optional helper binary, or None."""
    return shutil.which(binary)


def require_binary(binary: str) -> str:
    path = find_binary(binary)
    if path is None:
        hint = INSTALL_HINTS.get(binary, "Install it and try again.")
        raise DependencyMissingError(f"Missing required dependency '{binary}'. {hint}")
    return path

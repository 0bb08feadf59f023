from __future__ import annotations

import subprocess
from pathlib import Path

__version__ = "0.3.0"


def _git_describe() -> str | None:
    """Short hash of the checkout this package runs from, with '-dirty' if modified."""
    try:
        proc = subprocess.run(
            ["git", "describe", "--always", "--dirty", "--abbrev=7"],
            cwd=Path(__file__).resolve().parent,
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def get_version_string() -> str:
    described = _git_describe()
    if described is None:
        return __version__
    return f"{__version__} ({described})"

"""Version lookup for ``--version`` that works installed or from a checkout."""

from __future__ import annotations

import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path

from moodboard.logging_utils import logger

_DISTRIBUTION_NAMES = ("moodboard-compositor", "moodboard_compositor")
_UNKNOWN_VERSION = "0.0.0"


def _installed_version() -> str | None:
    for name in _DISTRIBUTION_NAMES:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return None


def _pyproject_version(start: Path) -> str | None:
    """Return project.version from the nearest pyproject.toml above start."""
    for parent in start.parents:
        pyproject_path = parent / "pyproject.toml"
        if not pyproject_path.is_file():
            continue
        try:
            with pyproject_path.open("rb") as handle:
                data = tomllib.load(handle)
        except OSError as exc:
            logger.warning("Error reading %s: %s", pyproject_path, exc)
            return None
        version = data.get("project", {}).get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
    return None


def resolve_project_version() -> str:
    """
    Return the installed distribution version.

    A source checkout without an install falls back to the version in
    pyproject.toml, and to "0.0.0" when neither is available.
    """
    return (
        _installed_version()
        or _pyproject_version(Path(__file__).resolve())
        or _UNKNOWN_VERSION
    )

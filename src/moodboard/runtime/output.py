"""Helpers for managing export output locations."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from moodboard.constants import EXPORT_SUFFIX
from moodboard.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable

_FALLBACK_DIR = "moodboard_output"


def setup_output_directory(
    output_path: str,
    path_factory: Callable[[str], Path] = Path,
) -> Path:
    """
    Create the output directory if needed and return its resolved path.

    Falls back to ``moodboard_output`` on failure to create the desired
    directory to keep the export from aborting.
    """
    resolved_path = path_factory(output_path)
    try:
        resolved_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Failed to create output directory: %s", exc)
        fallback_path = path_factory(_FALLBACK_DIR)
        fallback_path.mkdir(parents=True, exist_ok=True)
        logger.info("Using fallback directory: %s", fallback_path)
        return fallback_path
    return resolved_path


def export_output_path(output_dir: Path, filename: str) -> Path:
    """Return the export path, forcing a ``.png`` suffix."""
    path = output_dir / filename
    if path.suffix.lower() == EXPORT_SUFFIX:
        return path
    return path.with_suffix(EXPORT_SUFFIX)

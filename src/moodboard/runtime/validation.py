"""Input validation helpers for runtime configuration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable


def validate_input_paths(paths: Iterable[str | Path]) -> list[Path]:
    """Ensure every provided path points to a file."""
    resolved: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            msg = f"Image not found: {raw}"
            raise FileNotFoundError(msg)
        resolved.append(path)
    if not resolved:
        msg = "At least one image is required"
        raise ValueError(msg)
    return resolved

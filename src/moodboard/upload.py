"""
Upload collaborator: gate files, read their size, place them on the grid.

Files that are not images are skipped silently. Oversized files are
reported together in one user-facing message. Files that fail to
decode are dropped with a warning. Surviving images are placed in
insertion order after whatever is already on the board.
"""

from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from moodboard.constants import BYTES_PER_MB
from moodboard.image_io import ImageResource, read_natural_size
from moodboard.logging_utils import logger
from moodboard.placement import ImagePlacement

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable

    from moodboard.layout import GridMetrics
    from moodboard.placement import Board

# Files that fail these checks are skipped, not fatal to the batch
_DECODE_ERRORS = (OSError, Image.DecompressionBombError)


@dataclass(slots=True)
class UploadResult:
    """Outcome of one upload batch."""

    added: list[ImagePlacement] = field(default_factory=list)
    oversized: list[Path] = field(default_factory=list)
    unreadable: list[Path] = field(default_factory=list)
    error: str | None = None


def new_image_id() -> str:
    """Return a fresh opaque placement id."""
    return f"img-{uuid.uuid4().hex}"


def is_image_file(path: Path) -> bool:
    """True when the file name maps to an ``image/*`` media type."""
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type is not None and media_type.startswith("image/")


def oversized_message(paths: list[Path], max_mb: int) -> str:
    """Build the error shown for files over the size limit."""
    names = ", ".join(p.name for p in paths)
    return f"Files too large (max {max_mb}MB): {names}"


def upload_files(
    board: Board,
    paths: Iterable[str | Path],
    metrics: GridMetrics,
    *,
    max_file_size_mb: int,
) -> UploadResult:
    """Add every acceptable image in paths to the board."""
    result = UploadResult()
    max_bytes = max_file_size_mb * BYTES_PER_MB

    candidates: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if not is_image_file(path):
            logger.debug("Skipping non-image file: %s", path)
            continue
        if path.stat().st_size > max_bytes:
            result.oversized.append(path)
            continue
        candidates.append(path)

    if result.oversized:
        result.error = oversized_message(result.oversized, max_file_size_mb)
        logger.warning(result.error)

    start_index = len(board)
    for path in candidates:
        try:
            natural = read_natural_size(path)
        except _DECODE_ERRORS as exc:
            logger.warning("Could not decode %s: %s", path, exc)
            result.unreadable.append(path)
            continue
        index = start_index + len(result.added)
        placement = ImagePlacement(
            id=new_image_id(),
            natural_size=natural,
            cell=metrics.insertion_cell(
                index, natural, (p.cell for p in board),
            ),
            resource=ImageResource(path),
        )
        board.add(placement)
        result.added.append(placement)

    if result.added:
        logger.info("Added %d image(s) to the board", len(result.added))
    return result

"""
Compositor and export pipeline for the board.

Export re-derives each placement's live cover-crop framing from its
measured display rectangle and pan, turns it into a source rectangle in
natural pixels, and draws that rectangle into the destination cell
scaled by one uniform factor ``output_width / display_width``. The
exported PNG is therefore a faithful enlargement or reduction of what
is on screen, never an independent relayout.

A single image that cannot be decoded or drawn is replaced by an opaque
placeholder and the export carries on. Anything else that goes wrong is
fatal to the whole export and is reported once.
"""

from __future__ import annotations

import asyncio
import io
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from moodboard import geometry
from moodboard.config import ExportConfig
from moodboard.constants import (
    COLOR_MODE_RGBA,
    EXPORT_FAILED_MESSAGE,
    EXPORT_FORMAT,
    OPAQUE_ALPHA,
    RESOLUTION_6K,
    RESOLUTION_HD,
    RESOLUTION_UHD,
)
from moodboard.image_io import ResourceReleasedError
from moodboard.logging_utils import logger
from moodboard.runtime.output import (
    export_output_path,
    setup_output_directory,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Iterator, Mapping, Sequence
    from pathlib import Path

    from moodboard.layout import GridMetrics
    from moodboard.placement import Board, ImagePlacement
    from moodboard.type_defs import CoverCropResult, DisplayRect, ResolutionKey

_RGB = tuple[int, int, int]
_RGBA = tuple[int, int, int, int]

RESOLUTION_PRESETS: dict[ResolutionKey, tuple[int, int]] = {
    "HD": RESOLUTION_HD,
    "UHD": RESOLUTION_UHD,
    "6K": RESOLUTION_6K,
}

# Failures confined to one image; they get a placeholder
_DRAW_ERRORS = (
    OSError,
    ValueError,
    ResourceReleasedError,
    Image.DecompressionBombError,
)


class ExportError(RuntimeError):
    """Raised when an export fails and no error callback is installed."""


def resolve_resolution(key: str) -> tuple[int, int]:
    """Return the (width, height) of a resolution preset."""
    try:
        return RESOLUTION_PRESETS[key]  # type: ignore[index]
    except KeyError as exc:
        valid = ", ".join(RESOLUTION_PRESETS)
        msg = f"Unknown resolution {key!r}; expected one of: {valid}"
        raise ValueError(msg) from exc


def compute_export_scale(output_width: float, display_width: float) -> float:
    """Return the uniform display-to-output scale factor."""
    if display_width <= 0:
        msg = "display_width must be positive"
        raise ValueError(msg)
    return output_width / display_width


@dataclass(frozen=True, slots=True)
class DrawOp:
    """One source-rectangle to destination-rectangle draw."""

    image_id: str
    source: CoverCropResult
    dest: DisplayRect

    def dest_box(self) -> tuple[int, int, int, int]:
        """
        Return the destination as whole-pixel ``(x0, y0, x1, y1)``.

        Edges are rounded independently so adjacent cells share an edge
        instead of leaving a seam.
        """
        x0 = round(self.dest.x)
        y0 = round(self.dest.y)
        x1 = round(self.dest.x + self.dest.width)
        y1 = round(self.dest.y + self.dest.height)
        return x0, y0, x1, y1


def plan_draws(
    placements: Sequence[ImagePlacement],
    rects: Mapping[str, DisplayRect],
    scale: float,
) -> list[DrawOp]:
    """
    Map every placement to its output-resolution draw, in board order.

    Raises KeyError when a placement has no measured rectangle.
    """
    ops: list[DrawOp] = []
    for placement in placements:
        try:
            rect = rects[placement.id]
        except KeyError as exc:
            msg = f"No measured rectangle for placement {placement.id!r}"
            raise KeyError(msg) from exc
        source = geometry.source_rect_for(
            placement.natural_size, rect.size, placement.pan_offset,
        )
        ops.append(DrawOp(placement.id, source, rect.scaled(scale)))
    return ops


@contextmanager
def export_surface(
    size: tuple[int, int],
    background: _RGBA,
) -> Iterator[Image.Image]:
    """Provide a blank RGBA canvas that is released on every exit path."""
    canvas = Image.new(COLOR_MODE_RGBA, size, background)
    try:
        yield canvas
    finally:
        canvas.close()


def draw_image(canvas: Image.Image, image: Image.Image, op: DrawOp) -> None:
    """Resample the op's source rectangle into its destination cell."""
    x0, y0, x1, y1 = op.dest_box()
    width, height = x1 - x0, y1 - y0
    if width <= 0 or height <= 0 or op.source.is_empty:
        return
    # float rounding can push the far edge a hair past the image
    left, upper, right, lower = op.source.box()
    box = (
        max(0.0, left),
        max(0.0, upper),
        min(float(image.width), right),
        min(float(image.height), lower),
    )
    tile = image.resize((width, height), Image.Resampling.LANCZOS, box=box)
    if tile.mode != COLOR_MODE_RGBA:
        tile = tile.convert(COLOR_MODE_RGBA)
    canvas.alpha_composite(tile, dest=(x0, y0))


def fill_placeholder(canvas: Image.Image, op: DrawOp, color: _RGB) -> None:
    """Cover the op's destination cell with an opaque solid fill."""
    x0, y0, x1, y1 = op.dest_box()
    if x1 <= x0 or y1 <= y0:
        return
    ImageDraw.Draw(canvas).rectangle(
        [x0, y0, x1 - 1, y1 - 1], fill=(*color, OPAQUE_ALPHA),
    )


def render_placement(
    canvas: Image.Image,
    placement: ImagePlacement,
    op: DrawOp,
    placeholder_color: _RGB,
) -> bool:
    """Draw one placement. Return False when the placeholder was used."""
    try:
        draw_image(canvas, placement.resource.open(), op)
    except _DRAW_ERRORS as exc:
        logger.warning(
            "Could not draw %s (%s); using placeholder", placement.id, exc,
        )
        fill_placeholder(canvas, op, placeholder_color)
        return False
    return True


def save_png(canvas: Image.Image, path: Path) -> Path:
    """Encode the canvas fully in memory, then write it to path."""
    buffer = io.BytesIO()
    canvas.save(buffer, format=EXPORT_FORMAT)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buffer.getvalue())
    return path


class BoardExporter:
    """
    Run exports one at a time and report failures through one channel.

    A request made while another export is in flight is rejected rather
    than queued. The in-progress flag is cleared on every exit path.
    """

    def __init__(
        self,
        config: ExportConfig | None = None,
        *,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config or ExportConfig.model_validate({})
        self._on_error = on_error
        self._exporting = False

    @property
    def is_exporting(self) -> bool:
        """True while an export is running."""
        return self._exporting

    async def export(
        self,
        placements: Sequence[ImagePlacement],
        rects: Mapping[str, DisplayRect],
        display_width: float,
        resolution: str | None = None,
        out_path: Path | None = None,
    ) -> Path | None:
        """
        Composite placements into a PNG and write it.

        rects are the measured display rectangles keyed by placement id
        and display_width the measured grid container width. Returns the
        written path, or None when there was nothing to do, the request
        was rejected, or the failure went to the error callback.
        """
        if self._exporting:
            logger.warning("Export already in progress; request rejected")
            return None
        if not placements:
            logger.info("Board is empty; nothing to export")
            return None

        self._exporting = True
        try:
            return await self._run(
                placements, rects, display_width, resolution, out_path,
            )
        except Exception as exc:  # noqa: BLE001
            logger.error("Export failed: %s", exc)
            if self._on_error is None:
                raise ExportError(EXPORT_FAILED_MESSAGE) from exc
            self._on_error(EXPORT_FAILED_MESSAGE)
            return None
        finally:
            self._exporting = False

    async def _run(  # noqa: PLR0913
        self,
        placements: Sequence[ImagePlacement],
        rects: Mapping[str, DisplayRect],
        display_width: float,
        resolution: str | None,
        out_path: Path | None,
    ) -> Path:
        cfg = self.config
        size = resolve_resolution(resolution or cfg.resolution)
        scale = compute_export_scale(size[0], display_width)
        ops = plan_draws(placements, rects, scale)
        if out_path is None:
            out_path = export_output_path(
                setup_output_directory(cfg.output), cfg.filename,
            )

        drawn = 0
        with export_surface(size, cfg.background) as canvas:
            for placement, op in zip(placements, ops, strict=True):
                ok = await asyncio.to_thread(
                    render_placement,
                    canvas,
                    placement,
                    op,
                    cfg.placeholder_color,
                )
                drawn += int(ok)
            await asyncio.to_thread(save_png, canvas, out_path)

        logger.info(
            "Exported %d of %d image(s) at %dx%d to %s",
            drawn, len(ops), size[0], size[1], out_path,
        )
        return out_path


async def export_board(  # noqa: PLR0913
    board: Board,
    metrics: GridMetrics,
    resolution: str | None = None,
    out_path: Path | None = None,
    *,
    exporter: BoardExporter | None = None,
    on_error: Callable[[str], None] | None = None,
) -> Path | None:
    """Export a board whose rectangles come from grid metrics."""
    runner = exporter or BoardExporter(on_error=on_error)
    placements = board.placements
    return await runner.export(
        placements,
        metrics.rects_for(placements),
        metrics.container_width,
        resolution,
        out_path,
    )

"""Grid metrics: cells in grid units to measured display rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from moodboard.config_defaults import (
    DEFAULT_COLUMNS,
    DEFAULT_CONTAINER_WIDTH,
    DEFAULT_MARGIN,
    DEFAULT_ROW_HEIGHT,
)
from moodboard.constants import MIN_CELL_HEIGHT, UPLOAD_CELL_WIDTH
from moodboard.placement import GridCell
from moodboard.type_defs import DisplayRect

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable

    from moodboard.config import GridConfig
    from moodboard.placement import ImagePlacement
    from moodboard.type_defs import Size


@dataclass(frozen=True)
class GridMetrics:
    """
    Pixel geometry of a fixed-column grid.

    Positions follow react-grid-layout: a margin between cells and a
    container padding equal to the margin around the outside. Rectangle
    coordinates are rounded to whole pixels the same way.
    """

    container_width: float = DEFAULT_CONTAINER_WIDTH
    columns: int = DEFAULT_COLUMNS
    row_height: float = DEFAULT_ROW_HEIGHT
    margin: tuple[int, int] = DEFAULT_MARGIN

    @classmethod
    def from_config(cls, grid: GridConfig) -> GridMetrics:
        """Build metrics from the ``[grid]`` config section."""
        return cls(
            container_width=grid.container_width,
            columns=grid.columns,
            row_height=grid.row_height,
            margin=(grid.margin[0], grid.margin[1]),
        )

    @property
    def column_width(self) -> float:
        """Width of one column between margins."""
        mx, _ = self.margin
        inner = self.container_width - mx * (self.columns - 1) - 2 * mx
        return inner / self.columns

    def cell_rect(self, cell: GridCell) -> DisplayRect:
        """Return the on-screen rectangle of a cell."""
        mx, my = self.margin
        col_w = self.column_width
        left = round((col_w + mx) * cell.x + mx)
        top = round((self.row_height + my) * cell.y + my)
        width = round(col_w * cell.w + max(0, cell.w - 1) * mx)
        height = round(self.row_height * cell.h + max(0, cell.h - 1) * my)
        return DisplayRect(left, top, width, height)

    def rects_for(
        self,
        placements: Iterable[ImagePlacement],
    ) -> dict[str, DisplayRect]:
        """Measure every placement's cell, keyed by placement id."""
        return {p.id: self.cell_rect(p.cell) for p in placements}

    def upload_cell_size(self, natural: Size) -> tuple[int, int]:
        """
        Return the (w, h) in grid units for a freshly uploaded image.

        New images span two columns; the row count keeps the natural
        aspect as close as whole rows allow.
        """
        width_px = UPLOAD_CELL_WIDTH * (self.container_width / self.columns)
        if natural.is_empty:
            return UPLOAD_CELL_WIDTH, MIN_CELL_HEIGHT
        target_height_px = width_px * (natural.height / natural.width)
        rows = round(target_height_px / self.row_height)
        return UPLOAD_CELL_WIDTH, max(MIN_CELL_HEIGHT, rows)

    def insertion_cell(
        self,
        index: int,
        natural: Size,
        occupied: Iterable[GridCell] = (),
    ) -> GridCell:
        """
        Place the index-th uploaded image without overlapping occupied.

        Columns cycle left to right in steps of the upload width. Within
        its columns the cell drops to the highest row where it collides
        with nothing, the way react-grid-layout compacts vertically.
        """
        w, h = self.upload_cell_size(natural)
        w = min(w, self.columns)
        x = min((index * UPLOAD_CELL_WIDTH) % self.columns, self.columns - w)
        taken = list(occupied)
        candidate = GridCell(x=x, y=0, w=w, h=h)
        while True:
            blockers = [c for c in taken if candidate.overlaps(c)]
            if not blockers:
                return candidate
            # every row above the lowest blocker's bottom still collides
            candidate = GridCell(
                x=x, y=max(c.y + c.h for c in blockers), w=w, h=h,
            )

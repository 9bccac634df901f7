"""
Placement model: which image sits in which grid cell, panned how far.

A board is an ordered list of placements; the order is the draw order
on export. Pan state is a tagged variant so "centered" is a value of its
own rather than a missing field. Any change to a cell's width or height
resets the pan, because a pan chosen for one cell size can overshoot the
image edge at another.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from moodboard import geometry
from moodboard.logging_utils import logger
from moodboard.type_defs import Offset, Size

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Iterator, Mapping
    from types import TracebackType

    from moodboard.image_io import ImageResource


@dataclass(frozen=True, slots=True)
class GridCell:
    """Cell position and extent in grid units."""

    x: int
    y: int
    w: int
    h: int

    def same_size(self, other: GridCell) -> bool:
        """True when both cells span the same number of columns and rows."""
        return self.w == other.w and self.h == other.h

    def overlaps(self, other: GridCell) -> bool:
        """True when the two cells share at least one grid square."""
        return (
            self.x < other.x + other.w
            and other.x < self.x + self.w
            and self.y < other.y + other.h
            and other.y < self.y + self.h
        )


@dataclass(frozen=True, slots=True)
class Centered:
    """Centered framing; no pan applied."""


@dataclass(frozen=True, slots=True)
class PannedBy:
    """Framing shifted from center by an offset in display pixels."""

    offset: Offset


PanState = Centered | PannedBy

CENTERED = Centered()


@dataclass(frozen=True, slots=True)
class ImagePlacement:
    """Board record binding an image to a grid cell and a pan state."""

    id: str
    natural_size: Size
    cell: GridCell
    resource: ImageResource
    pan: PanState = CENTERED

    @property
    def pan_offset(self) -> Offset | None:
        """Return the pan offset, or None when centered."""
        if isinstance(self.pan, PannedBy):
            return self.pan.offset
        return None

    def with_cell(self, cell: GridCell) -> ImagePlacement:
        """Return a copy on a new cell, dropping the pan on size change."""
        if cell.same_size(self.cell):
            return replace(self, cell=cell)
        return replace(self, cell=cell, pan=CENTERED)

    def with_pan(self, pan: PanState) -> ImagePlacement:
        """Return a copy with a new pan state."""
        return replace(self, pan=pan)


class Board:
    """
    Ordered collection of placements that owns their image resources.

    Each resource is released exactly once: when its placement is
    removed, or when the board is closed, whichever happens first.
    """

    def __init__(self, placements: Iterable[ImagePlacement] = ()) -> None:
        self._placements: list[ImagePlacement] = []
        self._closed = False
        self.extend(placements)

    def __len__(self) -> int:
        return len(self._placements)

    def __iter__(self) -> Iterator[ImagePlacement]:
        return iter(tuple(self._placements))

    def __contains__(self, image_id: object) -> bool:
        return any(p.id == image_id for p in self._placements)

    def __enter__(self) -> Board:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def placements(self) -> tuple[ImagePlacement, ...]:
        """Snapshot of the placements in draw order."""
        return tuple(self._placements)

    @property
    def closed(self) -> bool:
        """True after ``close`` has run."""
        return self._closed

    def _index(self, image_id: str) -> int:
        for idx, placement in enumerate(self._placements):
            if placement.id == image_id:
                return idx
        msg = f"No placement with id {image_id!r}"
        raise KeyError(msg)

    def get(self, image_id: str) -> ImagePlacement:
        """Return the placement for image_id or raise KeyError."""
        return self._placements[self._index(image_id)]

    def add(self, placement: ImagePlacement) -> ImagePlacement:
        """Append a placement at the end of the draw order."""
        if self._closed:
            msg = "Cannot add placements to a closed board"
            raise RuntimeError(msg)
        if placement.id in self:
            msg = f"Duplicate placement id {placement.id!r}"
            raise ValueError(msg)
        self._placements.append(placement)
        return placement

    def extend(self, placements: Iterable[ImagePlacement]) -> None:
        """Append several placements, keeping their order."""
        for placement in placements:
            self.add(placement)

    def remove(self, image_id: str) -> bool:
        """Delete a placement and release its resource."""
        try:
            idx = self._index(image_id)
        except KeyError:
            return False
        placement = self._placements.pop(idx)
        placement.resource.release()
        logger.debug("Removed placement %s", image_id)
        return True

    def _store(self, placement: ImagePlacement) -> ImagePlacement:
        self._placements[self._index(placement.id)] = placement
        return placement

    def apply_layout(self, cells: Mapping[str, GridCell]) -> list[str]:
        """
        Apply authoritative cell updates from the layout collaborator.

        Unknown ids are ignored. Returns the ids whose cell size changed,
        which are exactly the placements whose pan was reset.
        """
        resized: list[str] = []
        for idx, placement in enumerate(self._placements):
            cell = cells.get(placement.id)
            if cell is None or cell == placement.cell:
                continue
            if not cell.same_size(placement.cell):
                resized.append(placement.id)
            self._placements[idx] = placement.with_cell(cell)
        return resized

    def set_pan(
        self,
        image_id: str,
        offset: Offset,
        display_size: Size,
    ) -> ImagePlacement:
        """Store a pan offset, clamped to the current display geometry."""
        placement = self.get(image_id)
        max_offset = geometry.compute_max_offset(
            placement.natural_size, display_size,
        )
        if max_offset.x == 0 and max_offset.y == 0:
            return self._store(placement.with_pan(CENTERED))
        clamped = geometry.clamp_offset(offset, max_offset)
        return self._store(placement.with_pan(PannedBy(clamped)))

    def set_pan_state(self, image_id: str, pan: PanState) -> ImagePlacement:
        """Store a pan state as given, without clamping."""
        return self._store(self.get(image_id).with_pan(pan))

    def reset_pan(self, image_id: str) -> ImagePlacement:
        """Return a placement to centered framing."""
        return self.set_pan_state(image_id, CENTERED)

    def clear_unneeded_pans(
        self,
        display_sizes: Mapping[str, Size],
    ) -> list[str]:
        """
        Center every panned placement that no longer has slack to pan.

        Run after a layout pass, with freshly measured sizes. Returns the
        ids that were reset.
        """
        cleared: list[str] = []
        for placement in self._placements:
            size = display_sizes.get(placement.id)
            if size is None or placement.pan_offset is None:
                continue
            if not geometry.needs_repositioning(placement.natural_size, size):
                self._store(placement.with_pan(CENTERED))
                cleared.append(placement.id)
        return cleared

    def needs_repositioning(self, image_id: str, display_size: Size) -> bool:
        """True when the image can be panned at its measured size."""
        placement = self.get(image_id)
        return geometry.needs_repositioning(
            placement.natural_size, display_size,
        )

    def position_percent(self, image_id: str, display_size: Size) -> str:
        """Return the ``"x% y%"`` framing string for the rendering layer."""
        placement = self.get(image_id)
        return geometry.frame(
            placement.natural_size, display_size, placement.pan_offset,
        ).css()

    def close(self) -> None:
        """Release every remaining resource. Safe to call more than once."""
        if self._closed:
            return
        for placement in self._placements:
            placement.resource.release()
        self._closed = True

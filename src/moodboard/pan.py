"""
Pointer-drag panning of an image within its cell.

The controller is a two-state machine, idle or panning one image. The
max offset is measured once when the drag starts and reused for every
move, so each move is a clamp of ``start offset + pointer delta``. The
delta is inverted: dragging right reveals content to the left.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from moodboard import geometry
from moodboard.logging_utils import logger
from moodboard.placement import PannedBy
from moodboard.type_defs import Offset

if TYPE_CHECKING:  # pragma: no cover
    from moodboard.placement import Board, ImagePlacement
    from moodboard.type_defs import Point, Size


@dataclass(frozen=True, slots=True)
class PanSession:
    """State captured on pointer-down for a single drag."""

    image_id: str
    pointer_start: Point
    offset_at_start: Offset
    max_offset_at_start: Offset

    def offset_for(self, pointer: Point) -> Offset:
        """Return the clamped offset for the current pointer position."""
        candidate = Offset(
            self.offset_at_start.x + (self.pointer_start.x - pointer.x),
            self.offset_at_start.y + (self.pointer_start.y - pointer.y),
        )
        return geometry.clamp_offset(candidate, self.max_offset_at_start)


class PanController:
    """Turn pointer events into clamped pan offsets on a board."""

    def __init__(self, board: Board) -> None:
        self._board = board
        self._session: PanSession | None = None

    @property
    def session(self) -> PanSession | None:
        """The active session, or None when idle."""
        return self._session

    @property
    def is_panning(self) -> bool:
        """True while a drag is in progress."""
        return self._session is not None

    def begin(
        self,
        image_id: str,
        pointer: Point,
        display_size: Size,
    ) -> PanSession | None:
        """
        Start panning image_id from a pointer-down.

        display_size is the image's current measured size. Returns None
        and stays idle when the image has nothing to pan.
        """
        if self._session is not None:
            logger.debug(
                "Pointer-down on %s while panning %s; ending stale session",
                image_id, self._session.image_id,
            )
            self.end()

        placement = self._board.get(image_id)
        max_offset = geometry.compute_max_offset(
            placement.natural_size, display_size,
        )
        if max_offset.x == 0 and max_offset.y == 0:
            return None

        self._session = PanSession(
            image_id=image_id,
            pointer_start=pointer,
            offset_at_start=placement.pan_offset or Offset(),
            max_offset_at_start=max_offset,
        )
        logger.debug("Pan started on %s (max offset %s)", image_id, max_offset)
        return self._session

    def update(self, pointer: Point) -> ImagePlacement | None:
        """
        Apply a pointer-move and return the updated placement.

        Returns None when idle. A session whose image has left the board
        ends here instead of failing the lookup.
        """
        session = self._session
        if session is None:
            return None
        if session.image_id not in self._board:
            logger.debug(
                "Image %s left the board mid-drag; ending pan",
                session.image_id,
            )
            self._session = None
            return None
        offset = session.offset_for(pointer)
        return self._board.set_pan_state(session.image_id, PannedBy(offset))

    def end(self) -> None:
        """Finish the drag on pointer-up. The last offset stays applied."""
        if self._session is not None:
            logger.debug("Pan ended on %s", self._session.image_id)
        self._session = None

    def cancel(self) -> None:
        """Abort the drag without further updates."""
        if self._session is not None:
            logger.debug("Pan cancelled on %s", self._session.image_id)
        self._session = None

    def cell_changed(self, image_ids: list[str]) -> None:
        """Cancel the session if the panned image's cell was resized."""
        if self._session is not None and self._session.image_id in image_ids:
            self.cancel()

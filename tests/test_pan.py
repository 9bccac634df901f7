"""Tests for the pointer-drag pan controller."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from moodboard.pan import PanController, PanSession
from moodboard.placement import CENTERED, Board, GridCell, PannedBy
from moodboard.type_defs import Offset, Point, Size

if TYPE_CHECKING:
    from moodboard.placement import ImagePlacement
    from tests.conftest import PlacementFactory

CELL_SIZE = Size(300, 200)


@pytest.fixture
def wide(board: Board, make_placement: PlacementFactory) -> ImagePlacement:
    """4000x2000 image: 100px of horizontal slack in a 300x200 cell."""
    return board.add(make_placement(natural=(4000, 2000)))


@pytest.fixture
def controller(board: Board) -> PanController:
    return PanController(board)


class TestBegin:
    def test_starts_session(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        session = controller.begin(wide.id, Point(10, 10), CELL_SIZE)
        assert controller.is_panning
        assert session == PanSession(
            image_id=wide.id,
            pointer_start=Point(10, 10),
            offset_at_start=Offset(0, 0),
            max_offset_at_start=Offset(100, 0),
        )

    def test_no_slack_is_noop(
        self,
        board: Board,
        controller: PanController,
        make_placement: PlacementFactory,
    ) -> None:
        exact = board.add(make_placement(natural=(600, 400)))
        assert controller.begin(exact.id, Point(0, 0), CELL_SIZE) is None
        assert not controller.is_panning

    def test_snapshots_existing_offset(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        board.set_pan_state(wide.id, PannedBy(Offset(-20, 0)))
        session = controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        assert session is not None
        assert session.offset_at_start == Offset(-20, 0)

    def test_second_begin_replaces_session(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
        make_placement: PlacementFactory,
    ) -> None:
        other = board.add(make_placement(natural=(1000, 2000)))
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        session = controller.begin(other.id, Point(5, 5), CELL_SIZE)
        assert controller.session is session
        assert session is not None
        assert session.image_id == other.id

    def test_unknown_image_raises(self, controller: PanController) -> None:
        with pytest.raises(KeyError):
            controller.begin("nope", Point(0, 0), CELL_SIZE)


class TestUpdate:
    def test_drag_left_pans_right(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(100, 50), CELL_SIZE)
        updated = controller.update(Point(75, 50))
        assert updated is not None
        assert updated.pan_offset == Offset(25, 0)
        assert board.position_percent(wide.id, CELL_SIZE) == "75% 50%"

    def test_drag_right_reveals_left(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(100, 50), CELL_SIZE)
        updated = controller.update(Point(130, 50))
        assert updated is not None
        assert updated.pan_offset == Offset(-30, 0)

    def test_clamps_to_half_max(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        far = controller.update(Point(-1000, -1000))
        assert far is not None
        assert far.pan_offset == Offset(50, 0)
        back = controller.update(Point(1000, 1000))
        assert back is not None
        assert back.pan_offset == Offset(-50, 0)

    def test_moves_are_relative_to_session_start(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        controller.update(Point(-10, 0))
        updated = controller.update(Point(-20, 0))
        assert updated is not None
        assert updated.pan_offset == Offset(20, 0)

    def test_idle_update_is_noop(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        assert controller.update(Point(5, 5)) is None
        assert wide.pan == CENTERED

    def test_removed_image_ends_session(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        assert board.remove(wide.id)

        assert controller.update(Point(5, 0)) is None
        assert not controller.is_panning
        assert controller.update(Point(10, 0)) is None


class TestEnd:
    def test_end_keeps_last_offset(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        controller.update(Point(-40, 0))
        controller.end()
        assert not controller.is_panning
        assert board.get(wide.id).pan_offset == Offset(40, 0)
        assert controller.update(Point(-45, 0)) is None

    def test_cancel_discards_session(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        controller.update(Point(-10, 0))
        controller.cancel()
        assert controller.session is None
        assert board.get(wide.id).pan_offset == Offset(10, 0)

    def test_resize_cancels_active_session(
        self,
        board: Board,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        resized = board.apply_layout({wide.id: GridCell(0, 0, 4, 2)})
        controller.cell_changed(resized)
        assert not controller.is_panning
        assert board.get(wide.id).pan == CENTERED

    def test_unrelated_resize_keeps_session(
        self,
        controller: PanController,
        wide: ImagePlacement,
    ) -> None:
        controller.begin(wide.id, Point(0, 0), CELL_SIZE)
        controller.cell_changed(["img-other"])
        assert controller.is_panning

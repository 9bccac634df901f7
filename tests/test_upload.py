"""Tests for the upload collaborator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from moodboard.placement import GridCell
from moodboard.type_defs import Size
from moodboard.upload import (
    is_image_file,
    new_image_id,
    oversized_message,
    upload_files,
)

if TYPE_CHECKING:
    from pathlib import Path

    from moodboard.layout import GridMetrics
    from moodboard.placement import Board
    from tests.conftest import ImageFileFactory, PlacementFactory


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("a.png", True),
        ("b.JPG", True),
        ("c.gif", True),
        ("notes.txt", False),
        ("archive.zip", False),
        ("noext", False),
    ],
)
def test_is_image_file(tmp_path: Path, name: str, expected: bool) -> None:  # noqa: FBT001
    assert is_image_file(tmp_path / name) is expected


def test_new_image_ids_are_unique() -> None:
    ids = {new_image_id() for _ in range(50)}
    assert len(ids) == 50  # noqa: PLR2004
    assert all(i.startswith("img-") for i in ids)


def test_oversized_message_lists_names(tmp_path: Path) -> None:
    message = oversized_message([tmp_path / "a.png", tmp_path / "b.jpg"], 10)
    assert message == "Files too large (max 10MB): a.png, b.jpg"


def test_adds_images_in_order(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
) -> None:
    paths = [make_image_file((400, 200)), make_image_file((100, 400))]
    result = upload_files(board, paths, metrics, max_file_size_mb=10)

    assert result.error is None
    assert [p.resource.path for p in board] == paths
    first, second = board.placements
    assert first.natural_size == Size(400, 200)
    assert first.cell == GridCell(0, 0, 2, 2)
    assert second.cell == GridCell(2, 0, 2, 16)


def test_skips_non_images_silently(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
    tmp_path: Path,
) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")
    result = upload_files(
        board, [notes, make_image_file()], metrics, max_file_size_mb=10,
    )
    assert len(result.added) == 1
    assert result.error is None
    assert result.unreadable == []


def test_oversized_files_reported_together(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    # shrink a "megabyte" so real PNGs exceed the limit
    monkeypatch.setattr("moodboard.upload.BYTES_PER_MB", 1)
    big_a = make_image_file((64, 64), name="big_a.png")
    big_b = make_image_file((64, 64), name="big_b.png")

    with caplog.at_level(logging.WARNING):
        result = upload_files(board, [big_a, big_b], metrics, max_file_size_mb=1)

    assert result.error == "Files too large (max 1MB): big_a.png, big_b.png"
    assert result.oversized == [big_a, big_b]
    assert len(board) == 0
    assert "Files too large" in caplog.text


def test_undecodable_file_dropped(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
    corrupt_image_file: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    good = make_image_file()
    with caplog.at_level(logging.WARNING):
        result = upload_files(
            board, [corrupt_image_file, good], metrics, max_file_size_mb=10,
        )
    assert result.unreadable == [corrupt_image_file]
    assert [p.resource.path for p in result.added] == [good]
    # the dropped file does not consume a grid slot
    assert result.added[0].cell.x == 0
    assert "Could not decode" in caplog.text


def test_new_images_follow_existing(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
    make_placement: PlacementFactory,
) -> None:
    for column in range(0, 10, 2):
        board.add(make_placement(cell=GridCell(column, 0, 2, 2)))
    result = upload_files(
        board, [make_image_file((400, 200))], metrics, max_file_size_mb=10,
    )
    assert result.added[0].cell == GridCell(0, 2, 2, 2)
    assert len(board) == 6  # noqa: PLR2004


def test_square_images_stack_without_overlap(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
) -> None:
    paths = [make_image_file((100, 100)) for _ in range(7)]
    upload_files(board, paths, metrics, max_file_size_mb=10)

    cells = [p.cell for p in board]
    for i, first in enumerate(cells):
        for second in cells[i + 1:]:
            assert not first.overlaps(second), (first, second)
    assert cells[5] == GridCell(0, 4, 2, 4)
    assert cells[6] == GridCell(2, 4, 2, 4)


def test_decompression_bomb_skipped(
    board: Board,
    metrics: GridMetrics,
    make_image_file: ImageFileFactory,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    huge = make_image_file((100, 100), name="huge.png")
    small = make_image_file((10, 10), name="small.png")
    # 100x100 is over twice the limit, which Pillow refuses to open
    monkeypatch.setattr("PIL.Image.MAX_IMAGE_PIXELS", 1000)

    with caplog.at_level(logging.WARNING):
        result = upload_files(board, [huge, small], metrics, max_file_size_mb=10)

    assert result.unreadable == [huge]
    assert [p.resource.path for p in board] == [small]
    assert "Could not decode" in caplog.text

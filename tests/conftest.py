"""
Test configuration and shared fixtures for the moodboard compositor.

This module defines reusable pytest fixtures for image files, boards,
and grid metrics. These fixtures support all test modules in the test
suite.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from PIL import Image

from moodboard.image_io import ImageResource
from moodboard.layout import GridMetrics
from moodboard.logging_utils import logger
from moodboard.placement import Board, GridCell, ImagePlacement
from moodboard.type_defs import Size

ImageFileFactory = Callable[..., Path]
PlacementFactory = Callable[..., ImagePlacement]


@pytest.fixture
def make_image_file(tmp_path: Path) -> ImageFileFactory:
    """Save solid-color images under tmp_path and return their paths."""
    counter = {"n": 0}

    def _make(
        size: tuple[int, int] = (64, 64),
        color: str | tuple[int, ...] = "red",
        *,
        name: str | None = None,
        mode: str = "RGB",
    ) -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"image_{counter['n']}.png")
        Image.new(mode, size, color=color).save(path)
        return path

    return _make


@pytest.fixture
def corrupt_image_file(tmp_path: Path) -> Path:
    """A file with an image extension that does not decode."""
    path = tmp_path / "broken.png"
    path.write_bytes(b"not really a png")
    return path


@pytest.fixture
def make_placement(make_image_file: ImageFileFactory) -> PlacementFactory:
    """Build placements backed by real image files."""
    counter = {"n": 0}

    def _make(
        natural: tuple[int, int] = (400, 200),
        cell: GridCell | None = None,
        *,
        color: str = "red",
        path: Path | None = None,
        image_id: str | None = None,
    ) -> ImagePlacement:
        counter["n"] += 1
        source = path or make_image_file(natural, color)
        return ImagePlacement(
            id=image_id or f"img-{counter['n']}",
            natural_size=Size(float(natural[0]), float(natural[1])),
            cell=cell or GridCell(0, 0, 2, 2),
            resource=ImageResource(source),
        )

    return _make


@pytest.fixture
def board() -> Generator[Board, None, None]:
    """An empty board that is torn down after the test."""
    with Board() as b:
        yield b


@pytest.fixture
def metrics() -> GridMetrics:
    """Default 10-column grid, 1000px wide."""
    return GridMetrics()


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the moodboard logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)

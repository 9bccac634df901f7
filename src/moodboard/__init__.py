"""Public package exports for the moodboard compositor."""

from __future__ import annotations

from .export import BoardExporter, ExportError, export_board
from .layout import GridMetrics
from .pan import PanController, PanSession
from .placement import (
    CENTERED,
    Board,
    Centered,
    GridCell,
    ImagePlacement,
    PannedBy,
)
from .upload import upload_files

__all__ = [
    "CENTERED",
    "Board",
    "BoardExporter",
    "Centered",
    "ExportError",
    "GridCell",
    "GridMetrics",
    "ImagePlacement",
    "PanController",
    "PanSession",
    "PannedBy",
    "export_board",
    "upload_files",
]

"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import moodboard.config as mb_config
from moodboard.export import (
    RESOLUTION_PRESETS,
    BoardExporter,
    ExportError,
    export_board,
)
from moodboard.layout import GridMetrics
from moodboard.logging_utils import logger, set_verbosity
from moodboard.placement import Board
from moodboard.runtime import (
    resolve_project_version,
    validate_input_paths,
)
from moodboard.type_defs import Offset
from moodboard.upload import upload_files

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Sequence

T = TypeVar("T")

_PAN_PARTS = 2


@dataclass(frozen=True, slots=True)
class PanRequest:
    """A ``--pan`` option: 1-based image index and display-pixel offset."""

    index: int
    offset: Offset


def parse_pan(text: str) -> PanRequest:
    """Parse ``INDEX=X,Y`` into a PanRequest."""
    index_text, sep, offset_text = text.partition("=")
    if not sep:
        msg = "must look like INDEX=X,Y, e.g., 2=25,0"
        raise ValueError(msg)
    parts = offset_text.split(",")
    if len(parts) != _PAN_PARTS:
        msg = "offset must look like X,Y"
        raise ValueError(msg)
    try:
        index = int(index_text)
        x, y = float(parts[0]), float(parts[1])
    except ValueError as exc:
        msg = "index must be an integer and offsets numbers"
        raise ValueError(msg) from exc
    if index < 1:
        msg = "index is 1-based and must be positive"
        raise ValueError(msg)
    return PanRequest(index=index, offset=Offset(x, y))


def _wrap_validator(
    validator: Callable[[str], T],
) -> Callable[[str], T]:
    """Convert ``ValueError`` from a validator into ``ArgumentTypeError``."""

    def wrapper(text: str) -> T:
        try:
            return validator(text)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return wrapper


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog="moodboard",
        description="Lay images out on a grid and export a PNG moodboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "moodboard a.jpg b.png c.jpg\n"
            "moodboard a.jpg b.png --resolution UHD --pan 2=25,0\n"
            "moodboard a.jpg b.png --describe\n"
        ),
    )
    p.add_argument("images", nargs="*", help="Image files, in board order")
    p.add_argument(
        "--version", action="version",
        version=f"%(prog)s {resolve_project_version()}")
    p.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging")

    board = p.add_argument_group("board")
    board.add_argument(
        "--container-width", type=int,
        help="Display width of the grid container in pixels",
        default=argparse.SUPPRESS)
    board.add_argument(
        "--pan", type=_wrap_validator(parse_pan), action="append",
        default=[], metavar="INDEX=X,Y",
        help=(
            "Pan the INDEX-th image (1-based) by X,Y display pixels from "
            "center. Offsets are clamped to the image edges."
        ))
    board.add_argument(
        "--describe", action="store_true",
        help="Log each image's cell and framing instead of exporting")

    export = p.add_argument_group("export")
    export.add_argument(
        "--resolution", choices=list(RESOLUTION_PRESETS),
        help="Output resolution preset", default=argparse.SUPPRESS)
    export.add_argument(
        "--output", type=str, help="Output directory",
        default=argparse.SUPPRESS)
    export.add_argument(
        "--filename", type=str, help="Output file name",
        default=argparse.SUPPRESS)

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str,
        help="Path to moodboard.toml file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate config file and exit without exporting")

    return p


def apply_pans(
    board: Board,
    metrics: GridMetrics,
    requests: Sequence[PanRequest],
) -> None:
    """Apply ``--pan`` requests, clamped to each image's cell geometry."""
    placements = board.placements
    for request in requests:
        if request.index > len(placements):
            msg = (f"--pan index {request.index} is out of range; "
                   f"the board has {len(placements)} image(s)")
            raise ValueError(msg)
        placement = placements[request.index - 1]
        size = metrics.cell_rect(placement.cell).size
        if not board.needs_repositioning(placement.id, size):
            logger.warning(
                "Image %d fills its cell exactly; ignoring --pan",
                request.index,
            )
            continue
        board.set_pan(placement.id, request.offset, size)


def describe_board(board: Board, metrics: GridMetrics) -> None:
    """Log the cell, rectangle and framing of every placement."""
    for number, placement in enumerate(board, start=1):
        rect = metrics.cell_rect(placement.cell)
        logger.info(
            "%d. %s cell=(%d,%d %dx%d) rect=(%g,%g %gx%g) pannable=%s "
            "position=%s",
            number,
            placement.resource.path.name,
            placement.cell.x, placement.cell.y,
            placement.cell.w, placement.cell.h,
            rect.x, rect.y, rect.width, rect.height,
            board.needs_repositioning(placement.id, rect.size),
            board.position_percent(placement.id, rect.size),
        )


def run_from_args(args: argparse.Namespace) -> int:
    """Build a board from command-line arguments and export it."""
    base_cfg: mb_config.MoodboardConfig | None = None
    if args.config:
        base_cfg = mb_config.ConfigLoader.load(args.config)
        if args.validate_config_only:
            logger.info("Config %s validated successfully.", args.config)
            return 0

    cfg = mb_config.build_config_from_cli(vars(args), base_config=base_cfg)
    metrics = GridMetrics.from_config(cfg.grid)
    paths = validate_input_paths(args.images)

    with Board() as board:
        upload_files(
            board, paths, metrics,
            max_file_size_mb=cfg.upload.max_file_size_mb,
        )
        if not board.placements:
            logger.error("No usable images to place on the board")
            return 1
        apply_pans(board, metrics, args.pan)

        if args.describe:
            describe_board(board, metrics)
            return 0

        exporter = BoardExporter(cfg.export)
        try:
            saved = asyncio.run(
                export_board(board, metrics, exporter=exporter),
            )
        except ExportError:
            # the exporter has already logged the cause
            return 1

    if saved is None:
        return 1
    logger.info("Moodboard saved to: %s", saved)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    set_verbosity(verbose=args.verbose)
    if args.validate_config_only and not args.config:
        arg_parser.error("--validate-config-only requires --config")
    if not args.validate_config_only and not args.images:
        arg_parser.error("at least one image is required")

    try:
        return run_from_args(args)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

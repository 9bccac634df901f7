"""
Configuration schema and loader for the moodboard compositor.

Defines Pydantic models representing structured configuration sections
and a TOML-based config loader with validation support.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import BaseModel, Field

from moodboard.config_defaults import (
    DEFAULT_BACKGROUND,
    DEFAULT_COLUMNS,
    DEFAULT_CONTAINER_WIDTH,
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_MARGIN,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PLACEHOLDER_COLOR,
    DEFAULT_RESOLUTION,
    DEFAULT_ROW_HEIGHT,
)
from moodboard.type_defs import ResolutionKey

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


class GridConfig(BaseModel):
    """Control the grid the board is laid out on."""

    columns: int = Field(DEFAULT_COLUMNS, ge=1)
    row_height: int = Field(DEFAULT_ROW_HEIGHT, ge=1)
    margin: tuple[int, int] = Field(DEFAULT_MARGIN)
    container_width: int = Field(DEFAULT_CONTAINER_WIDTH, ge=1)


class ExportConfig(BaseModel):
    """Control settings for PNG export."""

    resolution: ResolutionKey = Field(DEFAULT_RESOLUTION)
    output: str = Field(DEFAULT_OUTPUT_DIR)
    filename: str = Field(DEFAULT_EXPORT_FILENAME, min_length=1)
    placeholder_color: RGB = Field(DEFAULT_PLACEHOLDER_COLOR)
    background: RGBA = Field(DEFAULT_BACKGROUND)


class UploadConfig(BaseModel):
    """Control which files are accepted onto the board."""

    max_file_size_mb: int = Field(DEFAULT_MAX_FILE_SIZE_MB, ge=1)


class MoodboardConfig(BaseModel):
    """
    Root configuration object combining all supported sections.

    Mirrors the structure of moodboard.toml, grouping related parameters
    under logical categories.
    """

    # model_validate({}) populates defaults from the Field(...) declarations
    # and keeps pyright from flagging missing constructor arguments.
    grid: GridConfig = Field(
        default_factory=lambda: GridConfig.model_validate({}),
    )
    export: ExportConfig = Field(
        default_factory=lambda: ExportConfig.model_validate({}),
    )
    upload: UploadConfig = Field(
        default_factory=lambda: UploadConfig.model_validate({}),
    )


class ConfigLoader:
    """
    Loads and parses a TOML configuration file into a typed config object.

    Falls back to defaults for any missing subsections or fields.
    """

    @staticmethod
    def load(path: str) -> MoodboardConfig:
        """
        Load a moodboard configuration from a TOML file.

        Returns a validated MoodboardConfig instance based on the file
        contents.
        """
        config_path = Path(path)
        if not config_path.is_file():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)

        with config_path.open("r", encoding="utf-8") as f:
            doc = tomlkit.load(f)

        return MoodboardConfig.model_validate(doc.unwrap())


# CLI destination name -> (config section, field)
_CLI_FIELDS: dict[str, tuple[str, str]] = {
    "resolution": ("export", "resolution"),
    "output": ("export", "output"),
    "filename": ("export", "filename"),
    "container_width": ("grid", "container_width"),
    "columns": ("grid", "columns"),
    "row_height": ("grid", "row_height"),
    "max_file_size_mb": ("upload", "max_file_size_mb"),
}


def build_config_from_cli(
    args: Mapping[str, Any],
    base_config: MoodboardConfig | None = None,
) -> MoodboardConfig:
    """
    Overlay CLI values onto a base config and revalidate.

    Only keys present in args with a non-None value override the base;
    argparse.SUPPRESS keeps unset options out of the namespace entirely.
    """
    base = base_config or MoodboardConfig.model_validate({})
    data = base.model_dump()
    for key, (section, field) in _CLI_FIELDS.items():
        value = args.get(key)
        if value is not None:
            data[section][field] = value
    return MoodboardConfig.model_validate(data)

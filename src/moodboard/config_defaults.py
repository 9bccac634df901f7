"""Shared default values for user-facing configuration settings."""
from moodboard.type_defs import ResolutionKey

# Grid (react-grid-layout compatible)
DEFAULT_COLUMNS = 10
DEFAULT_ROW_HEIGHT = 50
DEFAULT_MARGIN: tuple[int, int] = (10, 10)
DEFAULT_CONTAINER_WIDTH = 1000

# Export
DEFAULT_RESOLUTION: ResolutionKey = "HD"
DEFAULT_OUTPUT_DIR = "out"
DEFAULT_EXPORT_FILENAME = "moodboard.png"
DEFAULT_PLACEHOLDER_COLOR: tuple[int, int, int] = (128, 128, 128)
DEFAULT_BACKGROUND: tuple[int, int, int, int] = (0, 0, 0, 0)

# Upload
DEFAULT_MAX_FILE_SIZE_MB = 10

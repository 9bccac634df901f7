"""
Constants used internally by the moodboard compositor.

These are implementation-level values that should not be overridden
via config files or CLI arguments.
"""

# Framing percentages: 50 is centered, 0 and 100 are the image edges
CENTER_PERCENT = 50.0
PERCENT_SPAN = 100.0

# Relative slack below which two aspect ratios count as equal
ASPECT_TOLERANCE = 1e-9

# Upload-time cell sizing
UPLOAD_CELL_WIDTH = 2
MIN_CELL_HEIGHT = 1
BYTES_PER_MB = 1024 * 1024

# Output resolutions, all 16:9
RESOLUTION_HD = (1920, 1080)
RESOLUTION_UHD = (3840, 2160)
RESOLUTION_6K = (6144, 3456)

# Internal color constants
COLOR_MODE_RGBA = "RGBA"
OPAQUE_ALPHA = 255

# Encoding
EXPORT_FORMAT = "PNG"
EXPORT_SUFFIX = ".png"

# User-facing messages
EXPORT_FAILED_MESSAGE = "Export failed. Please try again."

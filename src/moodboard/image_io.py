"""Image loading and decoded-resource ownership."""
from __future__ import annotations

from pathlib import Path

from PIL import Image

from moodboard.constants import COLOR_MODE_RGBA
from moodboard.logging_utils import logger
from moodboard.type_defs import Size


class ResourceReleasedError(RuntimeError):
    """Raised when a released image resource is used again."""


def load_image(path: str | Path) -> Image.Image:
    """
    Load an image from a file path and convert to RGBA.

    Args:
        path: Path to the image file

    Returns:
        Fully decoded PIL Image in RGBA mode

    Raises:
        FileNotFoundError: If the image file does not exist
        IOError: If the image cannot be opened or decoded

    """
    try:
        with Image.open(path) as img:
            return img.convert(COLOR_MODE_RGBA)
    except FileNotFoundError as e:
        msg = f"Image file not found: '{path}'"
        raise FileNotFoundError(msg) from e
    except OSError as e:
        msg = f"Error loading image '{path}': {e!s}"
        raise OSError(msg) from e


def read_natural_size(path: str | Path) -> Size:
    """Return the pixel size of an image without decoding its data."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except FileNotFoundError as e:
        msg = f"Image file not found: '{path}'"
        raise FileNotFoundError(msg) from e
    except OSError as e:
        msg = f"Error reading image '{path}': {e!s}"
        raise OSError(msg) from e
    return Size(float(width), float(height))


class ImageResource:
    """
    Decoded image owned by exactly one placement.

    The pixel data is decoded lazily on first use and cached until
    ``release`` is called. Releasing is idempotent so board teardown and
    deletion can never double-free; using a released resource raises.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._image: Image.Image | None = None
        self._released = False

    @property
    def released(self) -> bool:
        """True once the resource has been released."""
        return self._released

    def open(self) -> Image.Image:
        """Return the decoded RGBA image, decoding on first call."""
        if self._released:
            msg = f"Image resource already released: {self.path}"
            raise ResourceReleasedError(msg)
        if self._image is None:
            self._image = load_image(self.path)
        return self._image

    def release(self) -> bool:
        """Free the decoded image. Return False if already released."""
        if self._released:
            logger.debug("Resource %s already released", self.path)
            return False
        if self._image is not None:
            self._image.close()
            self._image = None
        self._released = True
        return True

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"ImageResource({str(self.path)!r}, {state})"

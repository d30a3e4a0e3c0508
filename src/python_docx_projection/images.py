"""
Image sizing for inline pictures.

Pixel dimensions are read with Pillow. Images Pillow cannot identify are
still embedded, at DEFAULT_IMAGE_SIZE, so a broken preview never blocks
document generation.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from .constants import DEFAULT_IMAGE_SIZE
from .errors import InvalidArgumentError
from .units import fit_to_width

logger = logging.getLogger(__name__)


def get_image_size(image_path: str | Path) -> tuple[int, int]:
    """Return the native (width, height) of an image in pixels.

    Falls back to DEFAULT_IMAGE_SIZE, with a warning, when the file cannot
    be read as an image.
    """
    try:
        with Image.open(image_path) as img:
            return img.size
    except OSError as e:
        width, height = DEFAULT_IMAGE_SIZE
        logger.warning(f"Could not read image size of {image_path} ({e}); using {width}x{height}")
        return DEFAULT_IMAGE_SIZE


def resolve_display_size(
    image_path: str | Path,
    width_px: int | None = None,
    height_px: int | None = None,
    max_width_px: int = 0,
) -> tuple[int, int]:
    """Work out the pixel size an image is displayed at.

    Explicit dimensions win; a single explicit dimension scales the other
    to keep the aspect ratio. The result is then narrowed to
    ``max_width_px`` when that is positive and exceeded.

    Example:
        >>> resolve_display_size("wide.png", max_width_px=100)  # 400x200 source
        (100, 50)
    """
    for name, value in (("width_px", width_px), ("height_px", height_px)):
        if value is not None and value <= 0:
            raise InvalidArgumentError(
                f"{name} must be positive", code="invalid_image_size", context={name: value}
            )
    if max_width_px < 0:
        raise InvalidArgumentError(
            "max_width_px must not be negative",
            code="invalid_image_size",
            context={"max_width_px": max_width_px},
        )

    if width_px is not None and height_px is not None:
        width, height = width_px, height_px
    else:
        native_width, native_height = get_image_size(image_path)
        if width_px is not None:
            width, height = width_px, max(1, native_height * width_px // native_width)
        elif height_px is not None:
            width, height = max(1, native_width * height_px // native_height), height_px
        else:
            width, height = native_width, native_height

    if max_width_px > 0 and width > max_width_px:
        width, height = fit_to_width(width, height, max_width_px)
    return width, height

"""PNG codec: file <-> normalized 8-bit RGBA pixels."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from pngedit import defaults
from pngedit.errors import DecodeError, EncodeError, SizeMismatch

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_SIXTEEN_BIT_MODES = ("I;16", "I;16B", "I;16L", "I")


def _normalize_to_rgba(img: Image.Image) -> Image.Image:
    """Convert any decoded mode to straight 8-bit RGBA.

    Grayscale and palette images are expanded, missing alpha becomes 255,
    and 16-bit samples keep their high byte.
    """
    if img.mode in _SIXTEEN_BIT_MODES:
        wide = np.asarray(img, dtype=np.uint32)
        img = Image.fromarray((wide >> 8).clip(0, 255).astype(np.uint8))
    return img.convert("RGBA")


def decode(path: PathLike) -> tuple[int, int, bytes]:
    """Read an image file into RGBA bytes.

    Args:
        path: Image file to read

    Returns:
        (width, height, data) with ``len(data) == width * height * 4``

    Raises:
        DecodeError: If the file is missing, unreadable, or not an image
    """
    path = Path(path)
    if not path.is_file():
        raise DecodeError(f"Image file not found: {path}")

    try:
        with Image.open(path) as img:
            img.load()
            source_mode = img.mode
            rgba = _normalize_to_rgba(img)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise DecodeError(f"Failed to decode {path.name}: {e}") from e

    width, height = rgba.size
    logger.info("Decoded %s (%dx%d, source mode %s)", path, width, height, source_mode)
    return width, height, rgba.tobytes()


def encode(path: PathLike, width: int, height: int, data: bytes) -> Path:
    """Write RGBA bytes as an 8-bit RGBA PNG.

    A path without a suffix gets ``.png`` appended.

    Args:
        path: Output file (created or overwritten)
        width: Image width in pixels
        height: Image height in pixels
        data: Flat RGBA bytes, ``width * height * 4`` long

    Returns:
        The path actually written

    Raises:
        SizeMismatch: If ``data`` does not match the dimensions
        EncodeError: If the file cannot be written
    """
    path = Path(path)
    if not path.suffix:
        path = path.with_suffix(defaults.IMAGE_EXTENSIONS[0])

    expected = width * height * defaults.CHANNELS
    if len(data) != expected:
        raise SizeMismatch(f"Pixel data has {len(data)} bytes, expected {expected}")

    try:
        img = Image.frombytes("RGBA", (width, height), bytes(data))
        img.save(path, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to write {path}: {e}") from e

    logger.info("Saved %s (%dx%d)", path, width, height)
    return path

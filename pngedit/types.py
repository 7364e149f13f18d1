"""Core data types for pngedit - framework-agnostic."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np

from pngedit import defaults
from pngedit.errors import InvalidDimensions, SizeMismatch

PixelData = Union[bytes, bytearray, memoryview, np.ndarray]


def _as_rgba_array(data: PixelData, width: int, height: int, error: type[Exception]) -> np.ndarray:
    """Copy raw RGBA data into a fresh (H, W, 4) uint8 array.

    Accepts flat byte strings or numpy arrays of any shape holding exactly
    ``width * height * 4`` values. Raises ``error`` on a length mismatch.
    """
    expected = width * height * defaults.CHANNELS
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise error(f"Expected uint8 pixel data, got {data.dtype}")
        flat = data.reshape(-1)
    else:
        flat = np.frombuffer(bytes(data), dtype=np.uint8)

    if flat.size != expected:
        raise error(
            f"Pixel data has {flat.size} bytes, expected {expected} "
            f"for {width}x{height} RGBA"
        )
    return flat.reshape(height, width, defaults.CHANNELS).copy()


class PixelBuffer:
    """Original and current RGBA pixels for one open image.

    Both arrays are row-major (H, W, 4) uint8 with channels in R, G, B, A
    order. ``original`` is captured once per load and is read-only; it is
    the reset target. ``current`` is what gets displayed and saved.

    A buffer starts empty (0x0). ``load`` populates it; loading another
    image replaces both arrays wholesale.
    """

    def __init__(self) -> None:
        self._width = 0
        self._height = 0
        self._original = np.zeros((0, 0, defaults.CHANNELS), dtype=np.uint8)
        self._original.flags.writeable = False
        self._current = np.zeros((0, 0, defaults.CHANNELS), dtype=np.uint8)

    @classmethod
    def from_data(cls, data: PixelData, width: int, height: int) -> "PixelBuffer":
        """Create a buffer already loaded with ``data``."""
        buffer = cls()
        buffer.load(data, width, height)
        return buffer

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> tuple[int, int]:
        """(height, width), numpy order."""
        return self._height, self._width

    @property
    def is_loaded(self) -> bool:
        return self._width > 0 and self._height > 0

    @property
    def original(self) -> np.ndarray:
        """Read-only view of the pixels captured at load time."""
        return self._original

    @property
    def current(self) -> np.ndarray:
        return self._current

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def load(self, data: PixelData, width: int, height: int) -> None:
        """Replace both original and current pixels with ``data``.

        Args:
            data: Normalized 8-bit RGBA pixels, ``width * height * 4`` values
            width: Image width in pixels (> 0)
            height: Image height in pixels (> 0)

        Raises:
            InvalidDimensions: If a dimension is not positive or the data
                length does not match. The buffer is left untouched.
        """
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise InvalidDimensions(f"Image dimensions must be positive, got {width}x{height}")

        original = _as_rgba_array(data, width, height, InvalidDimensions)
        original.flags.writeable = False

        self._width = width
        self._height = height
        self._original = original
        self._current = original.copy()

    def reset(self) -> None:
        """Discard edits: current becomes an independent copy of original."""
        self._current = self._original.copy()

    def copy_original(self) -> np.ndarray:
        """Return a writable copy of the original pixels."""
        return self._original.copy()

    def set_current(self, data: PixelData) -> None:
        """Replace current pixels.

        Raises:
            SizeMismatch: If ``data`` does not hold exactly width * height * 4 values.
        """
        self._current = _as_rgba_array(data, self._width, self._height, SizeMismatch)

    def current_bytes(self) -> bytes:
        """Current pixels as a flat RGBA byte string."""
        return self._current.tobytes()

    def original_bytes(self) -> bytes:
        return self._original.tobytes()

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self._width}, height={self._height})"


@dataclass
class EditState:
    """Toggled effects and continuous parameters for one document.

    Order of application is fixed by the pipeline, so only field values
    matter, never the order in which they were set.
    """

    invert_enabled: bool = False
    grayscale_enabled: bool = False
    blur_enabled: bool = False
    sharpen_enabled: bool = False
    red_scale: float = defaults.DEFAULT_CHANNEL_SCALE
    green_scale: float = defaults.DEFAULT_CHANNEL_SCALE
    blue_scale: float = defaults.DEFAULT_CHANNEL_SCALE
    rotation_degrees: float = defaults.DEFAULT_ROTATION_DEGREES

"""Fixed-size 3x3 convolution engine for blur and sharpen."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.ndimage import correlate

from pngedit import defaults


@dataclass(frozen=True)
class Kernel:
    """Named 3x3 grid of weights.

    Weights are stored un-normalized; ``apply_kernel`` divides every
    weighted sum by ``defaults.KERNEL_NORMALIZER``.
    """

    name: str
    weights: tuple[tuple[float, float, float], ...]

    def __post_init__(self) -> None:
        size = defaults.KERNEL_SIZE
        if len(self.weights) != size or any(len(row) != size for row in self.weights):
            raise ValueError(f"Kernel {self.name!r} must be {size}x{size}")

    def as_array(self) -> np.ndarray:
        return np.asarray(self.weights, dtype=np.float64)


BOX_BLUR = Kernel(
    name="box_blur",
    weights=(
        (1.0, 1.0, 1.0),
        (1.0, 1.0, 1.0),
        (1.0, 1.0, 1.0),
    ),
)

SHARPEN = Kernel(
    name="sharpen",
    weights=(
        (0.25, 0.25, 0.25),
        (0.25, 7.0, 0.25),
        (0.25, 0.25, 0.25),
    ),
)


def apply_kernel(rgba: np.ndarray, kernel: Kernel) -> np.ndarray:
    """Convolve R, G, B with ``kernel`` over the interior of the image.

    Every output pixel is computed from the input snapshot, never from
    already-written output. The outermost one-pixel frame and the alpha
    channel are copied through unchanged. Results are clamped to
    [0, 255] and truncated to uint8.

    Args:
        rgba: RGBA array (H, W, 4) uint8
        kernel: 3x3 kernel to apply

    Returns:
        New RGBA array. Images smaller than 3x3 come back unchanged.
    """
    out = rgba.copy()
    height, width = rgba.shape[:2]
    if height < defaults.KERNEL_SIZE or width < defaults.KERNEL_SIZE:
        return out

    weights = kernel.as_array()
    for channel in range(3):
        plane = rgba[..., channel].astype(np.float64)
        # Border samples use mode="nearest" but are discarded below
        weighted = correlate(plane, weights, mode="nearest")
        interior = weighted[1:-1, 1:-1] / defaults.KERNEL_NORMALIZER
        out[1:-1, 1:-1, channel] = np.clip(interior, 0.0, 255.0).astype(np.uint8)
    return out

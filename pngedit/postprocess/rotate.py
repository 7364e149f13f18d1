"""Fixed-canvas rotation with nearest-neighbour sampling."""

import math

import numpy as np

from pngedit import defaults


def rotate(rgba: np.ndarray, angle_degrees: float) -> np.ndarray:
    """Rotate image content clockwise about the canvas centre.

    The canvas keeps its size: content rotated outside the frame is
    cropped, and destination pixels with no source are filled with
    transparent black. Each destination pixel centre is mapped back into
    the source and sampled from the nearest pixel.

    Args:
        rgba: RGBA array (H, W, 4) uint8
        angle_degrees: Rotation angle, clockwise-positive on screen

    Returns:
        New RGBA array of the same shape.
    """
    angle = float(angle_degrees) % 360.0
    if angle == 0.0:
        return rgba.copy()

    height, width = rgba.shape[:2]
    theta = math.radians(angle)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    cy = (height - 1) / 2.0
    cx = (width - 1) / 2.0
    ys, xs = np.indices((height, width), dtype=np.float64)
    dx = xs - cx
    dy = ys - cy

    # Inverse of the clockwise rotation (screen y points down)
    src_x = np.floor(cos_t * dx + sin_t * dy + cx + 0.5).astype(np.int64)
    src_y = np.floor(-sin_t * dx + cos_t * dy + cy + 0.5).astype(np.int64)
    valid = (src_x >= 0) & (src_x < width) & (src_y >= 0) & (src_y < height)

    out = np.empty_like(rgba)
    out[...] = np.asarray(defaults.TRANSPARENT_FILL, dtype=np.uint8)
    out[valid] = rgba[src_y[valid], src_x[valid]]
    return out

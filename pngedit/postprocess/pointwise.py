"""Per-pixel colour transforms on (H, W, 4) uint8 RGBA arrays.

Every function returns a new array and leaves alpha untouched.
"""

import numpy as np

from pngedit import defaults


def invert(rgba: np.ndarray) -> np.ndarray:
    """Replace R, G, B with 255 minus their value."""
    out = rgba.copy()
    out[..., :3] = defaults.MAX_CHANNEL_VALUE - rgba[..., :3]
    return out


def grayscale(rgba: np.ndarray) -> np.ndarray:
    """Set R, G, B to the truncated mean of the three channels."""
    out = rgba.copy()
    avg = rgba[..., :3].astype(np.uint16).sum(axis=-1) // 3
    out[..., :3] = avg[..., np.newaxis].astype(np.uint8)
    return out


def scale_channels(rgba: np.ndarray, red: float, green: float, blue: float) -> np.ndarray:
    """Multiply each colour channel by its factor and truncate.

    Args:
        rgba: RGBA array (H, W, 4) uint8
        red: Red multiplier in [0, 1]
        green: Green multiplier in [0, 1]
        blue: Blue multiplier in [0, 1]

    Returns:
        New RGBA array; factors of 1.0 leave their channel unchanged.
    """
    out = rgba.copy()
    for channel, factor in enumerate((red, green, blue)):
        factor = float(factor)
        if factor == 1.0:
            continue
        scaled = np.floor(rgba[..., channel].astype(np.float64) * factor)
        out[..., channel] = np.clip(scaled, 0, 255).astype(np.uint8)
    return out

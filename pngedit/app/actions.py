"""High-level mutations on AppState reused across UIs."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Optional, Union

from pngedit import codec, defaults
from pngedit.app.core import AppState, Document
from pngedit.pipeline import UpdateCallback, recompute
from pngedit.types import EditState, PixelBuffer

logger = logging.getLogger(__name__)

EFFECT_FIELDS = ("invert_enabled", "grayscale_enabled", "blur_enabled", "sharpen_enabled")

CHANNEL_FIELDS = {
    "red": "red_scale",
    "green": "green_scale",
    "blue": "blue_scale",
}


def clamp_channel_scale(value: float) -> Optional[float]:
    """Clamp a channel multiplier into range, or None if not finite."""
    value = float(value)
    if not math.isfinite(value):
        return None
    return max(defaults.MIN_CHANNEL_SCALE, min(defaults.MAX_CHANNEL_SCALE, value))


def clamp_rotation(value: float) -> Optional[float]:
    """Clamp a rotation angle into range, or None if not finite."""
    value = float(value)
    if not math.isfinite(value):
        return None
    return max(defaults.MIN_ROTATION_DEGREES, min(defaults.MAX_ROTATION_DEGREES, value))


# ----------------------------------------------------------------------
# Document lifecycle
# ----------------------------------------------------------------------

def open_image(state: AppState, path: Union[str, Path]) -> Document:
    """Load an image as a fresh document with default edits.

    Raises:
        LoadError: If decoding fails. The previous document is kept.
    """
    path = Path(path)
    width, height, data = codec.decode(path)
    buffer = PixelBuffer.from_data(data, width, height)

    state.document = Document(buffer=buffer, path=path)
    state.edit_state = EditState()
    state.render_dirty = False
    state.texture_dirty = True
    state.status = f"Loaded {path.name} ({width}x{height})"
    logger.info("Opened %s", path)
    return state.document


def save_image(state: AppState, path: Union[str, Path, None] = None) -> Path:
    """Write the current pixels to ``path`` or back to the document's path.

    Saving to a new path makes it the document's path ("Save As").

    Raises:
        NoImageLoaded: If no document is open
        SaveError: If encoding or writing fails; state is unchanged
    """
    document = state.require_document()
    target = Path(path) if path is not None else document.path
    if target is None:
        target = Path.cwd() / defaults.DEFAULT_SAVE_FILENAME

    buffer = document.buffer
    written = codec.encode(target, buffer.width, buffer.height, buffer.current_bytes())

    document.path = written
    state.status = f"Saved {written.name}"
    return written


def close_image(state: AppState) -> None:
    """Drop the open document and its edits."""
    state.document = None
    state.edit_state = EditState()
    state.render_dirty = False
    state.texture_dirty = True
    state.status = "No PNG file loaded"


# ----------------------------------------------------------------------
# Edit state
# ----------------------------------------------------------------------

def set_effect(state: AppState, attr: str, enabled: bool, *, mark_dirty: bool = True) -> bool:
    """Turn the effect toggle ``attr`` (e.g. "blur_enabled") on or off."""
    if attr not in EFFECT_FIELDS:
        raise ValueError(f"Unknown effect {attr!r}, expected one of {EFFECT_FIELDS}")
    enabled = bool(enabled)
    if getattr(state.edit_state, attr) != enabled:
        setattr(state.edit_state, attr, enabled)
        if mark_dirty:
            state.render_dirty = True
    return enabled


def _toggle(state: AppState, attr: str) -> bool:
    return set_effect(state, attr, not getattr(state.edit_state, attr))


def toggle_invert(state: AppState) -> bool:
    return _toggle(state, "invert_enabled")


def toggle_grayscale(state: AppState) -> bool:
    return _toggle(state, "grayscale_enabled")


def toggle_blur(state: AppState) -> bool:
    return _toggle(state, "blur_enabled")


def toggle_sharpen(state: AppState) -> bool:
    return _toggle(state, "sharpen_enabled")


def set_channel_scale(
    state: AppState,
    channel: str,
    value: float,
    *,
    mark_dirty: bool = True,
) -> Optional[float]:
    """Set the multiplier for ``channel`` ("red", "green" or "blue").

    Returns:
        The clamped value now stored, or None if ``value`` was not finite
        and the state was left unchanged.
    """
    attr = CHANNEL_FIELDS.get(channel)
    if attr is None:
        raise ValueError(f"Unknown channel {channel!r}, expected one of {sorted(CHANNEL_FIELDS)}")
    value = clamp_channel_scale(value)
    if value is None:
        return None
    if getattr(state.edit_state, attr) != value:
        setattr(state.edit_state, attr, value)
        if mark_dirty:
            state.render_dirty = True
    return value


def set_rotation(state: AppState, degrees: float, *, mark_dirty: bool = True) -> Optional[float]:
    degrees = clamp_rotation(degrees)
    if degrees is None:
        return None
    if state.edit_state.rotation_degrees != degrees:
        state.edit_state.rotation_degrees = degrees
        if mark_dirty:
            state.render_dirty = True
    return degrees


def reset_edits(state: AppState) -> None:
    """Restore default edits; the next apply reproduces the original pixels."""
    state.edit_state = EditState()
    state.render_dirty = True


def apply_edits(state: AppState, on_update: Optional[UpdateCallback] = None) -> bool:
    """Recompute the open document if edits changed.

    Returns:
        True if a recompute ran, False if there was nothing to do.
    """
    if not state.render_dirty:
        return False
    if state.document is None:
        state.render_dirty = False
        return False

    recompute(state.document.buffer, state.edit_state, on_update)
    state.render_dirty = False
    return True

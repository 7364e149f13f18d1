"""Texture management for Dear PyGui rendering."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from pngedit.errors import DisplayError
from pngedit.types import PixelBuffer

logger = logging.getLogger(__name__)

try:
    import dearpygui.dearpygui as dpg  # type: ignore
except ImportError:
    dpg = None

PLACEHOLDER_SIZE = 32


def _rgba_to_texture_data(rgba: np.ndarray) -> Tuple[int, int, np.ndarray]:
    """Convert RGBA uint8 array to flat float RGBA data.

    Args:
        rgba: RGBA array (H, W, 4) uint8

    Returns:
        (width, height, rgba_flat) where rgba_flat is flattened float32 in [0, 1]
    """
    height, width = rgba.shape[:2]
    rgba_float = rgba.astype(np.float32) / 255.0
    return width, height, rgba_float.reshape(-1)


def _placeholder_texture_data() -> Tuple[int, int, np.ndarray]:
    """Fully transparent texture shown while no image is loaded."""
    empty = np.zeros((PLACEHOLDER_SIZE, PLACEHOLDER_SIZE, 4), dtype=np.uint8)
    return _rgba_to_texture_data(empty)


class TextureManager:
    """Owns the single dynamic texture that mirrors a document's current pixels."""

    def __init__(self) -> None:
        self.texture_registry_id: Optional[int] = None
        self.texture_id: Optional[int] = None
        self.texture_size: Optional[Tuple[int, int]] = None
        # Called with the new handle before the old texture is deleted
        self.on_texture_replaced: Optional[Callable[[int], None]] = None

    def create_registry(self) -> None:
        """Create the texture registry and a placeholder texture."""
        if dpg is None:
            return
        self.texture_registry_id = dpg.add_texture_registry()
        width, height, data = _placeholder_texture_data()
        self.texture_id = self.upload_texture(width, height, data)
        self.texture_size = (width, height)

    def upload_texture(self, width: int, height: int, data: np.ndarray) -> int:
        """Create a new dynamic texture and return its handle."""
        if dpg is None or self.texture_registry_id is None:
            raise DisplayError("Texture registry is not initialized")
        try:
            tex_id = dpg.add_dynamic_texture(width, height, data, parent=self.texture_registry_id)
        except Exception as e:
            raise DisplayError(f"Failed to create {width}x{height} texture: {e}") from e
        logger.info("Created %dx%d texture", width, height)
        return tex_id

    def update_texture(self, tex_id: int, width: int, height: int, data: np.ndarray) -> None:
        """Replace the contents of an existing texture of the same size."""
        if dpg is None:
            raise DisplayError("Dear PyGui is not available")
        if self.texture_size != (width, height):
            raise DisplayError(
                f"Texture is {self.texture_size}, cannot update with {width}x{height} data"
            )
        try:
            dpg.set_value(tex_id, data)
        except Exception as e:
            raise DisplayError(f"Failed to update texture: {e}") from e

    def sync(self, buffer: PixelBuffer) -> int:
        """Mirror ``buffer.current`` into the texture, recreating it on size change.

        Returns:
            The texture handle now holding the buffer's pixels
        """
        width, height, data = _rgba_to_texture_data(buffer.current)
        if self.texture_id is None or self.texture_size != (width, height):
            self._replace(width, height, data)
        else:
            self.update_texture(self.texture_id, width, height, data)
        return self.texture_id

    def show_placeholder(self) -> int:
        """Swap in the empty placeholder texture (no document open)."""
        width, height, data = _placeholder_texture_data()
        return self._replace(width, height, data)

    def _replace(self, width: int, height: int, data: np.ndarray) -> int:
        new_id = self.upload_texture(width, height, data)
        if self.on_texture_replaced is not None:
            self.on_texture_replaced(new_id)
        self.release()
        self.texture_id = new_id
        self.texture_size = (width, height)
        return new_id

    def release(self) -> None:
        """Delete the current texture, if any."""
        if self.texture_id is None:
            return
        if dpg is not None and dpg.does_item_exist(self.texture_id):
            dpg.delete_item(self.texture_id)
        self.texture_id = None
        self.texture_size = None

"""Toolkit-neutral application state and helpers for PNGEditor."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pngedit.errors import NoImageLoaded
from pngedit.types import EditState, PixelBuffer


@dataclass
class Document:
    """One open image: its pixels and where it was loaded from."""

    buffer: PixelBuffer
    path: Optional[Path] = None

    @property
    def title(self) -> str:
        return str(self.path) if self.path is not None else "Untitled"


@dataclass
class AppState:
    """Central application state shared across UIs."""

    document: Optional[Document] = None
    edit_state: EditState = field(default_factory=EditState)

    # Dirty flags – downstream systems decide how to respond.
    render_dirty: bool = False  # current pixels must be recomputed
    texture_dirty: bool = False  # display texture must be (re)created

    status: str = ""

    @property
    def is_loaded(self) -> bool:
        return self.document is not None and self.document.buffer.is_loaded

    def require_document(self) -> Document:
        """Return the open document or raise ``NoImageLoaded``."""
        if self.document is None:
            raise NoImageLoaded("No PNG file loaded")
        return self.document

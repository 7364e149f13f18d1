"""File I/O controller for PNGEditor UI - open, save and save-as."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from pngedit import defaults
from pngedit.app import actions
from pngedit.errors import PNGEditError

if TYPE_CHECKING:
    from pngedit.ui.dpg.app import PNGEditorApp

logger = logging.getLogger(__name__)

try:
    import dearpygui.dearpygui as dpg
except ImportError:
    dpg = None  # type: ignore


def selected_path(app_data: Any) -> Optional[str]:
    """Extract the chosen file path from a Dear PyGui file dialog payload."""
    if not isinstance(app_data, dict):
        return None

    # selections first: file_path_name can degrade to just the extension on reuse
    selections = app_data.get("selections") or {}
    if selections:
        path_str = next(iter(selections.values()))
        if path_str:
            return path_str

    path_str = app_data.get("file_path_name")
    if path_str and Path(path_str).name not in defaults.IMAGE_EXTENSIONS:
        return path_str

    current_path = app_data.get("current_path", "")
    file_name = app_data.get("file_name", "")
    if current_path and file_name:
        return str(Path(current_path) / file_name)
    return None


class FileIOController:
    """Controller for file dialogs and document open/save."""

    def __init__(self, app: "PNGEditorApp"):
        """Initialize controller with reference to main app.

        Args:
            app: The main PNGEditorApp instance
        """
        self.app = app
        self.open_dialog_id: Optional[int] = None
        self.save_as_dialog_id: Optional[int] = None

    # ------------------------------------------------------------------
    # Dialogs
    # ------------------------------------------------------------------

    def _build_dialog(self, tag: str, callback, default_filename: str = "") -> int:
        with dpg.file_dialog(
            directory_selector=False,
            show=False,
            modal=True,
            default_path=str(Path.cwd()),
            default_filename=default_filename,
            callback=callback,
            cancel_callback=self._on_cancelled,
            width=640,
            height=420,
            tag=tag,
        ) as dialog:
            for ext in defaults.IMAGE_EXTENSIONS:
                dpg.add_file_extension(ext, color=(150, 180, 255, 255))
        return dialog

    def open_dialog(self, sender=None, app_data=None) -> None:
        """Show the "Select PNG file" dialog."""
        if dpg is None:
            return
        if self.open_dialog_id is None:
            self.open_dialog_id = self._build_dialog("open_file_dialog", self._on_open_selected)
        dpg.show_item(self.open_dialog_id)

    def save_as_dialog(self, sender=None, app_data=None) -> None:
        """Show the save-as dialog, defaulting to the document's file name."""
        if dpg is None:
            return
        if not self.app.state.is_loaded:
            self.app.set_status("No PNG file loaded")
            return
        if self.save_as_dialog_id is None:
            self.save_as_dialog_id = self._build_dialog(
                "save_as_file_dialog",
                self._on_save_as_selected,
                default_filename=defaults.DEFAULT_SAVE_FILENAME,
            )
        document = self.app.state.document
        if document is not None and document.path is not None:
            dpg.configure_item(
                self.save_as_dialog_id,
                default_path=str(document.path.parent),
                default_filename=document.path.name,
            )
        dpg.show_item(self.save_as_dialog_id)

    def _on_cancelled(self, sender=None, app_data=None) -> None:
        if dpg is None:
            return
        if sender is not None:
            dpg.configure_item(sender, show=False)
        self.app.set_status("Cancelled.")

    def _on_open_selected(self, sender=None, app_data=None) -> None:
        if dpg is not None and sender is not None:
            dpg.configure_item(sender, show=False)
        path_str = selected_path(app_data)
        if not path_str:
            self.app.set_status("No file selected.")
            return
        self.open_path(path_str)

    def _on_save_as_selected(self, sender=None, app_data=None) -> None:
        if dpg is not None and sender is not None:
            dpg.configure_item(sender, show=False)
        path_str = selected_path(app_data)
        if not path_str:
            self.app.set_status("No file selected.")
            return
        self.save(path_str)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def open_path(self, path: str | Path) -> bool:
        """Open ``path`` as the current document; report failures in the status line."""
        path = Path(path)
        if not path.is_absolute():
            path = path.resolve()
        try:
            actions.open_image(self.app.state, path)
        except PNGEditError as e:
            logger.warning("Failed to open %s", path, exc_info=True)
            self.app.set_status(f"Failed to load: {e}")
            return False
        self.app.on_document_changed()
        return True

    def on_save(self, sender=None, app_data=None) -> None:
        """Menu callback for File > Save."""
        self.save()

    def save(self, path: str | Path | None = None) -> bool:
        """Save the current document (to ``path`` when given, else in place)."""
        # Pixels on disk must include edits the display already reflects
        self.app.commit_edits()
        try:
            actions.save_image(self.app.state, path)
        except PNGEditError as e:
            logger.warning("Failed to save", exc_info=True)
            self.app.set_status(f"Failed to save: {e}")
            return False
        self.app.set_status(self.app.state.status)
        self.app.refresh_title()
        return True

    def close(self, sender=None, app_data=None) -> None:
        """Close the current document."""
        actions.close_image(self.app.state)
        self.app.on_document_changed()

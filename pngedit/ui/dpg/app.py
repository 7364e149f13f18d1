"""Dear PyGui application for PNGEditor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from pngedit import defaults
from pngedit.app import actions
from pngedit.app.core import AppState
from pngedit.app.state_manager import StateKey, StateManager
from pngedit.errors import DisplayError
from pngedit.types import PixelBuffer
from pngedit.ui.dpg.file_io_controller import FileIOController
from pngedit.ui.dpg.texture_manager import TextureManager

logger = logging.getLogger(__name__)

try:
    import dearpygui.dearpygui as dpg  # type: ignore
except ImportError:
    dpg = None


TOGGLE_BUTTONS = (
    (StateKey.INVERT, "Invert Colors"),
    (StateKey.GRAYSCALE, "Convert to Grayscale"),
    (StateKey.BLUR, "Blur"),
    (StateKey.SHARPEN, "Sharpen"),
)

SLIDERS = (
    (StateKey.RED_SCALE, "Red", defaults.MIN_CHANNEL_SCALE, defaults.MAX_CHANNEL_SCALE),
    (StateKey.GREEN_SCALE, "Green", defaults.MIN_CHANNEL_SCALE, defaults.MAX_CHANNEL_SCALE),
    (StateKey.BLUE_SCALE, "Blue", defaults.MIN_CHANNEL_SCALE, defaults.MAX_CHANNEL_SCALE),
    (StateKey.ROTATION, "Rotation", defaults.MIN_ROTATION_DEGREES, defaults.MAX_ROTATION_DEGREES),
)

CTRL_KEY = None
SHIFT_KEY = None
O_KEY = None
S_KEY = None
Q_KEY = None
if dpg is not None:
    CTRL_KEY = getattr(dpg, "mvKey_Control", None)
    if CTRL_KEY is None:
        CTRL_KEY = getattr(dpg, "mvKey_LControl", None)
    SHIFT_KEY = getattr(dpg, "mvKey_Shift", None)
    if SHIFT_KEY is None:
        SHIFT_KEY = getattr(dpg, "mvKey_LShift", None)
    O_KEY = getattr(dpg, "mvKey_O", None)
    S_KEY = getattr(dpg, "mvKey_S", None)
    Q_KEY = getattr(dpg, "mvKey_Q", None)


def _toggle_label(label: str, enabled: bool) -> str:
    return f"{label} (on)" if enabled else label


def _widget_tag(key: StateKey) -> str:
    return f"edit_{key.value}"


@dataclass
class PNGEditorApp:
    """Coordinator for Dear PyGui widgets and the edit pipeline.

    Everything runs on the main thread: callbacks are queued by Dear PyGui
    and drained once per frame before the pipeline and texture are updated.
    """

    state: AppState = field(default_factory=AppState)

    main_menu_id: Optional[int] = None
    control_panel_id: Optional[int] = None
    editor_window_id: Optional[int] = None
    image_item_id: Optional[int] = None
    viewport_created: bool = False

    def __post_init__(self) -> None:
        self.state_manager = StateManager(self.state)
        self.texture_manager = TextureManager()
        self.texture_manager.on_texture_replaced = self._bind_texture
        self.file_io = FileIOController(self)

        for key, label in TOGGLE_BUTTONS:
            self.state_manager.subscribe(key, self._on_toggle_changed)
        for key, *_ in SLIDERS:
            self.state_manager.subscribe(key, self._on_slider_changed)

    def require_backend(self) -> None:
        if dpg is None:
            raise RuntimeError("Dear PyGui is not installed. Please `pip install dearpygui` to run the GUI.")

    # ------------------------------------------------------------------
    # Building the interface
    # ------------------------------------------------------------------
    def build(self) -> None:
        """Create viewport, windows, and widgets."""
        self.require_backend()
        dpg.create_context()
        # Callbacks are drained from the main loop so recompute stays on one thread
        dpg.configure_app(manual_callback_management=True)
        self.texture_manager.create_registry()

        dpg.create_viewport(
            title=defaults.WINDOW_TITLE,
            width=defaults.SCREEN_WIDTH,
            height=defaults.SCREEN_HEIGHT,
        )
        self.viewport_created = True

        with dpg.handler_registry():
            dpg.add_key_press_handler(callback=self._on_key_press)

        self._build_main_menu()
        self._build_control_panel()
        self._build_editor_window()
        self.set_status("No PNG file loaded")

    def _build_main_menu(self) -> None:
        w, h, m = defaults.SCREEN_WIDTH, defaults.SCREEN_HEIGHT, defaults.MARGIN
        with dpg.window(
            label="Main Menu",
            pos=(m, m),
            width=w // 6,
            height=h // 4,
            no_resize=True,
            no_move=True,
            no_collapse=True,
            no_close=True,
            menubar=True,
        ) as window:
            self.main_menu_id = window
            with dpg.menu_bar():
                with dpg.menu(label="File"):
                    dpg.add_menu_item(label="Open", shortcut="Ctrl+O", callback=self.file_io.open_dialog)
                    dpg.add_menu_item(label="Save", shortcut="Ctrl+S", callback=self.file_io.on_save)
                    dpg.add_menu_item(label="Save As", shortcut="Ctrl+Shift+S", callback=self.file_io.save_as_dialog)
                    dpg.add_menu_item(label="Close", callback=self.file_io.close)
                    dpg.add_separator()
                    dpg.add_menu_item(label="Quit", shortcut="Ctrl+Q", callback=self.quit)
            dpg.add_text("", tag="status_text", wrap=w // 6 - 2 * m)

    def _build_control_panel(self) -> None:
        w, h, m = defaults.SCREEN_WIDTH, defaults.SCREEN_HEIGHT, defaults.MARGIN
        with dpg.window(
            label="Control Panel",
            pos=(m, h // 4 + m * 2),
            width=w // 6,
            height=3 * h // 4 - m * 3,
            no_resize=True,
            no_move=True,
            no_collapse=True,
            no_close=True,
        ) as window:
            self.control_panel_id = window
            for key, label in TOGGLE_BUTTONS:
                dpg.add_button(
                    label=label,
                    tag=_widget_tag(key),
                    user_data=key,
                    callback=self._on_toggle_clicked,
                    width=-1,
                )
            dpg.add_spacer(height=10)
            for key, label, lo, hi in SLIDERS:
                dpg.add_text(label)
                dpg.add_slider_float(
                    tag=_widget_tag(key),
                    default_value=self.state_manager.get(key),
                    min_value=lo,
                    max_value=hi,
                    user_data=key,
                    callback=self._on_slider_moved,
                    width=-1,
                )
            dpg.add_spacer(height=10)
            dpg.add_button(label="Reset Edits", callback=self._on_reset_clicked, width=-1)

    def _build_editor_window(self) -> None:
        w, h, m = defaults.SCREEN_WIDTH, defaults.SCREEN_HEIGHT, defaults.MARGIN
        with dpg.window(
            label="Image",
            pos=(w // 6 + m * 2, m),
            width=5 * w // 6 - m * 3,
            height=h - m * 2,
            no_resize=True,
            no_move=True,
            no_collapse=True,
            no_close=True,
            horizontal_scrollbar=True,
        ) as window:
            self.editor_window_id = window
            width, height = self.texture_manager.texture_size
            self.image_item_id = dpg.add_image(self.texture_manager.texture_id, width=width, height=height)

    # ------------------------------------------------------------------
    # Widget callbacks
    # ------------------------------------------------------------------
    def _require_loaded(self) -> bool:
        if self.state.is_loaded:
            return True
        self.set_status("No PNG file loaded")
        return False

    def _on_toggle_clicked(self, sender=None, app_data=None, user_data=None) -> None:
        if not self._require_loaded():
            return
        self.state_manager.toggle(user_data)

    def _on_slider_moved(self, sender=None, app_data=None, user_data=None) -> None:
        if not self._require_loaded():
            # Snap the widget back to the unchanged setting
            self._on_slider_changed(user_data, self.state_manager.get(user_data))
            return
        self.state_manager.update(user_data, app_data, debounce=defaults.SLIDER_DEBOUNCE_SECONDS)

    def _on_reset_clicked(self, sender=None, app_data=None) -> None:
        if not self._require_loaded():
            return
        self.state_manager.reset()

    def _on_key_press(self, sender=None, app_data=None) -> None:
        if dpg is None or CTRL_KEY is None or not dpg.is_key_down(CTRL_KEY):
            return
        shift = SHIFT_KEY is not None and dpg.is_key_down(SHIFT_KEY)
        if app_data == O_KEY:
            self.file_io.open_dialog()
        elif app_data == S_KEY and shift:
            self.file_io.save_as_dialog()
        elif app_data == S_KEY:
            self.file_io.save()
        elif app_data == Q_KEY:
            self.quit()

    # ------------------------------------------------------------------
    # State subscribers
    # ------------------------------------------------------------------
    def _on_toggle_changed(self, key: StateKey, value: bool) -> None:
        if dpg is None or not dpg.does_item_exist(_widget_tag(key)):
            return
        label = dict(TOGGLE_BUTTONS)[key]
        dpg.configure_item(_widget_tag(key), label=_toggle_label(label, value))

    def _on_slider_changed(self, key: StateKey, value: float) -> None:
        if dpg is None or not dpg.does_item_exist(_widget_tag(key)):
            return
        if dpg.get_value(_widget_tag(key)) != value:
            dpg.set_value(_widget_tag(key), value)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def set_status(self, message: str) -> None:
        self.state.status = message
        if dpg is not None and dpg.does_item_exist("status_text"):
            dpg.set_value("status_text", message)

    def refresh_title(self) -> None:
        if dpg is None or self.editor_window_id is None:
            return
        document = self.state.document
        dpg.configure_item(self.editor_window_id, label=document.title if document else "Image")

    def on_document_changed(self) -> None:
        """Sync widgets after a new document was opened or closed."""
        self.state_manager.reset()
        # A fresh document shows its original pixels; only the texture needs uploading
        self.state.render_dirty = False
        self.refresh_title()
        self.set_status(self.state.status)

    def commit_edits(self) -> bool:
        """Recompute now for any edit still waiting on its debounce or the next frame."""
        self.state_manager.flush_pending()
        return actions.apply_edits(self.state, on_update=self._upload)

    def _bind_texture(self, tex_id: int) -> None:
        if dpg is None or self.image_item_id is None:
            return
        dpg.configure_item(self.image_item_id, texture_tag=tex_id)

    def _upload(self, buffer: PixelBuffer) -> None:
        """Re-upload the buffer after a completed recompute."""
        try:
            self.texture_manager.sync(buffer)
        except DisplayError as e:
            logger.warning("Texture update failed", exc_info=True)
            self.set_status(str(e))
            return
        self._resize_image_item()

    def _resize_image_item(self) -> None:
        if dpg is None or self.image_item_id is None or self.texture_manager.texture_size is None:
            return
        width, height = self.texture_manager.texture_size
        dpg.configure_item(self.image_item_id, width=width, height=height)

    def _center_image(self) -> None:
        if dpg is None or self.image_item_id is None or self.texture_manager.texture_size is None:
            return
        win_w, win_h = dpg.get_item_rect_size(self.editor_window_id)
        img_w, img_h = self.texture_manager.texture_size
        x = max(int(win_w - img_w) // 2, 0)
        y = max(int(win_h - img_h) // 2, 0)
        dpg.set_item_pos(self.image_item_id, (x, y))

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Per-frame work: debounce, recompute, texture upload."""
        self.state_manager.poll_debounce()

        if self.state.texture_dirty:
            self.state.texture_dirty = False
            document = self.state.document
            if document is None:
                self.texture_manager.show_placeholder()
                self._resize_image_item()
            else:
                self._upload(document.buffer)

        if self.state_manager.needs_refresh():
            actions.apply_edits(self.state, on_update=self._upload)

        self._center_image()

    def run(self) -> None:
        """Show the viewport and run until the window closes."""
        self.require_backend()
        dpg.setup_dearpygui()
        dpg.show_viewport()
        try:
            while dpg.is_dearpygui_running():
                dpg.run_callbacks(dpg.get_callback_queue())
                self.tick()
                dpg.render_dearpygui_frame()
        finally:
            self.shutdown()

    def quit(self, sender=None, app_data=None) -> None:
        if dpg is not None:
            dpg.stop_dearpygui()

    def shutdown(self) -> None:
        """Release the texture and tear down the Dear PyGui context."""
        self.texture_manager.release()
        if dpg is not None and self.viewport_created:
            dpg.destroy_context()
            self.viewport_created = False

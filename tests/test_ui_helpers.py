"""Tests for the Dear PyGui frontend, driven headless with Dear PyGui disabled."""

import numpy as np
import pytest
from PIL import Image

from pngedit import defaults, pipeline
from pngedit.app import actions
from pngedit.app.state_manager import StateKey
from pngedit.pipeline import apply_edits
from pngedit.types import EditState
from pngedit.ui.dpg import app as dpg_app
from pngedit.ui.dpg import file_io_controller, texture_manager
from pngedit.ui.dpg.file_io_controller import selected_path
from pngedit.ui.dpg.texture_manager import PLACEHOLDER_SIZE, _placeholder_texture_data, _rgba_to_texture_data


class TestTextureData:

    def test_flattens_to_unit_floats(self):
        rgba = np.zeros((2, 3, 4), dtype=np.uint8)
        rgba[0, 0] = (255, 0, 51, 255)
        width, height, data = _rgba_to_texture_data(rgba)
        assert (width, height) == (3, 2)
        assert data.dtype == np.float32
        assert data.shape == (2 * 3 * 4,)
        np.testing.assert_allclose(data[:4], [1.0, 0.0, 0.2, 1.0], rtol=1e-6)

    def test_placeholder_is_transparent(self):
        width, height, data = _placeholder_texture_data()
        assert (width, height) == (PLACEHOLDER_SIZE, PLACEHOLDER_SIZE)
        assert not data.any()


class TestSelectedPath:

    def test_prefers_selections(self):
        app_data = {
            "file_path_name": "/tmp/.png",
            "selections": {"a.png": "/tmp/a.png"},
        }
        assert selected_path(app_data) == "/tmp/a.png"

    def test_file_path_name(self):
        assert selected_path({"file_path_name": "/tmp/b.png"}) == "/tmp/b.png"

    def test_rejects_bare_extension(self):
        app_data = {"file_path_name": "/tmp/.png", "current_path": "/tmp", "file_name": "c.png"}
        assert selected_path(app_data) == "/tmp/c.png"

    @pytest.mark.parametrize("app_data", [None, "x", {}, {"file_path_name": ".png"}])
    def test_nothing_selected(self, app_data):
        assert selected_path(app_data) is None


# ---------------------------------------------------------------------------
# Headless PNGEditorApp
# ---------------------------------------------------------------------------

class FakeClock:
    """Deterministic clock for debounce tests."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recomputes(monkeypatch):
    """Count pipeline runs triggered through ``actions.apply_edits``."""
    calls = []

    def counting_recompute(buffer, state, on_update=None):
        calls.append(buffer)
        pipeline.recompute(buffer, state, on_update)

    monkeypatch.setattr(actions, "recompute", counting_recompute)
    return calls


@pytest.fixture
def editor(monkeypatch, fake_clock):
    """PNGEditorApp with Dear PyGui disabled and texture uploads recorded."""
    monkeypatch.setattr(dpg_app, "dpg", None)
    monkeypatch.setattr(file_io_controller, "dpg", None)
    monkeypatch.setattr(texture_manager, "dpg", None)

    app = dpg_app.PNGEditorApp()
    app.state_manager._clock = fake_clock
    app.synced = []
    monkeypatch.setattr(app.texture_manager, "sync", lambda buffer: app.synced.append(buffer.current.copy()))
    return app


@pytest.fixture
def opened(editor, png_path):
    assert editor.file_io.open_path(png_path)
    editor.tick()
    editor.synced.clear()
    return editor


def _saved_pixels(path):
    with Image.open(path) as img:
        return np.asarray(img.convert("RGBA"))


class TestTick:

    def test_open_uploads_original_without_recompute(self, editor, png_path, random_rgba, recomputes):
        editor.file_io.open_path(png_path)
        assert editor.state.texture_dirty is True
        editor.tick()
        assert recomputes == []
        assert len(editor.synced) == 1
        np.testing.assert_array_equal(editor.synced[0], random_rgba)
        assert editor.state.texture_dirty is False

    def test_debounced_slider_waits_for_delay(self, opened, fake_clock, recomputes):
        opened._on_slider_moved(None, 0.0, StateKey.RED_SCALE)
        opened.tick()
        assert recomputes == []
        assert opened.synced == []

        fake_clock.advance(defaults.SLIDER_DEBOUNCE_SECONDS)
        opened.tick()
        assert len(recomputes) == 1
        assert len(opened.synced) == 1
        assert not opened.synced[0][..., 0].any()

    def test_changes_in_one_frame_recompute_once(self, opened, fake_clock, random_rgba, recomputes):
        opened._on_toggle_clicked(None, None, StateKey.INVERT)
        opened._on_slider_moved(None, 0.5, StateKey.GREEN_SCALE)
        fake_clock.advance(defaults.SLIDER_DEBOUNCE_SECONDS)
        opened.tick()
        assert len(recomputes) == 1
        assert len(opened.synced) == 1

        expected = apply_edits(random_rgba, EditState(invert_enabled=True, green_scale=0.5))
        np.testing.assert_array_equal(opened.synced[0], expected)

        opened.tick()
        assert len(recomputes) == 1
        assert len(opened.synced) == 1

    def test_two_toggles_recompute_once(self, opened, recomputes):
        opened._on_toggle_clicked(None, None, StateKey.BLUR)
        opened._on_toggle_clicked(None, None, StateKey.SHARPEN)
        opened.tick()
        assert len(recomputes) == 1
        assert len(opened.synced) == 1

    def test_reset_recomputes_to_original(self, opened, random_rgba):
        opened._on_toggle_clicked(None, None, StateKey.GRAYSCALE)
        opened.tick()
        opened._on_reset_clicked()
        opened.tick()
        np.testing.assert_array_equal(opened.synced[-1], random_rgba)
        assert opened.state.edit_state == EditState()


class TestSaveIncludesPendingEdits:

    def test_debounced_slider_is_saved(self, opened, tmp_path):
        opened._on_slider_moved(None, 0.0, StateKey.RED_SCALE)
        out = tmp_path / "out.png"
        assert opened.file_io.save(out)
        assert not _saved_pixels(out)[..., 0].any()

    def test_toggle_in_same_frame_is_saved(self, opened, tmp_path, random_rgba):
        opened._on_toggle_clicked(None, None, StateKey.INVERT)
        out = tmp_path / "out.png"
        assert opened.file_io.save(out)
        np.testing.assert_array_equal(_saved_pixels(out)[..., :3], 255 - random_rgba[..., :3])
        assert len(opened.synced) == 1
        assert opened.state.render_dirty is False

    def test_nothing_pending_skips_recompute(self, opened, tmp_path, random_rgba, recomputes):
        out = tmp_path / "out.png"
        assert opened.file_io.save(out)
        assert recomputes == []
        np.testing.assert_array_equal(_saved_pixels(out), random_rgba)


class TestNoDocumentGuard:

    def test_toggle_ignored(self, editor):
        editor._on_toggle_clicked(None, None, StateKey.INVERT)
        assert editor.state.edit_state.invert_enabled is False
        assert editor.state.status == "No PNG file loaded"

    def test_slider_ignored(self, editor):
        editor._on_slider_moved(None, 0.25, StateKey.BLUE_SCALE)
        assert editor.state.edit_state.blue_scale == 1.0
        assert editor.state.status == "No PNG file loaded"

    def test_reset_ignored(self, editor):
        editor._on_reset_clicked()
        assert editor.state.render_dirty is False
        assert editor.state.status == "No PNG file loaded"

    def test_save_reports_error(self, editor, tmp_path):
        assert editor.file_io.save(tmp_path / "out.png") is False
        assert editor.state.status.startswith("Failed to save")

"""Tests for the non-destructive edit pipeline."""

from dataclasses import replace

import numpy as np
import pytest

from pngedit.pipeline import apply_edits, recompute
from pngedit.postprocess import BOX_BLUR, SHARPEN, apply_kernel, grayscale, invert, rotate, scale_channels
from pngedit.types import EditState, PixelBuffer

ALL_ON = EditState(
    invert_enabled=True,
    grayscale_enabled=True,
    blur_enabled=True,
    sharpen_enabled=True,
    red_scale=0.8,
    green_scale=0.5,
    blue_scale=0.25,
    rotation_degrees=30.0,
)


class TestRecompute:

    def test_idempotent(self, random_buffer):
        recompute(random_buffer, ALL_ON)
        first = random_buffer.current_bytes()
        recompute(random_buffer, ALL_ON)
        assert random_buffer.current_bytes() == first

    def test_flag_order_independent(self, random_rgba):
        a = PixelBuffer.from_data(random_rgba, 7, 5)
        b = PixelBuffer.from_data(random_rgba, 7, 5)

        state_a = EditState()
        state_a.invert_enabled = True
        state_a.grayscale_enabled = True
        recompute(a, state_a)

        state_b = EditState()
        state_b.grayscale_enabled = True
        state_b.invert_enabled = True
        recompute(b, state_b)

        assert a.current_bytes() == b.current_bytes()

    def test_defaults_reproduce_original(self, random_buffer):
        recompute(random_buffer, ALL_ON)
        random_buffer.reset()
        recompute(random_buffer, EditState())
        assert random_buffer.current_bytes() == random_buffer.original_bytes()

    def test_invert_toggle_round_trip(self, random_buffer):
        state = EditState(invert_enabled=True)
        recompute(random_buffer, state)
        assert random_buffer.current_bytes() != random_buffer.original_bytes()
        state.invert_enabled = False
        recompute(random_buffer, state)
        assert random_buffer.current_bytes() == random_buffer.original_bytes()

    def test_grayscale_fixpoint(self, random_rgba):
        once = PixelBuffer.from_data(random_rgba, 7, 5)
        recompute(once, EditState(grayscale_enabled=True))
        current = once.current
        assert np.all(current[..., 0] == current[..., 1])

        twice = PixelBuffer.from_data(once.current, 7, 5)
        recompute(twice, EditState(grayscale_enabled=True))
        assert twice.current_bytes() == once.current_bytes()

    @pytest.mark.parametrize("state", [
        EditState(blur_enabled=True),
        EditState(sharpen_enabled=True),
        EditState(blur_enabled=True, sharpen_enabled=True),
    ])
    def test_convolution_border_ring(self, random_buffer, state):
        recompute(random_buffer, state)
        current, original = random_buffer.current, random_buffer.original
        np.testing.assert_array_equal(current[0], original[0])
        np.testing.assert_array_equal(current[-1], original[-1])
        np.testing.assert_array_equal(current[:, 0], original[:, 0])
        np.testing.assert_array_equal(current[:, -1], original[:, -1])

    def test_does_not_depend_on_previous_current(self, random_buffer):
        state = EditState(blur_enabled=True)
        recompute(random_buffer, state)
        expected = random_buffer.current_bytes()
        random_buffer.set_current(np.zeros((5, 7, 4), dtype=np.uint8))
        recompute(random_buffer, state)
        assert random_buffer.current_bytes() == expected

    def test_on_update_called_after_commit(self, random_buffer):
        seen = []

        def on_update(buffer):
            seen.append(buffer.current_bytes())

        recompute(random_buffer, EditState(invert_enabled=True), on_update=on_update)
        assert seen == [random_buffer.current_bytes()]
        assert seen[0] != random_buffer.original_bytes()

    def test_original_never_modified(self, random_buffer, random_rgba):
        recompute(random_buffer, ALL_ON)
        np.testing.assert_array_equal(random_buffer.original, random_rgba)

    def test_requires_loaded_buffer(self):
        with pytest.raises(AssertionError):
            recompute(PixelBuffer(), EditState())


class TestStageOrder:

    def test_matches_fixed_order(self, random_rgba):
        expected = invert(random_rgba)
        expected = grayscale(expected)
        expected = apply_kernel(expected, BOX_BLUR)
        expected = apply_kernel(expected, SHARPEN)
        expected = scale_channels(expected, 0.8, 0.5, 0.25)
        expected = rotate(expected, 30.0)
        np.testing.assert_array_equal(apply_edits(random_rgba, ALL_ON), expected)

    def test_invert_runs_before_blur(self, random_rgba):
        state = EditState(invert_enabled=True, blur_enabled=True)
        expected = apply_kernel(invert(random_rgba), BOX_BLUR)
        np.testing.assert_array_equal(apply_edits(random_rgba, state), expected)

    def test_rotation_runs_last(self, random_rgba):
        state = replace(EditState(), red_scale=0.5, rotation_degrees=180.0)
        expected = scale_channels(random_rgba, 0.5, 1.0, 1.0)[::-1, ::-1]
        np.testing.assert_array_equal(apply_edits(random_rgba, state), expected)

    def test_scales_only_touch_colour(self, random_rgba):
        out = apply_edits(random_rgba, EditState(red_scale=0.0, green_scale=0.0, blue_scale=0.0))
        assert not out[..., :3].any()
        np.testing.assert_array_equal(out[..., 3], random_rgba[..., 3])

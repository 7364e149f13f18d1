"""Centralized state management for edit settings.

StateManager mediates all edit-setting mutations, providing:
- A single update path with range clamping
- Built-in debouncing with last-value-wins semantics
- Per-key subscriber notifications
- The per-frame ``render_dirty`` flag consumed by the main loop
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from pngedit.app import actions
from pngedit.app.core import AppState

logger = logging.getLogger(__name__)


class StateKey(enum.Enum):
    """Keys for managed edit settings."""

    # Effect toggles
    INVERT = "invert_enabled"
    GRAYSCALE = "grayscale_enabled"
    BLUR = "blur_enabled"
    SHARPEN = "sharpen_enabled"

    # Continuous parameters
    RED_SCALE = "red_scale"
    GREEN_SCALE = "green_scale"
    BLUE_SCALE = "blue_scale"
    ROTATION = "rotation_degrees"


@dataclass
class _PendingEntry:
    """A deferred recompute signal for a debounced update.

    State is mutated and subscribers notified immediately; only the
    ``render_dirty`` flag waits until the delay elapses.
    """

    timestamp: float
    delay: float


class StateManager:
    """Centralized mutation and notification hub for edit settings.

    All edit changes flow through ``update()``. State is always mutated
    immediately (so reads see the latest value). For debounced updates,
    only the recompute signal is deferred until ``poll_debounce()`` finds
    the delay has elapsed.

    Writes go through the setters in ``pngedit.app.actions`` so clamping
    and dirty tracking live in one place.

    The manager never recomputes pixels itself. It sets
    ``AppState.render_dirty`` and the main loop calls
    ``actions.apply_edits`` once per frame.
    """

    _TOGGLE_ACTIONS: dict[StateKey, Callable[[AppState], bool]] = {
        StateKey.INVERT: actions.toggle_invert,
        StateKey.GRAYSCALE: actions.toggle_grayscale,
        StateKey.BLUR: actions.toggle_blur,
        StateKey.SHARPEN: actions.toggle_sharpen,
    }

    _SCALE_CHANNELS: dict[StateKey, str] = {
        StateKey.RED_SCALE: "red",
        StateKey.GREEN_SCALE: "green",
        StateKey.BLUE_SCALE: "blue",
    }

    def __init__(
        self,
        state: AppState,
        *,
        _clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._state = state
        self._clock = _clock

        self._subscribers: dict[StateKey, list[Callable]] = {}
        self._pending: dict[StateKey, _PendingEntry] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def update(self, key: StateKey, value: Any, *, debounce: float = 0.0) -> None:
        """Request an edit change.

        Args:
            key: Which setting to change.
            value: New value. Scales and angles are clamped into range;
                non-finite numbers are ignored.
            debounce: Seconds to defer the recompute signal. ``<= 0``
                means immediate. State is always mutated right away
                regardless of debounce.
        """
        immediate = debounce <= 0
        applied = self._apply(key, value, mark_dirty=immediate)
        if applied is None:
            logger.debug("Ignoring non-finite value %r for %s", value, key)
            return

        if immediate:
            # A pending entry for the same value would otherwise never mark dirty
            if self._pending.pop(key, None) is not None:
                self._state.render_dirty = True
        else:
            self._pending[key] = _PendingEntry(timestamp=self._clock(), delay=debounce)
        self._notify(key, applied)

    def toggle(self, key: StateKey) -> bool:
        """Flip an effect toggle and return its new value."""
        toggle_action = self._TOGGLE_ACTIONS.get(key)
        if toggle_action is None:
            raise ValueError(f"{key!r} is not an effect toggle")
        value = toggle_action(self._state)
        self._pending.pop(key, None)
        self._notify(key, value)
        return value

    def reset(self) -> None:
        """Restore default edit settings and notify every key."""
        self._pending.clear()
        actions.reset_edits(self._state)
        for key in StateKey:
            self._notify(key, self.get(key))

    def get(self, key: StateKey) -> Any:
        return getattr(self._state.edit_state, key.value)

    def poll_debounce(self) -> None:
        """Mark the state dirty for debounced entries whose delay has elapsed."""
        if not self._pending:
            return
        now = self._clock()
        ready = [
            key for key, entry in self._pending.items()
            if now - entry.timestamp >= entry.delay
        ]
        for key in ready:
            self._pending.pop(key, None)
        if ready:
            self._state.render_dirty = True

    def flush_pending(self) -> None:
        """Fire all pending deferred recompute signals immediately."""
        if self._pending:
            self._pending.clear()
            self._state.render_dirty = True

    def needs_refresh(self) -> bool:
        """Return whether a recompute is due this frame."""
        return self._state.render_dirty

    def subscribe(self, key: StateKey, callback: Callable) -> None:
        """Register *callback* for notifications when *key* changes.

        Callback signature: ``(key, value)``.
        """
        self._subscribers.setdefault(key, []).append(callback)

    def unsubscribe(self, key: StateKey, callback: Callable) -> None:
        """Remove a previously registered callback."""
        callbacks = self._subscribers.get(key)
        if callbacks:
            try:
                callbacks.remove(callback)
            except ValueError:
                pass

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply(self, key: StateKey, value: Any, *, mark_dirty: bool) -> Any:
        """Write *value* through the matching action; None means it was rejected."""
        if key in self._TOGGLE_ACTIONS:
            return actions.set_effect(self._state, key.value, value, mark_dirty=mark_dirty)
        if key in self._SCALE_CHANNELS:
            return actions.set_channel_scale(
                self._state, self._SCALE_CHANNELS[key], value, mark_dirty=mark_dirty,
            )
        if key is StateKey.ROTATION:
            return actions.set_rotation(self._state, value, mark_dirty=mark_dirty)
        raise ValueError(f"No EditState mapping for {key!r}")

    def _notify(self, key: StateKey, value: Any) -> None:
        """Call all subscribers registered for *key*, isolating exceptions."""
        callbacks = self._subscribers.get(key)
        if not callbacks:
            return
        for cb in list(callbacks):
            try:
                cb(key, value)
            except Exception:
                logger.warning(
                    "Subscriber %r raised for %s", cb, key, exc_info=True,
                )

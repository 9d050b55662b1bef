"""Tests for EffectHandle."""

from __future__ import annotations

from unittest.mock import MagicMock

from glitchfx.core.effects import EffectHandle, HandleState


class TestEffectHandle:
    """Tests for EffectHandle state transitions."""

    def test_starts_running(self) -> None:
        handle = EffectHandle("shake")
        assert handle.running
        assert handle.state is HandleState.RUNNING

    def test_cancel_runs_rollback_once(self) -> None:
        """Rollback runs on the first cancel only."""
        rollback = MagicMock()
        handle = EffectHandle("glitch", on_cancel=rollback)

        handle.cancel()
        handle.cancel()

        rollback.assert_called_once_with()
        assert handle.state is HandleState.CANCELLED

    def test_calling_handle_cancels(self) -> None:
        rollback = MagicMock()
        handle = EffectHandle("glitch")
        handle.bind_cancel(rollback)

        handle()

        rollback.assert_called_once_with()

    def test_cancel_after_complete_is_noop(self) -> None:
        """A completed handle never rolls back."""
        rollback = MagicMock()
        handle = EffectHandle("typewriter", on_cancel=rollback)

        handle.complete()
        handle.cancel()

        rollback.assert_not_called()
        assert handle.state is HandleState.COMPLETED

    def test_complete_after_cancel_is_noop(self) -> None:
        handle = EffectHandle("typewriter")
        handle.cancel()
        handle.complete()
        assert handle.state is HandleState.CANCELLED

    def test_inert_handle(self) -> None:
        """Inert handles ignore cancel and complete."""
        handle = EffectHandle.inert("shake")
        handle.cancel()
        handle.complete()
        assert handle.is_inert
        assert not handle.running
        assert handle.state is HandleState.INERT

    def test_done_callbacks_fire_once(self) -> None:
        """Done callbacks run when the handle leaves the running state."""
        seen: list[HandleState] = []
        handle = EffectHandle("glitch")
        handle.add_done_callback(lambda h: seen.append(h.state))

        handle.complete()
        handle.cancel()

        assert seen == [HandleState.COMPLETED]

    def test_done_callback_after_finish_runs_immediately(self) -> None:
        seen: list[str] = []
        handle = EffectHandle("glitch")
        handle.cancel()

        handle.add_done_callback(lambda h: seen.append(h.name))

        assert seen == ["glitch"]

    def test_repr(self) -> None:
        assert repr(EffectHandle("drift")) == "EffectHandle(name='drift', state=running)"

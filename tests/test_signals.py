"""Tests for fetchwrap.signals."""

from __future__ import annotations

from fetchwrap.signals import AbortController


class TestAbortController:
    def test_initial_state(self) -> None:
        controller = AbortController()
        assert controller.signal.aborted is False
        assert controller.signal.reason is None

    def test_abort_runs_listeners_in_order(self) -> None:
        controller = AbortController()
        calls: list[str] = []
        controller.signal.add_listener(lambda: calls.append("a"))
        controller.signal.add_listener(lambda: calls.append("b"))

        controller.abort("gone")

        assert calls == ["a", "b"]
        assert controller.signal.aborted is True
        assert controller.signal.reason == "gone"

    def test_second_abort_is_noop(self) -> None:
        controller = AbortController()
        calls: list[int] = []
        controller.signal.add_listener(lambda: calls.append(1))

        controller.abort("first")
        controller.abort("second")

        assert calls == [1]
        assert controller.signal.reason == "first"

    def test_removed_listener_not_called(self) -> None:
        controller = AbortController()
        calls: list[int] = []

        def listener() -> None:
            calls.append(1)

        controller.signal.add_listener(listener)
        controller.signal.remove_listener(listener)
        controller.abort()

        assert calls == []

    def test_remove_unknown_listener_is_ignored(self) -> None:
        AbortController().signal.remove_listener(lambda: None)

    def test_listener_added_after_abort_not_called(self) -> None:
        controller = AbortController()
        controller.abort()
        calls: list[int] = []
        controller.signal.add_listener(lambda: calls.append(1))
        assert calls == []

"""Tests for the Control / Window variant and child window cleanup."""

import asyncio

import pytest

from routescout.domain.controls import Control, Window, close_child_windows
from routescout.errors import ChildWindowCleanupError
from routescout.ports.outbound import AccessibleNode, Rect


def run(coro):
    """Helper to run async functions in sync tests."""
    return asyncio.run(coro)


def window_node(handle, name="", class_name="MozillaWindowClass"):
    return AccessibleNode(handle, "window", name, class_name, supports_window=True)


class FakeDesktop:
    def __init__(self):
        self.children = {}
        self.closed = []
        self.unclosable = set()

    def root(self):
        return AccessibleNode("root", "pane", "Desktop")

    def find_all(self, parent, control_type=None, name=None, class_name=None):
        return [
            n for n in self.children.get(parent.handle, [])
            if (control_type is None or n.control_type == control_type)
            and (name is None or n.name == name)
            and (class_name is None or n.class_name == class_name)
        ]

    def bounding_rectangle(self, node):
        return Rect(10, 20, 300, 200)

    def maximize(self, node):
        pass

    def close(self, node):
        if node.handle in self.unclosable:
            raise RuntimeError("access denied")
        self.closed.append(node.handle)
        for kids in self.children.values():
            kids[:] = [k for k in kids if k.handle != node.handle]

    def is_enabled(self, node):
        return node.handle != "disabled"

    def is_offscreen(self, node):
        return False


class TestWrap:
    def test_window_with_window_support(self):
        control = Control.wrap(window_node("w"), FakeDesktop())
        assert isinstance(control, Window)

    def test_pane_with_window_support_is_window(self):
        node = AccessibleNode("p", "pane", supports_window=True)
        assert isinstance(Control.wrap(node, FakeDesktop()), Window)

    def test_window_without_window_support_is_generic(self):
        node = AccessibleNode("w", "window", supports_window=False)
        control = Control.wrap(node, FakeDesktop())
        assert not isinstance(control, Window)

    def test_button_is_generic(self):
        node = AccessibleNode("b", "button", "OK")
        control = Control.wrap(node, FakeDesktop())
        assert type(control) is Control
        assert not hasattr(control, "maximize")


class TestControl:
    def test_find_applies_filters(self):
        desktop = FakeDesktop()
        desktop.children["root"] = [
            window_node("a", class_name="MozillaWindowClass"),
            window_node("b", class_name="Chrome_WidgetWin_1"),
            AccessibleNode("c", "button", "OK"),
        ]
        root = Control.wrap(desktop.root(), desktop)

        found = root.find_windows(class_name="MozillaWindowClass")

        assert [w.node.handle for w in found] == ["a"]

    def test_properties(self):
        desktop = FakeDesktop()
        window = Control.wrap(window_node("w", name="Firefox"), desktop)
        assert window.name == "Firefox"
        assert window.class_name == "MozillaWindowClass"
        assert window.is_enabled is True
        assert window.is_offscreen is False
        assert window.bounding_rectangle == Rect(10, 20, 300, 200)

    def test_try_close_reports_failure(self):
        desktop = FakeDesktop()
        desktop.unclosable.add("w")
        window = Control.wrap(window_node("w"), desktop)
        assert window.try_close() is False

    def test_try_close_success(self):
        desktop = FakeDesktop()
        window = Control.wrap(window_node("w"), desktop)
        assert window.try_close() is True
        assert desktop.closed == ["w"]


class TestCloseChildWindows:
    def _main_window(self, desktop):
        desktop.children["main"] = []
        return Control.wrap(window_node("main"), desktop)

    def test_no_children_is_noop(self):
        desktop = FakeDesktop()
        main = self._main_window(desktop)
        run(close_child_windows(main, backoff=0))
        assert desktop.closed == []

    def test_closes_all_children(self):
        desktop = FakeDesktop()
        main = self._main_window(desktop)
        desktop.children["main"] = [window_node("c1"), window_node("c2")]

        run(close_child_windows(main, backoff=0))

        assert desktop.closed == ["c1", "c2"]

    def test_one_failure_does_not_stop_others(self):
        desktop = FakeDesktop()
        main = self._main_window(desktop)
        desktop.children["main"] = [window_node("stuck"), window_node("ok")]
        desktop.unclosable.add("stuck")

        with pytest.raises(ChildWindowCleanupError):
            run(close_child_windows(main, backoff=0))

        assert desktop.closed == ["ok"]

    def test_retry_cap(self):
        desktop = FakeDesktop()
        main = self._main_window(desktop)
        desktop.children["main"] = [window_node("stuck")]
        desktop.unclosable.add("stuck")
        attempts = []
        original = desktop.close

        def counting_close(node):
            attempts.append(node.handle)
            original(node)

        desktop.close = counting_close

        with pytest.raises(ChildWindowCleanupError):
            run(close_child_windows(main, backoff=0, max_retries=2))

        assert len(attempts) == 3

    def test_cancel_stops_retrying(self):
        desktop = FakeDesktop()
        main = self._main_window(desktop)
        desktop.children["main"] = [window_node("stuck")]
        desktop.unclosable.add("stuck")
        attempts = []
        original = desktop.close

        def counting_close(node):
            attempts.append(node.handle)
            original(node)

        desktop.close = counting_close

        async def scenario():
            cancel = asyncio.Event()
            cancel.set()
            await close_child_windows(main, backoff=0, cancel=cancel)

        with pytest.raises(ChildWindowCleanupError):
            run(scenario())

        assert len(attempts) == 1

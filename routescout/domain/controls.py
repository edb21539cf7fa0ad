"""Accessibility controls — a closed Control / Window variant.

Whether an element is a plain control or a window is decided once, when the
raw accessibility node is wrapped. Only ``Window`` exposes the window
capabilities (maximize, close, bounding rectangle).
"""

import asyncio
import sys
from typing import List, Optional

from routescout.errors import ChildWindowCleanupError
from routescout.ports.outbound import AccessibleNode, DesktopPort, Rect

WINDOW_CONTROL_TYPES = ("window", "pane")

MAX_CLOSE_WINDOWS_RETRIES = 2


def _log(msg: str):
    print(msg, file=sys.stderr)


class Control:
    """Generic element of the accessibility tree."""

    def __init__(self, node: AccessibleNode, desktop: DesktopPort):
        self._node = node
        self._desktop = desktop

    @staticmethod
    def wrap(node: AccessibleNode, desktop: DesktopPort) -> "Control":
        if node.control_type in WINDOW_CONTROL_TYPES and node.supports_window:
            return Window(node, desktop)
        return Control(node, desktop)

    @property
    def node(self) -> AccessibleNode:
        return self._node

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def class_name(self) -> str:
        return self._node.class_name

    @property
    def control_type(self) -> str:
        return self._node.control_type

    @property
    def is_enabled(self) -> bool:
        return self._desktop.is_enabled(self._node)

    def find(
        self,
        control_type: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> List["Control"]:
        """Descendants matching every given filter."""
        nodes = self._desktop.find_all(
            self._node, control_type=control_type, name=name, class_name=class_name,
        )
        return [Control.wrap(n, self._desktop) for n in nodes]

    def find_windows(
        self,
        control_type: Optional[str] = "window",
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> List["Window"]:
        return [
            c for c in self.find(control_type, name, class_name)
            if isinstance(c, Window)
        ]

    def __repr__(self):
        return f"{type(self).__name__}({self.control_type!r}, name={self.name!r})"


class Window(Control):
    """Element that supports window operations."""

    @property
    def bounding_rectangle(self) -> Rect:
        return self._desktop.bounding_rectangle(self._node)

    @property
    def is_offscreen(self) -> bool:
        return self._desktop.is_offscreen(self._node)

    def maximize(self):
        self._desktop.maximize(self._node)

    def close(self):
        self._desktop.close(self._node)

    def try_close(self) -> bool:
        """Close the window; failures are logged and reported as False."""
        try:
            self.close()
        except Exception as e:
            _log(f"Failed to close window ({self.name}): {e}")
            return False
        print(f"Closed window ({self.name})")
        return True


async def close_child_windows(
    main_window: Window,
    backoff: float,
    cancel: Optional[asyncio.Event] = None,
    max_retries: int = MAX_CLOSE_WINDOWS_RETRIES,
):
    """Close every descendant window of ``main_window``.

    Each round tries to close all children, waits ``backoff`` seconds and
    looks again. Gives up after ``max_retries`` extra rounds, or as soon as
    ``cancel`` is set after a wait.
    """
    children = main_window.find_windows()
    attempt = -1
    while children and attempt < max_retries:
        attempt += 1
        for child in children:
            child.try_close()

        await asyncio.sleep(backoff)
        children = main_window.find_windows()
        if cancel is not None and cancel.is_set():
            break

    if children:
        raise ChildWindowCleanupError(
            f"Failed to close child windows in {max_retries} attempts"
        )

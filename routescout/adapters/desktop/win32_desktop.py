"""Win32 desktop adapter — implements DesktopPort over the native window tree.

Top-level windows and captioned child windows are reported as ``window``
elements that support window operations; every other child is a ``pane``.
Hidden windows (and the children of hidden windows) are not reported.
"""

from typing import List, Optional

import win32con
import win32gui

from routescout.ports.outbound import AccessibleNode, Rect

DESKTOP_HANDLE = 0


class Win32Desktop:
    """Accessibility tree backed by pywin32. Implements DesktopPort protocol."""

    def root(self) -> AccessibleNode:
        return AccessibleNode(
            handle=DESKTOP_HANDLE,
            control_type="pane",
            name="Desktop",
            class_name="#32769",
        )

    def _node(self, hwnd: int) -> AccessibleNode:
        style = win32gui.GetWindowLong(hwnd, win32con.GWL_STYLE)
        top_level = win32gui.GetParent(hwnd) == DESKTOP_HANDLE
        is_window = top_level or (style & win32con.WS_CAPTION) == win32con.WS_CAPTION
        return AccessibleNode(
            handle=hwnd,
            control_type="window" if is_window else "pane",
            name=win32gui.GetWindowText(hwnd),
            class_name=win32gui.GetClassName(hwnd),
            supports_window=is_window,
        )

    @staticmethod
    def _children(hwnd: int) -> List[int]:
        handles: List[int] = []

        def collect(child, _):
            handles.append(child)
            return True

        try:
            win32gui.EnumChildWindows(hwnd, collect, None)
        except win32gui.error:
            # Raised by some pywin32 builds for windows without children
            return []
        return handles

    def _descendants(self, hwnd: int) -> List[int]:
        if hwnd != DESKTOP_HANDLE:
            return self._children(hwnd)

        top_level: List[int] = []

        def collect(child, _):
            top_level.append(child)
            return True

        win32gui.EnumWindows(collect, None)
        handles: List[int] = []
        for top in top_level:
            handles.append(top)
            handles.extend(self._children(top))
        return handles

    def find_all(
        self,
        parent: AccessibleNode,
        control_type: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> List[AccessibleNode]:
        found = []
        for hwnd in self._descendants(parent.handle):
            if not win32gui.IsWindow(hwnd) or not win32gui.IsWindowVisible(hwnd):
                continue
            node = self._node(hwnd)
            if control_type is not None and node.control_type != control_type:
                continue
            if name is not None and node.name != name:
                continue
            if class_name is not None and node.class_name != class_name:
                continue
            found.append(node)
        return found

    def bounding_rectangle(self, node: AccessibleNode) -> Rect:
        left, top, right, bottom = win32gui.GetWindowRect(node.handle)
        return Rect(left, top, right - left, bottom - top)

    def maximize(self, node: AccessibleNode) -> None:
        win32gui.ShowWindow(node.handle, win32con.SW_MAXIMIZE)

    def close(self, node: AccessibleNode) -> None:
        win32gui.PostMessage(node.handle, win32con.WM_CLOSE, 0, 0)

    def is_enabled(self, node: AccessibleNode) -> bool:
        return bool(win32gui.IsWindowEnabled(node.handle))

    def is_offscreen(self, node: AccessibleNode) -> bool:
        return not win32gui.IsWindowVisible(node.handle) or bool(win32gui.IsIconic(node.handle))

"""Screen grabber adapter — implements ScreenPort with pyautogui."""

import pyautogui
from PIL import Image

from routescout.ports.outbound import Rect


class PyAutoGuiScreen:
    """Grabs screen regions at native resolution."""

    def grab(self, rect: Rect) -> Image.Image:
        if rect.is_empty:
            raise ValueError(f"Cannot capture an empty area: {rect}")
        return pyautogui.screenshot(region=(rect.left, rect.top, rect.width, rect.height))

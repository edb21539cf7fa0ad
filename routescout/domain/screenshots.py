"""Screenshot sweep — visit each page in the sandboxed browser and capture it."""

import asyncio
import re
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from routescout.domain.session import BrowserSession

DEFAULT_PAGES = [
    "google.com",
    "facebook.com",
    "youtube.com",
    "baidu.com",
    "yahoo.com",
    "amazon.com",
    "wikipedia.org",
    "qq.com",
    "google.co.in",
    "twitter.com",
    "live.com",
]

_UNSAFE_FILENAME_RE = re.compile(r"[^\w.]")


def load_pages(pages_file: Optional[Union[str, Path]] = None) -> List[str]:
    """Non-blank lines of the pages file, or the default page list."""
    if not pages_file:
        return list(DEFAULT_PAGES)
    lines = Path(pages_file).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def screenshot_filename(url: str) -> str:
    return _UNSAFE_FILENAME_RE.sub("", url) + ".png"


class ScreenshotSweep:
    """Captures one screenshot per page, one browser session per page."""

    def __init__(
        self,
        session_factory: Callable[[Sequence[str]], BrowserSession],
        screenshot_dir: Union[str, Path],
        page_load_delay: float = 10.0,
    ):
        self._session_factory = session_factory
        self._screenshot_dir = Path(screenshot_dir)
        self._page_load_delay = page_load_delay

    async def run(self, pages: Sequence[str]) -> List[Path]:
        self._screenshot_dir.mkdir(parents=True, exist_ok=True)
        saved = []
        for url in pages:
            print(f"Visiting {url}...")
            async with self._session_factory([url]) as session:
                await asyncio.sleep(self._page_load_delay)
                image = await session.capture()
                path = self._screenshot_dir / screenshot_filename(url)
                image.save(path)
                saved.append(path)
        return saved

"""Browser session lifecycle — launch, window discovery, capture, teardown.

A ``BrowserSession`` owns one sandboxed browser process and, once found, its
main window. Use it as an async context manager: teardown (close the window,
then kill the process) runs on every exit path, including a failed start.

States: LAUNCHING -> DISCOVERING -> READY -> CAPTURING -> READY
        any state -> DISPOSING -> CLOSED
"""

import asyncio
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

from routescout.config import DiscoveryConfig
from routescout.domain.controls import Control, Window, _log, close_child_windows
from routescout.errors import (
    AmbiguousWindowError,
    ChildWindowCleanupError,
    SessionCancelled,
    WindowNotFoundError,
)
from routescout.ports.outbound import (
    DesktopPort,
    LaunchResult,
    ProcessHandle,
    SandboxPort,
    ScreenPort,
)


class SessionState(Enum):
    LAUNCHING = "launching"
    DISCOVERING = "discovering"
    READY = "ready"
    CAPTURING = "capturing"
    DISPOSING = "disposing"
    CLOSED = "closed"


class BrowserSession:
    """One browser instance running in the sandbox under a route file."""

    def __init__(
        self,
        sandbox: SandboxPort,
        desktop: DesktopPort,
        screen: ScreenPort,
        targets: Sequence[str],
        route_file: Path,
        discovery: Optional[DiscoveryConfig] = None,
        instance_id: Optional[str] = None,
        cancel: Optional[asyncio.Event] = None,
    ):
        self._sandbox = sandbox
        self._desktop = desktop
        self._screen = screen
        self._targets = list(targets)
        self._route_file = route_file
        self._discovery = discovery or DiscoveryConfig()
        self._instance_id = instance_id
        self._cancel = cancel
        self._process: Optional[ProcessHandle] = None
        self._launch: Optional[LaunchResult] = None
        self.window: Optional[Window] = None
        self.state = SessionState.LAUNCHING

    @property
    def instance_id(self) -> Optional[str]:
        """Sandbox instance this session runs in, once the runner reported it."""
        if self._launch is not None:
            return self._launch.instance_id
        return self._instance_id

    async def __aenter__(self) -> "BrowserSession":
        try:
            await self.start()
        except BaseException:
            await self.dispose()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.dispose()

    async def start(self) -> "BrowserSession":
        self.state = SessionState.LAUNCHING
        self._process = await self._sandbox.launch(
            self._targets, self._route_file, instance_id=self._instance_id,
        )
        print(f"[{datetime.now().isoformat()}] Launched browser (pid {self._process.pid})")

        self.state = SessionState.DISCOVERING
        self.window = await self._discover_window()
        self._launch = await self._process.launch_result(self._discovery.output_timeout)
        if self._launch is None:
            _log(f"Runner reported no instance id within {self._discovery.output_timeout}s")
        self.state = SessionState.READY
        return self

    async def _discover_window(self) -> Window:
        """Poll the desktop until exactly one browser window shows up."""
        desktop = Control.wrap(self._desktop.root(), self._desktop)
        config = self._discovery
        for attempt in range(1, config.max_attempts + 1):
            windows = desktop.find_windows(class_name=config.window_class)
            if len(windows) > 1:
                raise AmbiguousWindowError(
                    f"More than 1 browser window found ({len(windows)} x {config.window_class})"
                )
            if windows:
                print(f"[{datetime.now().isoformat()}] Found browser window on attempt {attempt}")
                return windows[0]

            await asyncio.sleep(config.poll_interval)
            if self._cancel is not None and self._cancel.is_set():
                raise SessionCancelled("Window discovery cancelled")

        raise WindowNotFoundError(
            f"Browser window not found after {config.max_attempts} attempts"
        )

    async def capture(self) -> Any:
        """Maximize the window, let it settle, and grab its pixels."""
        if self.state is not SessionState.READY or self.window is None:
            raise RuntimeError(f"Cannot capture a session in state {self.state.value}")

        self.state = SessionState.CAPTURING
        self.window.maximize()
        await asyncio.sleep(self._discovery.settle_delay)
        image = self._screen.grab(self.window.bounding_rectangle)
        self.state = SessionState.READY
        return image

    async def close_child_windows(self) -> bool:
        """Close dialogs and popups of the browser window.

        Returns False when some child windows would not close; that is
        reported, not raised.
        """
        if self.window is None:
            raise RuntimeError(f"No browser window in state {self.state.value}")
        try:
            await close_child_windows(
                self.window, self._discovery.child_close_backoff, cancel=self._cancel,
            )
        except ChildWindowCleanupError as e:
            _log(str(e))
            return False
        return True

    async def dispose(self):
        """Close the window, then kill the process. Safe to call repeatedly."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.DISPOSING
        try:
            if self.window is not None:
                self.window.close()
        except Exception as e:
            _log(f"Failed to close browser window: {e}")
        finally:
            self.window = None
            await self._terminate()
            self.state = SessionState.CLOSED

    async def _terminate(self):
        process, self._process = self._process, None
        if process is None:
            return
        try:
            if process.returncode is None:
                process.kill()
            await process.wait()
            if self._launch is None:
                self._launch = await process.launch_result(0)
        except ProcessLookupError:
            pass
        except Exception as e:
            _log(f"Failed to terminate browser process {process.pid}: {e}")

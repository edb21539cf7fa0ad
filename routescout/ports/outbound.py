"""Outbound ports — interfaces for the sandbox, the desktop and storage."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, Protocol, Sequence, runtime_checkable

from pydantic import BaseModel

if TYPE_CHECKING:
    from routescout.domain.routes import RouteDocument


@dataclass(frozen=True)
class Rect:
    """Screen rectangle in physical pixels."""

    left: int
    top: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class AccessibleNode:
    """Raw element of the desktop accessibility tree."""

    handle: Any
    control_type: str  # e.g. "window", "pane", "button"
    name: str = ""
    class_name: str = ""
    supports_window: bool = False  # exposes maximize/close


class _Container(BaseModel):
    id: str


class _LaunchBody(BaseModel):
    container: _Container


class LaunchResult(BaseModel):
    """Structured (--format=json) output of one sandbox runner call."""

    result: _LaunchBody

    @property
    def instance_id(self) -> str:
        return self.result.container.id


@runtime_checkable
class ProcessHandle(Protocol):
    """A live runner process plus the instance id it reports."""

    pid: int

    @property
    def returncode(self) -> Optional[int]: ...

    def kill(self) -> None: ...
    async def wait(self) -> int: ...

    async def launch_result(self, timeout: Optional[float] = None) -> Optional[LaunchResult]:
        """Structured output of the runner, or None if none arrived in time."""
        ...


@runtime_checkable
class SandboxPort(Protocol):
    """Interface for the sandbox session runner."""

    async def launch(
        self,
        targets: Sequence[str],
        route_file: Path,
        instance_id: Optional[str] = None,
    ) -> ProcessHandle: ...

    async def run(
        self,
        targets: Sequence[str],
        route_file: Path,
        instance_id: Optional[str] = None,
    ) -> LaunchResult: ...


@runtime_checkable
class DesktopPort(Protocol):
    """Interface for the desktop accessibility tree."""

    def root(self) -> AccessibleNode: ...

    def find_all(
        self,
        parent: AccessibleNode,
        control_type: Optional[str] = None,
        name: Optional[str] = None,
        class_name: Optional[str] = None,
    ) -> List[AccessibleNode]: ...

    def bounding_rectangle(self, node: AccessibleNode) -> Rect: ...
    def maximize(self, node: AccessibleNode) -> None: ...
    def close(self, node: AccessibleNode) -> None: ...
    def is_enabled(self, node: AccessibleNode) -> bool: ...
    def is_offscreen(self, node: AccessibleNode) -> bool: ...


@runtime_checkable
class ScreenPort(Protocol):
    """Interface for grabbing screen pixels."""

    def grab(self, rect: Rect) -> Any: ...


@runtime_checkable
class RouteStorePort(Protocol):
    """Interface for persistent route file storage."""

    path: Path

    def load(self) -> RouteDocument: ...
    def save(self, document: RouteDocument) -> None: ...

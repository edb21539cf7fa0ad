"""routescout — discover the network routes a sandboxed browser needs."""

from routescout.config import AppConfig, IP_ADD_SECTION, IP_BLOCK_SECTION
from routescout.errors import (
    AmbiguousWindowError,
    ChildWindowCleanupError,
    ConfigurationError,
    RouteScoutError,
    SandboxError,
    SessionCancelled,
    WindowNotFoundError,
)
from routescout.domain.routes import RouteDocument, merge
from routescout.domain.log_analyzer import analyze_directory
from routescout.domain.convergence import ConvergenceLoop, ConvergenceResult
from routescout.domain.session import BrowserSession, SessionState

__all__ = [
    "AppConfig",
    "IP_ADD_SECTION",
    "IP_BLOCK_SECTION",
    "RouteScoutError",
    "ConfigurationError",
    "SandboxError",
    "WindowNotFoundError",
    "AmbiguousWindowError",
    "SessionCancelled",
    "ChildWindowCleanupError",
    "RouteDocument",
    "merge",
    "analyze_directory",
    "ConvergenceLoop",
    "ConvergenceResult",
    "BrowserSession",
    "SessionState",
]

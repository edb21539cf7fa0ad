"""Domain layer — route documents, log analysis, sessions and the convergence loop."""

from routescout.domain.routes import RouteDocument, RouteSection, dedupe, merge, parse, serialize
from routescout.domain.log_analyzer import analyze_directory, analyze_lines, normalize_address
from routescout.domain.seeds import derive_seeds
from routescout.domain.controls import Control, Window, close_child_windows
from routescout.domain.session import BrowserSession, SessionState
from routescout.domain.convergence import ConvergenceLoop, ConvergenceResult
from routescout.domain.screenshots import ScreenshotSweep, load_pages, screenshot_filename

__all__ = [
    "RouteDocument",
    "RouteSection",
    "dedupe",
    "merge",
    "parse",
    "serialize",
    "analyze_directory",
    "analyze_lines",
    "normalize_address",
    "derive_seeds",
    "Control",
    "Window",
    "close_child_windows",
    "BrowserSession",
    "SessionState",
    "ConvergenceLoop",
    "ConvergenceResult",
    "ScreenshotSweep",
    "load_pages",
    "screenshot_filename",
]

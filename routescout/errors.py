"""Error taxonomy shared by the domain and the adapters."""


class RouteScoutError(Exception):
    """Base class for every error raised by routescout"""
    pass


class ConfigurationError(RouteScoutError):
    """Raised when seed input or settings are missing or invalid"""
    pass


class SandboxError(RouteScoutError):
    """Raised when the sandbox runner fails or returns unusable output"""
    pass


class WindowNotFoundError(RouteScoutError):
    """Raised when no browser window shows up within the polling bound"""
    pass


class AmbiguousWindowError(RouteScoutError):
    """Raised when more than one candidate browser window is found"""
    pass


class SessionCancelled(RouteScoutError):
    """Raised when the caller cancels a session between polling attempts"""
    pass


class ChildWindowCleanupError(RouteScoutError):
    """Raised when child windows survive every close attempt. Callers treat it as non-fatal."""
    pass

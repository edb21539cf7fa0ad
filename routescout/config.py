"""Configuration loaded from the environment (and an optional .env file)."""

__version__ = "0.1.0"

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from routescout.errors import ConfigurationError

load_dotenv()

# Section names understood by the sandbox route engine
IP_ADD_SECTION = "ip-add"
IP_BLOCK_SECTION = "ip-block"

DEFAULT_LOGS_DIR_TEMPLATE = "~/AppData/Local/Spoon/Containers/Sandboxes/{instance_id}/logs"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def expand_path(value: str) -> Path:
    """Expand environment variables and ~ in a user-supplied path."""
    return Path(os.path.expanduser(os.path.expandvars(value)))


@dataclass
class RunnerConfig:
    executable: str = "turbo"
    app: str = "mozilla/firefox"
    route_block: str = "ip"
    timeout: Optional[float] = None


@dataclass
class DiscoveryConfig:
    window_class: str = "MozillaWindowClass"
    poll_interval: float = 1.0
    max_attempts: int = 32
    settle_delay: float = 3.0
    child_close_backoff: float = 0.5
    output_timeout: float = 5.0


@dataclass
class LogConfig:
    logs_dir_template: str = DEFAULT_LOGS_DIR_TEMPLATE
    prefix: str = "xc"

    def directory_for(self, instance_id: str) -> Path:
        """Log directory of one sandbox instance."""
        return expand_path(self.logs_dir_template.format(instance_id=instance_id))


@dataclass
class AppConfig:
    """Typed configuration for the convergence loop and the screenshot sweep."""

    route_file: Path = Path("routes.txt")
    screenshot_dir: Path = Path("screenshots")
    page_load_delay: float = 10.0
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    logs: LogConfig = field(default_factory=LogConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        return cls(
            route_file=expand_path(_env_str("ROUTESCOUT_ROUTE_FILE", "routes.txt")),
            screenshot_dir=expand_path(_env_str("ROUTESCOUT_SCREENSHOT_DIR", "./screenshots")),
            page_load_delay=_env_float("ROUTESCOUT_PAGE_LOAD_DELAY", 10.0),
            runner=RunnerConfig(
                executable=_env_str("ROUTESCOUT_RUNNER", "turbo"),
                app=_env_str("ROUTESCOUT_APP", "mozilla/firefox"),
                route_block=_env_str("ROUTESCOUT_ROUTE_BLOCK", "ip"),
                timeout=_env_float("ROUTESCOUT_RUNNER_TIMEOUT", None),
            ),
            discovery=DiscoveryConfig(
                window_class=_env_str("ROUTESCOUT_WINDOW_CLASS", "MozillaWindowClass"),
                poll_interval=_env_float("ROUTESCOUT_POLL_INTERVAL", 1.0),
                max_attempts=_env_int("ROUTESCOUT_MAX_ATTEMPTS", 32),
                settle_delay=_env_float("ROUTESCOUT_SETTLE_DELAY", 3.0),
                child_close_backoff=_env_float("ROUTESCOUT_CHILD_CLOSE_BACKOFF", 0.5),
                output_timeout=_env_float("ROUTESCOUT_OUTPUT_TIMEOUT", 5.0),
            ),
            logs=LogConfig(
                logs_dir_template=_env_str("ROUTESCOUT_LOGS_DIR", DEFAULT_LOGS_DIR_TEMPLATE),
                prefix=_env_str("ROUTESCOUT_LOG_PREFIX", "xc"),
            ),
        )

"""Connection log analysis — finds destinations a sandbox session blocked.

Session logs carry two event shapes we care about::

    Host cdn.example.com resolved to: ::ffff:93.184.216.34
    Connection blocked: 93.184.216.34

Blocked addresses are reported by hostname whenever a resolution event for
the address appears anywhere in the session's logs, so resolutions are
collected in a first pass before blocks are mapped in a second one.
"""

import re
from pathlib import Path
from typing import Dict, Iterable, List, Union

from routescout.domain.routes import dedupe

RESOLVED_RE = re.compile(r"Host\s+(\S+)\s+resolved to:\s*(\S+)")
BLOCKED_RE = re.compile(r"Connection blocked:\s*(\S+)")

_MAPPED_IPV4_PREFIX = "::ffff:"
_IPV4_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}$")


def normalize_address(address: str) -> str:
    """Turn an IPv6-mapped IPv4 literal (::ffff:a.b.c.d) into a.b.c.d."""
    if address.lower().startswith(_MAPPED_IPV4_PREFIX):
        embedded = address[len(_MAPPED_IPV4_PREFIX):]
        if _IPV4_RE.match(embedded):
            return embedded
    return address


def build_resolution_map(lines: Iterable[str]) -> Dict[str, str]:
    resolved: Dict[str, str] = {}
    for line in lines:
        match = RESOLVED_RE.search(line)
        if match:
            name, address = match.groups()
            resolved[normalize_address(address)] = name
    return resolved


def find_blocked(lines: Iterable[str], resolved: Dict[str, str]) -> List[str]:
    blocked = []
    for line in lines:
        match = BLOCKED_RE.search(line)
        if match:
            address = normalize_address(match.group(1))
            blocked.append(resolved.get(address, address))
    return dedupe(blocked)


def analyze_lines(lines: Iterable[str]) -> List[str]:
    """Block report for log lines already in memory."""
    lines = list(lines)
    return find_blocked(lines, build_resolution_map(lines))


def session_log_files(log_dir: Union[str, Path], prefix: str) -> List[Path]:
    log_dir = Path(log_dir)
    if not log_dir.is_dir():
        return []
    return sorted(p for p in log_dir.glob(f"{prefix}*") if p.is_file())


def _read_lines(files: List[Path]) -> List[str]:
    lines: List[str] = []
    for path in files:
        lines.extend(path.read_text(encoding="utf-8", errors="replace").splitlines())
    return lines


def analyze_directory(log_dir: Union[str, Path], prefix: str = "xc") -> List[str]:
    """Block report for every ``prefix*`` log file of one session."""
    return analyze_lines(_read_lines(session_log_files(log_dir, prefix)))

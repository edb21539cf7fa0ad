"""Route file document — named sections of host/address entries.

Pure Python, no I/O. A document is immutable; ``merge`` returns a new one.

Text format::

    [ip-add]
    *.example.com
    93.184.216.34

    [ip-block]
    *
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

SECTION_RE = re.compile(r"^\[(.+)\]$")


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeated items, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


@dataclass(frozen=True)
class RouteSection:
    name: str
    entries: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RouteDocument:
    sections: Tuple[RouteSection, ...] = ()

    @property
    def section_names(self) -> List[str]:
        return [s.name for s in self.sections]

    def get(self, name: str) -> Optional[RouteSection]:
        return next((s for s in self.sections if s.name == name), None)

    def entries(self, name: str) -> List[str]:
        section = self.get(name)
        return list(section.entries) if section else []

    def as_dict(self) -> Dict[str, List[str]]:
        return {s.name: list(s.entries) for s in self.sections}


def merge(document: RouteDocument, name: str, new_entries: Iterable[str]) -> RouteDocument:
    """Append entries to a section (created at the end if missing) and dedupe it."""
    merged = RouteSection(name, tuple(dedupe([*document.entries(name), *new_entries])))
    if document.get(name) is None:
        return RouteDocument(document.sections + (merged,))
    return RouteDocument(
        tuple(merged if s.name == name else s for s in document.sections)
    )


def parse(text: str) -> RouteDocument:
    """Parse route file text.

    Blank lines are separators only. Entries seen before the first
    section header have nowhere to go and are dropped.
    """
    sections: Dict[str, List[str]] = {}
    current = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        match = SECTION_RE.match(line)
        if match:
            current = match.group(1)
            sections.setdefault(current, [])
        elif current is not None:
            sections[current].append(line)
    return RouteDocument(
        tuple(RouteSection(name, tuple(dedupe(entries))) for name, entries in sections.items())
    )


def serialize(document: RouteDocument) -> str:
    lines: List[str] = []
    for section in document.sections:
        lines.append(f"[{section.name}]")
        lines.extend(section.entries)
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")

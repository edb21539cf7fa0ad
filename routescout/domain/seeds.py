"""Seed host patterns derived from the operator's URLs."""

from typing import Iterable, List
from urllib.parse import urlparse

from routescout.domain.routes import dedupe
from routescout.errors import ConfigurationError


def url_host(url: str) -> str:
    """Host part of a URL; bare hosts like ``example.com`` are accepted."""
    text = url.strip()
    if "://" not in text:
        text = f"http://{text}"
    try:
        host = urlparse(text).hostname or ""
    except ValueError:
        host = ""
    if not host:
        raise ConfigurationError(f"Cannot find a host in URL {url!r}")
    return host


def seed_pattern(url: str) -> str:
    host = url_host(url)
    if host.startswith("www."):
        host = host[len("www."):]
    return f"*.{host}"


def derive_seeds(urls: Iterable[str]) -> List[str]:
    """``https://www.example.com/path`` -> ``*.example.com``, one per URL."""
    urls = [u for u in urls if u and u.strip()]
    if not urls:
        raise ConfigurationError("At least one URL is required")
    return dedupe(seed_pattern(u) for u in urls)

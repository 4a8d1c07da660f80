"""HTTP retrieval for pages and page resources.

Nothing in the analysis modules touches the network; the CLI and the web
app fetch through here and hand plain strings to the analyzers.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

import requests

from .config import DEFAULT_TIMEOUT, USER_AGENT
from .errors import FetchError
from .logging import get_logger

logger = get_logger("fetch")

DEFAULT_HEADERS = {"User-Agent": USER_AGENT}


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class Resource:
    url: str
    mime: str
    headers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {"url": self.url, "mime": self.mime, "headers": dict(self.headers)}


def fetch(url: str, timeout: int = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> FetchResult:
    getter = session.get if session is not None else requests.get
    logger.debug("GET %s", url)
    try:
        resp = getter(url, timeout=timeout, headers=DEFAULT_HEADERS)
    except requests.RequestException as exc:
        raise FetchError(url, str(exc)) from exc
    return FetchResult(url=url, status_code=resp.status_code, text=resp.text, headers=dict(resp.headers))


def fetch_html(url: str, timeout: int = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> str:
    """Fetch a page and return its body, failing on non-2xx responses."""
    result = fetch(url, timeout=timeout, session=session)
    if not result.ok:
        raise FetchError(url, f"HTTP {result.status_code}")
    return result.text


class ResourceCache:
    """Time-bounded cache of fetched resources keyed by absolute URL.

    Entries expire ``ttl`` seconds after insertion; when ``max_entries`` is
    reached the oldest entry is evicted first.
    """

    def __init__(
        self,
        ttl: float = 300.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, tuple]" = OrderedDict()

    def get(self, url: str) -> Optional[Resource]:
        entry = self._entries.get(url)
        if entry is None:
            return None
        expires_at, resource = entry
        if self._clock() >= expires_at:
            del self._entries[url]
            return None
        return resource

    def put(self, resource: Resource) -> None:
        self._entries.pop(resource.url, None)
        while len(self._entries) >= self.max_entries:
            self._entries.popitem(last=False)
        self._entries[resource.url] = (self._clock() + self.ttl, resource)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.get(url) is not None

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for expires_at, _ in self._entries.values() if now < expires_at)


def _resolve(url: str, base: Optional[str]) -> str:
    if url.startswith("/") and base:
        return f"{base.rstrip('/')}{url}"
    return url


def retrieve_resource(
    url: str,
    cache: ResourceCache,
    base: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Resource:
    full_url = _resolve(url, base)
    cached = cache.get(full_url)
    if cached is not None:
        logger.debug("Cache hit for %s", full_url)
        return cached

    result = fetch(full_url, timeout=timeout, session=session)
    headers = {k.lower(): v for k, v in result.headers.items()}
    resource = Resource(
        url=full_url,
        mime=headers.get("content-type", "application/octet-stream"),
        headers=result.headers,
    )
    cache.put(resource)
    return resource


def retrieve_resources(
    urls: Iterable[str],
    cache: ResourceCache,
    base: Optional[str] = None,
    timeout: int = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> List[Resource]:
    return [retrieve_resource(u, cache, base=base, timeout=timeout, session=session) for u in urls]

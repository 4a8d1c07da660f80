from __future__ import annotations

import math
import re
from urllib.parse import urljoin, urlparse, urlunparse


def normalize_url(url: str) -> str:
    cleaned = url.strip()
    parsed = urlparse(cleaned)
    scheme = (parsed.scheme or "").lower()
    netloc = parsed.netloc
    path = parsed.path
    query = parsed.query

    if not netloc:
        if scheme not in {"http", "https"}:
            scheme = "https"
        reparsed = urlparse(f"//{cleaned}", scheme=scheme)
        if reparsed.netloc:
            netloc = reparsed.netloc
            path = reparsed.path
            query = reparsed.query or query
    else:
        scheme = scheme or "https"

    if not netloc and path and not path.startswith("/"):
        netloc = path
        path = ""

    if not netloc:
        raise ValueError(f"Cannot determine host for URL: {url!r}")

    if not path:
        path = "/"
    elif not path.startswith("/"):
        path = f"/{path}"

    return urlunparse((scheme, netloc, path, "", query, ""))


def to_absolute(base: str, maybe_rel: str) -> str:
    return urljoin(base, maybe_rel)


def is_absolute_url(value: str) -> bool:
    """True when ``value`` parses as a URL with a scheme (``https:``, ``mailto:``...)."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if not parsed.scheme or not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*$", parsed.scheme):
        return False
    if parsed.scheme in {"http", "https", "ftp", "ws", "wss"}:
        return bool(parsed.netloc)
    return bool(parsed.netloc or parsed.path)


def extract_visible_text(html: str) -> str:
    # Remove script/style/noscript
    html = re.sub(r"<script[\s\S]*?</script>", " ", html, flags=re.I)
    html = re.sub(r"<style[\s\S]*?</style>", " ", html, flags=re.I)
    html = re.sub(r"<noscript[\s\S]*?</noscript>", " ", html, flags=re.I)
    # Remove comments
    html = re.sub(r"<!--([\s\S]*?)-->", " ", html)
    # Block tags become paragraph breaks so paragraphs survive
    html = re.sub(
        r"</?(?:p|div|section|article|li|br|h[1-6]|tr|td|th|ul|ol|nav|footer|header|main|aside)[^>]*>",
        "\n\n",
        html,
        flags=re.I,
    )
    text = re.sub(r"<[^>]+>", " ", html)
    text = re.sub(r"[ \t\r\f\v]+", " ", text)
    text = re.sub(r" ?\n ?", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def round_half_up(n: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return int(math.floor(n + 0.5))


def round_to(n: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(n * factor + 0.5) / factor

"""
Link resolution and crawl-scope filtering.
"""
from __future__ import annotations

from typing import Collection, Optional
from urllib.parse import urldefrag, urljoin, urlparse

# Fixed denylist; any URL containing one of these substrings is never crawled
EXCLUDE_PATTERNS: tuple[str, ...] = (
    "/blog/",
    "/changelog/",
    ".pdf",
    ".zip",
    ".tar.gz",
    "/downloads/",
    "/login",
    "/signup",
    "/api-reference/",
)


def origin_of(url: str) -> str:
    """Return scheme://netloc for a URL."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def get_base_path(url: str) -> str:
    """Directory portion of a URL's path, without trailing slash ('/docs/a' -> '/docs')."""
    try:
        path = urlparse(url).path
    except ValueError:
        return ""
    return path.rsplit("/", 1)[0]


def resolve_url(href: str, origin: str, base_path: str) -> Optional[str]:
    """
    Resolve an href found on a page to an absolute URL without fragment.

    - Absolute http(s) hrefs are kept as-is
    - Root-relative hrefs ('/x') are joined to the origin
    - Anything else is joined to origin + base_path as a directory
    Returns None if the href cannot be resolved.
    """
    href = href.strip()
    if not href:
        return None
    try:
        if href.startswith(("http://", "https://")):
            url = href
        elif href.startswith("/") and not href.startswith("//"):
            url = origin + href
        else:
            url = urljoin(f"{origin}{base_path}/", href)
        url, _ = urldefrag(url)
        # Force port parsing so malformed netlocs are rejected here
        urlparse(url).port
    except ValueError:
        return None
    return url or None


def is_same_origin(url: str, origin: str) -> bool:
    """Check if URL has the same scheme and netloc as the scope origin."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return f"{parsed.scheme}://{parsed.netloc}" == origin


def is_excluded(url: str) -> bool:
    """Check the URL against the fixed denylist."""
    return any(pattern in url for pattern in EXCLUDE_PATTERNS)


def should_follow(url: Optional[str], origin: str, visited: Collection[str]) -> bool:
    """In-scope predicate: same origin, not yet visited, not denylisted."""
    if not url or not is_same_origin(url, origin):
        return False
    if url in visited:
        return False
    return not is_excluded(url)

"""
HTTP fetching for the crawler.
"""
from __future__ import annotations

import re
from typing import Dict, Optional

import requests

DEFAULT_USER_AGENT = "DocCrawler/1.0"

# Users often paste the whole header line ("Authorization: Bearer ...")
AUTH_PREFIX_RE = re.compile(r"^Authorization:\s*", re.IGNORECASE)


class FetchError(Exception):
    """A single fetch failed (transport error, timeout or non-2xx status)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


def build_headers(
    auth_header: Optional[str] = None,
    cookies: Optional[str] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Dict[str, str]:
    """Build request headers: user agent, optional Authorization and Cookie."""
    headers = {"User-Agent": user_agent}
    if auth_header:
        value = AUTH_PREFIX_RE.sub("", auth_header).strip()
        if value:
            headers["Authorization"] = value
    if cookies:
        headers["Cookie"] = cookies
    return headers


def new_session(headers: Dict[str, str]) -> requests.Session:
    """Create an HTTP session carrying the given default headers."""
    session = requests.Session()
    session.headers.update(headers)
    return session


def fetch(session: requests.Session, url: str, timeout_s: float) -> str:
    """
    GET a URL and return the decoded body.

    Raises:
        FetchError: on transport failure, timeout, or any non-2xx status.
    """
    try:
        resp = session.get(url, timeout=timeout_s, allow_redirects=True)
    except requests.RequestException as e:
        raise FetchError(url, type(e).__name__) from e

    if not 200 <= resp.status_code < 300:
        raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)
    return resp.text

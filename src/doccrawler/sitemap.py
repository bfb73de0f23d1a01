"""
Sitemap discovery.
"""
from __future__ import annotations

from typing import List

import requests
from bs4 import BeautifulSoup

from doccrawler.fetch import FetchError, fetch
from doccrawler.links import origin_of

SITEMAP_NAMES: tuple[str, ...] = ("sitemap.xml", "sitemap_index.xml")


def candidate_sitemap_urls(base_url: str) -> List[str]:
    """Ordered, de-duplicated sitemap locations under the base URL and its origin."""
    base = base_url.rstrip("/")
    origin = origin_of(base_url)
    candidates = [f"{base}/{name}" for name in SITEMAP_NAMES]
    candidates += [f"{origin}/{name}" for name in SITEMAP_NAMES]
    return list(dict.fromkeys(candidates))


def parse_sitemap(xml: str) -> List[str]:
    """
    Collect <loc> values from a sitemap or sitemap index.

    Page entries (<url><loc>) come first, then nested sitemap entries
    (<sitemap><loc>); nested sitemaps are not expanded.
    """
    soup = BeautifulSoup(xml, "xml")
    urls: List[str] = []
    for entry_tag in ("url", "sitemap"):
        for entry in soup.find_all(entry_tag):
            loc = entry.find("loc", recursive=False)
            if loc is None:
                continue
            text = loc.get_text(strip=True)
            if text:
                urls.append(text)
    return urls


def discover_sitemap(
    session: requests.Session,
    base_url: str,
    timeout_s: float,
) -> List[str]:
    """
    Probe candidate sitemap locations in order.

    Returns the URL list of the first candidate that yields any entries,
    or an empty list when every candidate fails or is empty.
    """
    for sitemap_url in candidate_sitemap_urls(base_url):
        try:
            xml = fetch(session, sitemap_url, timeout_s)
        except FetchError:
            continue
        urls = parse_sitemap(xml)
        if urls:
            return urls
    return []

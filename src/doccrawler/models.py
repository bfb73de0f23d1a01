"""
Crawl result data structures.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple


def utc_now_iso() -> str:
    """Return current UTC time in ISO format."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


@dataclass(frozen=True, slots=True)
class Page:
    """A single extracted documentation page."""
    url: str
    title: str
    content: str
    word_count: int
    scraped_at: str

    @property
    def key(self) -> Tuple[str, str]:
        """Identity used when merging results from several runs."""
        return (self.url, self.title)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "wordCount": self.word_count,
            "scrapedAt": self.scraped_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Page":
        content = data.get("content") or ""
        return cls(
            url=data["url"],
            title=data.get("title") or data["url"],
            content=content,
            word_count=data.get("wordCount", len(content.split())),
            scraped_at=data.get("scrapedAt") or utc_now_iso(),
        )


@dataclass(frozen=True, slots=True)
class ScrapeResult:
    """Outcome of one crawl: pages in completion order plus scope origin."""
    pages: Tuple[Page, ...]
    scraped_at: str
    base_url: str

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def total_words(self) -> int:
        return sum(p.word_count for p in self.pages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pageCount": self.page_count,
            "pages": [p.to_dict() for p in self.pages],
            "scrapedAt": self.scraped_at,
            "baseUrl": self.base_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScrapeResult":
        return cls(
            pages=tuple(Page.from_dict(p) for p in data.get("pages") or []),
            scraped_at=data.get("scrapedAt") or utc_now_iso(),
            base_url=data.get("baseUrl") or "",
        )


@dataclass(slots=True)
class CrawlStats:
    """Diagnostics collected during a crawl; not part of the result."""
    mode: Optional[str] = None
    sitemap_urls: int = 0
    pages_fetched: int = 0
    pages_skipped: int = 0
    links_enqueued: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record a skipped page by status code category."""
        self.pages_skipped += 1
        if status_code is None:
            self.error_counts["connection_error"] += 1
        else:
            self.error_counts[str(status_code)] += 1


def merge_pages(existing: Iterable[Page], incoming: Iterable[Page]) -> List[Page]:
    """
    Merge two page collections, deduplicating by (url, title).

    Existing pages keep their position; incoming pages with an unseen
    key are appended in order.
    """
    merged = list(existing)
    seen = {p.key for p in merged}
    for page in incoming:
        if page.key in seen:
            continue
        seen.add(page.key)
        merged.append(page)
    return merged

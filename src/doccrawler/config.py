"""
Crawl configuration.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from doccrawler.fetch import DEFAULT_USER_AGENT


@dataclass(slots=True)
class ScrapeConfig:
    """Settings for a single DocumentationScraper instance."""
    max_pages: int = 200
    timeout_s: float = 5.0
    sitemap_timeout_s: float = 3.0
    concurrency: int = 5
    auth_header: Optional[str] = None
    cookies: Optional[str] = None
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False

    def validate(self) -> None:
        """Raise ValueError if any limit is out of range."""
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be positive, got {self.max_pages}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")
        if self.timeout_s <= 0 or self.sitemap_timeout_s <= 0:
            raise ValueError("timeouts must be positive")

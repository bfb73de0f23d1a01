"""
Core crawling logic: sitemap or link-discovery crawl in concurrent batches.
"""
from __future__ import annotations

import sys
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Set, Tuple
from urllib.parse import urlparse

import requests

from doccrawler.config import ScrapeConfig
from doccrawler.extract import parse_page
from doccrawler.fetch import FetchError, build_headers, fetch, new_session
from doccrawler.links import get_base_path, origin_of, resolve_url, should_follow
from doccrawler.models import CrawlStats, Page, ScrapeResult, merge_pages, utc_now_iso
from doccrawler.sitemap import discover_sitemap

MODE_SITEMAP = "sitemap"
MODE_RECURSIVE = "recursive"


@dataclass(slots=True)
class PageOutcome:
    """Result of fetching one URL: a page with its hrefs, or a skip."""
    url: str
    page: Optional[Page] = None
    hrefs: List[str] = field(default_factory=list)
    error: Optional[FetchError] = None


@dataclass(slots=True)
class Frontier:
    """Visited set, pending queue and collected pages of one crawl."""
    visited: Set[str] = field(default_factory=set)
    queue: Deque[str] = field(default_factory=deque)
    pages: List[Page] = field(default_factory=list)

    def next_batch(self, size: int) -> List[str]:
        """Pop up to `size` unvisited URLs from the front, marking them visited."""
        batch: List[str] = []
        while self.queue and len(batch) < size:
            url = self.queue.popleft()
            if url in self.visited:
                continue
            self.visited.add(url)
            batch.append(url)
        return batch


def validate_start_url(start_url: str) -> str:
    """Return the stripped start URL or raise ValueError if it is not absolute http(s)."""
    url = (start_url or "").strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise ValueError(f"Invalid start URL: {start_url}") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Invalid start URL: {start_url}")
    return url


def print_progress(pages: int, max_pages: int, queue_size: int, batch_size: int) -> None:
    """Print real-time progress to stderr."""
    progress = f"\r\033[K[{pages}/{max_pages}] Queue: {queue_size} | Batch: {batch_size}"
    sys.stderr.write(progress)
    sys.stderr.flush()


def print_scan_line(outcome: PageOutcome, new_links: int) -> None:
    """Print single scan result line."""
    if outcome.error is not None:
        sys.stderr.write(f"\n  ✗ SKIP {outcome.url}: {outcome.error.reason}")
    else:
        sys.stderr.write(f"\n  → OK {outcome.url} (+{new_links} links)")
    sys.stderr.flush()


class DocumentationScraper:
    """
    Crawls a documentation site into Markdown pages.

    A sitemap is tried first; if one is found its in-scope URLs are
    fetched and no further links are followed. Otherwise the crawl starts
    from the given URL and follows in-scope links found on each page.

    One instance runs one crawl at a time; `stats` holds diagnostics for
    the most recent crawl.
    """

    def __init__(
        self,
        config: Optional[ScrapeConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config or ScrapeConfig()
        self.config.validate()
        self.stats = CrawlStats()
        self._session = session
        self._in_flight = threading.Lock()

    def headers(self) -> Dict[str, str]:
        return build_headers(
            auth_header=self.config.auth_header,
            cookies=self.config.cookies,
            user_agent=self.config.user_agent,
        )

    def scrape(self, start_url: str) -> ScrapeResult:
        """
        Crawl from a start URL and return the collected pages.

        Raises:
            ValueError: if start_url is not an absolute http(s) URL.
            RuntimeError: if this instance already has a crawl running.
        """
        start_url = validate_start_url(start_url)

        if not self._in_flight.acquire(blocking=False):
            raise RuntimeError("DocumentationScraper is already crawling; use a separate instance")
        try:
            self.stats = CrawlStats()
            owns_session = self._session is None
            session = new_session(self.headers()) if owns_session else self._session
            try:
                return self._scrape(session, start_url)
            finally:
                if owns_session:
                    session.close()
        finally:
            self._in_flight.release()

    def _scrape(self, session: requests.Session, start_url: str) -> ScrapeResult:
        cfg = self.config
        frontier = Frontier()

        sitemap_urls = discover_sitemap(session, start_url, cfg.sitemap_timeout_s)

        if sitemap_urls:
            # Scope is the origin of the sitemap's own entries
            base_url = origin_of(sitemap_urls[0])
            follow_links = False
            self.stats.mode = MODE_SITEMAP
            self.stats.sitemap_urls = len(sitemap_urls)
            seeds = [u for u in sitemap_urls if should_follow(u, base_url, frontier.visited)]
            frontier.queue.extend(seeds[:cfg.max_pages])
            scope_origin = base_url
            base_path = ""
        else:
            base_url = start_url
            follow_links = True
            self.stats.mode = MODE_RECURSIVE
            frontier.queue.append(start_url)
            scope_origin = origin_of(start_url)
            base_path = get_base_path(start_url)

        if cfg.verbose:
            sys.stderr.write(f"Starting {self.stats.mode} crawl from: {start_url}\n")
            sys.stderr.write(f"Max pages: {cfg.max_pages}, concurrency: {cfg.concurrency}\n")

        with ThreadPoolExecutor(max_workers=cfg.concurrency) as pool:
            while frontier.queue and len(frontier.pages) < cfg.max_pages:
                batch = frontier.next_batch(cfg.concurrency)
                if not batch:
                    break

                if cfg.verbose:
                    print_progress(len(frontier.pages), cfg.max_pages, len(frontier.queue), len(batch))

                futures = [pool.submit(self._scrape_page, session, url) for url in batch]
                # Batch settles fully before the next one is drawn
                for future in as_completed(futures):
                    outcome = future.result()
                    new_links = self._settle(outcome, frontier, scope_origin, base_path, follow_links)
                    if cfg.verbose:
                        print_scan_line(outcome, new_links)

        if cfg.verbose:
            sys.stderr.write("\n\n")

        # Final batch may overshoot the budget by up to concurrency - 1
        pages = tuple(frontier.pages[:cfg.max_pages])
        return ScrapeResult(pages=pages, scraped_at=utc_now_iso(), base_url=base_url)

    def _scrape_page(self, session: requests.Session, url: str) -> PageOutcome:
        """Fetch and extract one URL. Runs on a worker thread; touches no shared state."""
        try:
            html = fetch(session, url, self.config.timeout_s)
        except FetchError as e:
            return PageOutcome(url=url, error=e)
        page, hrefs = parse_page(html, url)
        return PageOutcome(url=url, page=page, hrefs=hrefs)

    def _settle(
        self,
        outcome: PageOutcome,
        frontier: Frontier,
        scope_origin: str,
        base_path: str,
        follow_links: bool,
    ) -> int:
        """Record one finished fetch and enqueue its in-scope links. Returns links enqueued."""
        if outcome.page is None:
            self.stats.record_error(outcome.error.status_code if outcome.error else None)
            return 0

        frontier.pages.append(outcome.page)
        self.stats.pages_fetched += 1

        if not follow_links or len(frontier.pages) >= self.config.max_pages:
            return 0

        new_links = 0
        for href in outcome.hrefs:
            target = resolve_url(href, scope_origin, base_path)
            if should_follow(target, scope_origin, frontier.visited):
                frontier.queue.append(target)
                new_links += 1
        self.stats.links_enqueued += new_links
        return new_links


def scrape(start_url: str, config: Optional[ScrapeConfig] = None) -> ScrapeResult:
    """Crawl a single start URL with a fresh scraper."""
    return DocumentationScraper(config).scrape(start_url)


def scrape_many(
    start_urls: Iterable[str],
    config: Optional[ScrapeConfig] = None,
) -> Tuple[List[Page], List[CrawlStats]]:
    """
    Crawl several start URLs one after another.

    Pages are merged by (url, title) across crawls. Returns the merged
    pages and the stats of each crawl.
    """
    scraper = DocumentationScraper(config)
    pages: List[Page] = []
    stats: List[CrawlStats] = []
    for start_url in start_urls:
        result = scraper.scrape(start_url)
        stats.append(scraper.stats)
        pages = merge_pages(pages, result.pages)
    return pages, stats

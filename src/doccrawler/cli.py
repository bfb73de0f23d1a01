"""
Command-line interface for the documentation crawler.
"""
from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import urlparse

from doccrawler.config import ScrapeConfig
from doccrawler.core import scrape_many
from doccrawler.models import CrawlStats, Page, ScrapeResult, merge_pages, utc_now_iso


def print_summary(stats: CrawlStats, start_url: str) -> None:
    """Print crawl summary to stderr."""
    sys.stderr.write("=" * 50 + "\n")
    sys.stderr.write(f"CRAWL SUMMARY: {start_url}\n")
    sys.stderr.write("=" * 50 + "\n\n")

    sys.stderr.write(f"Mode:                   {stats.mode}\n")
    if stats.sitemap_urls:
        sys.stderr.write(f"Sitemap entries:        {stats.sitemap_urls}\n")
    sys.stderr.write(f"Pages extracted:        {stats.pages_fetched}\n")
    sys.stderr.write(f"Pages skipped:          {stats.pages_skipped}\n")
    sys.stderr.write(f"Links enqueued:         {stats.links_enqueued}\n\n")

    if stats.error_counts:
        sys.stderr.write("Errors by type:\n")
        for error_type, count in sorted(stats.error_counts.items()):
            label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
            sys.stderr.write(f"  {label}: {count}\n")
    else:
        sys.stderr.write("No errors encountered.\n")

    sys.stderr.write("\n")


def generate_output_path(start_url: str) -> Path:
    """Generate output path: crawls/{hostname}_{datetime}.json"""
    parsed = urlparse(start_url)
    hostname = parsed.hostname or "unknown"
    hostname_safe = hostname.replace(".", "_")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    crawls_dir = Path("crawls")
    crawls_dir.mkdir(exist_ok=True)

    return crawls_dir / f"{hostname_safe}_{timestamp}.json"


def load_previous(path: Path) -> ScrapeResult:
    """Load a previously written result file."""
    return ScrapeResult.from_dict(json.loads(path.read_text(encoding="utf-8")))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl documentation sites into Markdown pages and output JSON results."
    )
    parser.add_argument("start_urls", nargs="+", metavar="start_url", help="Start URL (e.g. https://docs.example.com)")
    parser.add_argument("--max-pages", type=int, default=200, help="Maximum pages per start URL (default: 200)")
    parser.add_argument("--timeout", type=float, default=5.0, help="Page request timeout in seconds (default: 5)")
    parser.add_argument("--concurrency", type=int, default=5, help="Pages fetched per batch (default: 5)")
    parser.add_argument("--auth-header", help="Authorization header value, e.g. 'Bearer <token>'")
    parser.add_argument("--cookies", help="Cookie header value")
    parser.add_argument("--merge", help="Previous result JSON to merge new pages into")
    parser.add_argument("--out", help="Output file path, or '-' for stdout (default: auto-generated in crawls/)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--verbose", action="store_true", help="Show progress and summary")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    args = build_parser().parse_args(argv)

    config = ScrapeConfig(
        max_pages=args.max_pages,
        timeout_s=args.timeout,
        concurrency=args.concurrency,
        auth_header=args.auth_header,
        cookies=args.cookies,
        verbose=args.verbose,
    )
    try:
        pages, all_stats = scrape_many(args.start_urls, config)
    except ValueError as e:
        sys.stderr.write(f"error: {e}\n")
        return 2

    if args.verbose:
        for start_url, stats in zip(args.start_urls, all_stats):
            print_summary(stats, start_url)

    previous: List[Page] = []
    base_url = args.start_urls[0]
    if args.merge:
        prior = load_previous(Path(args.merge))
        previous = list(prior.pages)
        base_url = prior.base_url or base_url

    merged = merge_pages(previous, pages)
    result = ScrapeResult(pages=tuple(merged), scraped_at=utc_now_iso(), base_url=base_url)
    json_text = json.dumps(result.to_dict(), ensure_ascii=False, indent=2 if args.pretty else None)

    if args.out == "-":
        print(json_text)
    else:
        output_path = Path(args.out) if args.out else generate_output_path(args.start_urls[0])
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_text, encoding="utf-8")
        if args.verbose:
            sys.stderr.write(
                f"Results written to: {output_path} ({result.page_count} pages, {result.total_words} words)\n"
            )

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

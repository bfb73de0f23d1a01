"""
Documentation crawler that turns a site into Markdown pages.
Discovers pages through the site's sitemap, or by following in-scope links from a start URL.
"""
from doccrawler.config import ScrapeConfig
from doccrawler.core import DocumentationScraper, scrape, scrape_many
from doccrawler.models import CrawlStats, Page, ScrapeResult, merge_pages

__version__ = "1.0.0"
__all__ = [
    "CrawlStats",
    "DocumentationScraper",
    "Page",
    "ScrapeConfig",
    "ScrapeResult",
    "merge_pages",
    "scrape",
    "scrape_many",
]

"""
Content extraction: boilerplate removal, content-region selection, Markdown conversion.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

import html2text
from bs4 import BeautifulSoup, Tag

from doccrawler.models import Page, utc_now_iso

BOILERPLATE_SELECTOR = (
    "nav, footer, header, script, style, .ad, .advertisement, .sidebar, .menu, aside"
)

# Candidate content regions, highest priority first
CONTENT_SELECTORS: tuple[str, ...] = (
    "main",
    "article",
    '[role="main"]',
    ".content",
    ".documentation",
    ".docs-content",
    "#content",
    "body",
)

MIN_CONTENT_CHARS = 100

FENCE_PLACEHOLDER = "DOCCRAWLERFENCE{}END"


def _new_converter() -> html2text.HTML2Text:
    converter = html2text.HTML2Text()
    converter.body_width = 0
    converter.ignore_links = False
    converter.ignore_images = False
    converter.ignore_emphasis = False
    converter.unicode_snob = True
    return converter


def remove_boilerplate(soup: BeautifulSoup) -> None:
    """Drop navigation, chrome, scripts and sidebars in place."""
    for el in soup.select(BOILERPLATE_SELECTOR):
        el.decompose()


def select_content(soup: BeautifulSoup) -> Optional[Tag]:
    """Return the first candidate region with enough text, or None."""
    for selector in CONTENT_SELECTORS:
        el = soup.select_one(selector)
        if el is not None and len(el.get_text().strip()) > MIN_CONTENT_CHARS:
            return el
    return None


def _code_language(pre: Tag) -> str:
    code = pre.find("code")
    classes = (code.get("class") if code else None) or pre.get("class") or []
    for cls in classes:
        if cls.startswith("language-"):
            return cls[len("language-"):]
        if cls.startswith("lang-"):
            return cls[len("lang-"):]
    return ""


def _fence_code_blocks(region: Tag) -> Dict[str, str]:
    """Replace <pre> blocks with placeholders; return placeholder -> fenced block."""
    fences: Dict[str, str] = {}
    for idx, pre in enumerate(list(region.find_all("pre"))):
        code_text = pre.get_text().strip("\n")
        placeholder = FENCE_PLACEHOLDER.format(idx)
        fences[placeholder] = f"\n\n```{_code_language(pre)}\n{code_text}\n```\n\n"
        pre.replace_with(placeholder)
    return fences


def html_to_markdown(region: Tag) -> str:
    """Convert an HTML region to Markdown with ATX headings and fenced code."""
    fences = _fence_code_blocks(region)
    markdown = _new_converter().handle(str(region))
    for placeholder, fenced in fences.items():
        markdown = markdown.replace(placeholder, fenced)
    markdown = re.sub(r"\n{3,}", "\n\n", markdown)
    return markdown.strip()


def extract_title(soup: BeautifulSoup, url: str) -> str:
    """First <h1>, else <title>, else the URL."""
    h1 = soup.find("h1")
    if h1 is not None:
        text = h1.get_text(" ", strip=True)
        if text:
            return text
    if soup.title is not None:
        text = soup.title.get_text(strip=True)
        if text:
            return text
    return url.strip()


def parse_page(html: str, url: str) -> Tuple[Page, List[str]]:
    """
    Extract a Page from raw HTML and collect the hrefs left after cleanup.

    Links inside removed boilerplate (nav, header, footer, sidebars) are
    not returned.
    """
    soup = BeautifulSoup(html, "lxml")
    remove_boilerplate(soup)

    title = extract_title(soup, url)
    hrefs = [a["href"] for a in soup.find_all("a", href=True)]

    region = select_content(soup) or soup
    markdown = html_to_markdown(region)

    page = Page(
        url=url,
        title=title,
        content=markdown,
        word_count=len(markdown.split()),
        scraped_at=utc_now_iso(),
    )
    return page, hrefs


def extract(html: str, url: str) -> Page:
    """Extract a Page from raw HTML."""
    page, _ = parse_page(html, url)
    return page

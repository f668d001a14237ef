"""Web page scraping for recipe extraction.

Fetches a page with a browser-like User-Agent and reduces it to the visible
text of its most likely content container, plus a fallback title and the
Open Graph thumbnail.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from ..core.text import collapse_whitespace, truncate_prefix
from ..errors import RecoverableInputError
from ..settings import settings

logger = logging.getLogger("cooklog.extract")

# Priority order. Blog engines (WordPress .entry-content, Naver .se-main-container) included.
CONTENT_SELECTORS = ("article", "main", ".post-content", ".entry-content", ".se-main-container")
NON_VISIBLE_TAGS = ("script", "style", "noscript", "template")

PAGE_ERROR_MESSAGE = "Could not extract content from this web page."


@dataclass
class ScrapedPage:
    text: str
    title: str
    thumbnail_url: Optional[str]


def _page_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    h1 = soup.find("h1")
    return h1.get_text(" ", strip=True) if h1 else ""


def _og_image(soup: BeautifulSoup) -> Optional[str]:
    meta = soup.find("meta", attrs={"property": "og:image"})
    if not meta:
        return None
    content = (meta.get("content") or "").strip()
    return content or None


def _content_text(soup: BeautifulSoup) -> str:
    for selector in CONTENT_SELECTORS:
        nodes = soup.select(selector)
        if not nodes:
            continue
        # A match nested inside another match is already covered by its ancestor
        node_ids = {id(n) for n in nodes}
        roots = [n for n in nodes if not any(id(p) in node_ids for p in n.parents)]
        return " ".join(n.get_text(" ") for n in roots)

    root = soup.body or soup
    return root.get_text(" ")


def parse_page(html: str, max_chars: Optional[int] = None) -> ScrapedPage:
    soup = BeautifulSoup(html, "html.parser")
    title = _page_title(soup)
    thumbnail_url = _og_image(soup)

    for tag in soup(NON_VISIBLE_TAGS):
        tag.decompose()

    text = collapse_whitespace(_content_text(soup))
    text = truncate_prefix(text, max_chars or settings.extraction_max_chars)
    return ScrapedPage(text=text, title=title, thumbnail_url=thumbnail_url)


async def fetch_page(url: str) -> str:
    headers = {"User-Agent": settings.scrape_user_agent}
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds, follow_redirects=True, headers=headers
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.warning("Page fetch failed for %s: %s", url, e)
        raise RecoverableInputError(PAGE_ERROR_MESSAGE) from e
    return response.text


async def load_page(url: str) -> ScrapedPage:
    html = await fetch_page(url)
    try:
        return parse_page(html)
    except Exception as e:
        logger.warning("Page parse failed for %s: %s", url, e)
        raise RecoverableInputError(PAGE_ERROR_MESSAGE) from e

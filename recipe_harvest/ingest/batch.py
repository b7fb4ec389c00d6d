"""Batch fetcher: discover recipe links on listing pages and scrape them concurrently.

Every fetch/extract unit is independent. A failing unit becomes a logged
failure entry in the result and never cancels its siblings.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from recipe_harvest.ingest.errors import EmptyListing, ExtractionError
from recipe_harvest.ingest.fetch import build_async_client, fetch_url_async
from recipe_harvest.ingest.router import scrape_recipe_async
from recipe_harvest.models.recipe_schema import BatchResult, Recipe, ScrapeResult

logger = logging.getLogger(__name__)

DEFAULT_LINK_SELECTOR = "a[href]"


def _site_prefix(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}/"


def discover_recipe_links(
    html: str,
    base_url: str,
    prefix: Optional[str] = None,
    selector: str = DEFAULT_LINK_SELECTOR,
) -> List[str]:
    """Candidate recipe URLs on a listing page, in page order without duplicates.

    Anchors are resolved against the page URL and kept when they start with
    ``prefix`` (the listing's own site by default). The listing page itself
    is excluded.
    """
    prefix = prefix or _site_prefix(base_url)
    own_url = urldefrag(base_url)[0]
    soup = BeautifulSoup(html, "lxml")
    links: List[str] = []
    for a in soup.select(selector):
        href = (a.get("href") or "").strip()
        if not href:
            continue
        link = urldefrag(urljoin(base_url, href))[0]
        if link.startswith(prefix) and link != own_url and link != prefix:
            links.append(link)
    return list(dict.fromkeys(links))


def _failure(url: str, error: BaseException) -> ScrapeResult:
    if isinstance(error, ExtractionError):
        return ScrapeResult(url=url, success=False, reason=error.reason, error=str(error))
    return ScrapeResult(url=url, success=False, reason="unexpected_error", error=repr(error))


def dedupe_by_name(recipes: Iterable[Recipe]) -> List[Recipe]:
    """First occurrence of each recipe name wins."""
    seen = set()
    out = []
    for recipe in recipes:
        if recipe.name is None or recipe.name in seen:
            continue
        seen.add(recipe.name)
        out.append(recipe)
    return out


async def _gather_recipes(client: httpx.AsyncClient, urls: Sequence[str]) -> list:
    return await asyncio.gather(
        *(scrape_recipe_async(client, url) for url in urls), return_exceptions=True
    )


async def _listing_links(
    client: httpx.AsyncClient, listing_url: str, prefix: Optional[str], selector: str
) -> List[str]:
    html, final_url = await fetch_url_async(client, listing_url)
    links = discover_recipe_links(html, final_url, prefix=prefix, selector=selector)
    logger.info("Listing %s -> %d recipe links", listing_url, len(links))
    return links


async def harvest_listings(
    listing_urls: Sequence[str],
    client: Optional[httpx.AsyncClient] = None,
    selector: str = DEFAULT_LINK_SELECTOR,
    prefix: Optional[str] = None,
) -> BatchResult:
    """Scrape every recipe linked from the listing pages.

    Listing pages that fail to load are reported as failures. If no candidate
    link is found at all, EmptyListing is raised.
    """
    if client is None:
        async with build_async_client() as owned:
            return await harvest_listings(listing_urls, owned, selector=selector, prefix=prefix)

    failures: List[ScrapeResult] = []
    listing_results = await asyncio.gather(
        *(_listing_links(client, u, prefix, selector) for u in listing_urls),
        return_exceptions=True,
    )
    links: List[str] = []
    for listing_url, result in zip(listing_urls, listing_results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Listing failed | url=%s error=%s", listing_url, result)
            failures.append(_failure(listing_url, result))
            continue
        links.extend(result)
    links = list(dict.fromkeys(links))
    if not links:
        raise EmptyListing(list(listing_urls))

    recipes: List[Recipe] = []
    for url, result in zip(links, await _gather_recipes(client, links)):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Recipe skipped | url=%s error=%s", url, result)
            failures.append(_failure(url, result))
        else:
            recipes.append(result)

    unique = dedupe_by_name(recipes)
    logger.info(
        "Harvest complete | links=%d recipes=%d duplicates=%d failures=%d",
        len(links), len(unique), len(recipes) - len(unique), len(failures),
    )
    return BatchResult(recipes=unique, failures=failures)


async def scrape_urls(
    urls: Sequence[str], client: Optional[httpx.AsyncClient] = None
) -> List[ScrapeResult]:
    """One ScrapeResult per input URL, in input order."""
    if client is None:
        async with build_async_client() as owned:
            return await scrape_urls(urls, owned)

    out = []
    for url, result in zip(urls, await _gather_recipes(client, urls)):
        url = (url or "").strip()
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.warning("Scrape failed | url=%s error=%s", url, result)
            out.append(_failure(url, result))
        else:
            out.append(ScrapeResult(url=url, success=True, recipe=result))
    return out

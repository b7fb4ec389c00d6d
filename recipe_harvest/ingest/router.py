"""Extraction router: pick a strategy for a URL/document and build a Recipe.

Policy, first success wins:

1. a site-specific extractor when the hostname belongs to a known publisher;
2. schema.org JSON-LD;
3. recipe-plugin markup (WP Recipe Maker, then Tasty Recipes);
4. the class-name heuristic.

A strategy "succeeds" when it yields a recipe name. If some strategy found
markup but no name the result is IncompleteExtraction, otherwise
UnsupportedSource.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Callable, List, Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from recipe_harvest.ingest import generic, jsonld
from recipe_harvest.ingest.errors import IncompleteExtraction, InvalidUrl, UnsupportedSource
from recipe_harvest.ingest.fetch import fetch_url, fetch_url_async
from recipe_harvest.ingest.normalize import build_recipe
from recipe_harvest.ingest.sites import love_and_lemons, nyt_cooking
from recipe_harvest.models.recipe_schema import ExtractedFields, Recipe

logger = logging.getLogger(__name__)

Extractor = Callable[[BeautifulSoup], Optional[ExtractedFields]]


class Strategy(enum.Enum):
    NYT_COOKING = "nyt_cooking"
    LOVE_AND_LEMONS = "love_and_lemons"
    JSON_LD = "json_ld"
    WPRM = "wprm"
    TASTY = "tasty"
    HEURISTIC = "heuristic"

    @property
    def extractor(self) -> Extractor:
        return _EXTRACTORS[self]


_EXTRACTORS: dict[Strategy, Extractor] = {
    Strategy.NYT_COOKING: nyt_cooking.parse_recipe_html,
    Strategy.LOVE_AND_LEMONS: love_and_lemons.parse_recipe_html,
    Strategy.JSON_LD: jsonld.parse_json_ld,
    Strategy.WPRM: generic.parse_wprm,
    Strategy.TASTY: generic.parse_tasty,
    Strategy.HEURISTIC: generic.parse_heuristic,
}

SITE_STRATEGIES = (
    (nyt_cooking.matches_url, Strategy.NYT_COOKING),
    (love_and_lemons.matches_url, Strategy.LOVE_AND_LEMONS),
)
GENERIC_STRATEGIES = (Strategy.JSON_LD, Strategy.WPRM, Strategy.TASTY, Strategy.HEURISTIC)

SITE_NAMES = {
    "loveandlemons.com": "Love & Lemons",
    "allrecipes.com": "AllRecipes",
    "bonappetit.com": "Bon Appetit",
    "seriouseats.com": "Serious Eats",
    "food52.com": "Food52",
    "epicurious.com": "Epicurious",
    "cooking.nytimes.com": "NY Times Cooking",
}


def validate_url(url: Optional[str]) -> str:
    """Trimmed URL, or InvalidUrl for empty / non-http(s) / host-less input."""
    trimmed = (url or "").strip()
    if not trimmed:
        raise InvalidUrl("URL is empty", url=trimmed, reason="url_empty")
    parsed = urlparse(trimmed)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        raise InvalidUrl("Invalid URL format", url=trimmed)
    return trimmed


def site_strategy_for_url(url: str) -> Optional[Strategy]:
    parsed = urlparse(url)
    hostname = (parsed.hostname or "").lower()
    for matches, strategy in SITE_STRATEGIES:
        if matches(hostname, parsed.path or ""):
            return strategy
    return None


def strategies_for_url(url: str) -> List[Strategy]:
    site = site_strategy_for_url(url)
    return ([site] if site else []) + list(GENERIC_STRATEGIES)


def is_supported_url(url: str) -> bool:
    """Whether a dedicated site extractor exists for this URL."""
    try:
        return site_strategy_for_url(url) is not None
    except ValueError:
        return False


def source_name(url: str) -> str:
    """Friendly publisher label for a recipe URL."""
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return "RECIPE"
    if not hostname:
        return "RECIPE"
    hostname = hostname.lower().removeprefix("www.")
    return SITE_NAMES.get(hostname) or hostname.split(".")[0].upper()


def extract_recipe(url: str, html: str) -> Recipe:
    """Run the strategy chain over a document. Pure; no network access."""
    soup = BeautifulSoup(html, "lxml")
    partial: Optional[Strategy] = None
    for strategy in strategies_for_url(url):
        fields = strategy.extractor(soup)
        if fields is None:
            continue
        if not fields.name:
            logger.debug("Strategy %s found markup but no name | url=%s", strategy.value, url)
            partial = partial or strategy
            continue
        logger.info("Extracted | url=%s strategy=%s name=%s", url, strategy.value, fields.name)
        return build_recipe(url, fields, strategy=strategy.value)

    if partial is not None:
        logger.warning("Extraction incomplete | url=%s strategy=%s", url, partial.value)
        raise IncompleteExtraction(url=url, strategy=partial.value)
    logger.warning("No recipe markup recognized | url=%s", url)
    raise UnsupportedSource(url=url)


def scrape_recipe(url: str, html: Optional[str] = None) -> Recipe:
    """Fetch (unless html is given) and extract one recipe."""
    url = validate_url(url)
    if html is None:
        html, _ = fetch_url(url)
    return extract_recipe(url, html)


async def scrape_recipe_async(
    client: httpx.AsyncClient, url: str, html: Optional[str] = None
) -> Recipe:
    url = validate_url(url)
    if html is None:
        html, _ = await fetch_url_async(client, url)
    # lxml parse runs in a worker thread
    return await asyncio.to_thread(extract_recipe, url, html)

"""Orchestrator helpers: small functions used by the CLI, scripts and tests.

Nothing here persists anything; results are returned to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlparse

from recipe_harvest.dedup.stats import calculate_ingredient_stats
from recipe_harvest.ingest.batch import harvest_listings, scrape_urls
from recipe_harvest.ingest.router import scrape_recipe
from recipe_harvest.ingest.sites import love_and_lemons
from recipe_harvest.models.recipe_schema import BatchResult, IngredientStats, Recipe, ScrapeResult
from recipe_harvest.settings import settings

logger = logging.getLogger(__name__)


def url_to_recipe(url: str, html_path: Optional[str] = None) -> Recipe:
    """Scrape one URL; with html_path the saved page is parsed instead of fetched."""
    html = None
    if html_path:
        html = Path(html_path).read_text(encoding="utf-8")
        logger.info("Parsing saved page %s for %s", html_path, url)
    return scrape_recipe(url, html=html)


def default_listing_urls() -> List[str]:
    return list(settings.LISTING_URLS or love_and_lemons.LISTING_URLS)


def harvest(listing_urls: Optional[Sequence[str]] = None) -> BatchResult:
    """Harvest every recipe linked from the listing pages.

    The built-in Love & Lemons round-ups use the publisher's own link
    convention; any other listing falls back to same-site anchors.
    """
    urls = list(listing_urls or default_listing_urls())
    if all(love_and_lemons.matches_url(_host(u)) for u in urls):
        coro = harvest_listings(
            urls, selector=love_and_lemons.LINK_SELECTOR, prefix=love_and_lemons.LINK_PREFIX
        )
    else:
        coro = harvest_listings(urls)
    return asyncio.run(coro)


def scrape_many(urls: Sequence[str]) -> List[ScrapeResult]:
    return asyncio.run(scrape_urls(urls))


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def load_recipes(paths: Iterable[str]) -> List[Recipe]:
    """Recipes from JSON files holding one recipe object or a list of them."""
    recipes: List[Recipe] = []
    for path in paths:
        with open(path, "r", encoding="utf8") as fh:
            data = json.load(fh)
        if isinstance(data, dict) and "recipes" in data:
            data = data["recipes"]
        items = data if isinstance(data, list) else [data]
        recipes.extend(Recipe.model_validate(item) for item in items)
        logger.debug("Loaded %d recipes from %s", len(items), path)
    return recipes


def stats_for_files(paths: Iterable[str]) -> IngredientStats:
    return calculate_ingredient_stats(load_recipes(paths))

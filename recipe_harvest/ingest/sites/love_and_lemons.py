"""Love & Lemons extractor and listing-page conventions.

Recipe cards on loveandlemons.com are WP Recipe Maker blocks. Listing pages
(round-ups such as "easy dinner ideas") link each recipe from an ``h4``
heading.
"""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from recipe_harvest.ingest.generic import WPRM_CONTAINER, parse_wprm_container
from recipe_harvest.models.recipe_schema import ExtractedFields

logger = logging.getLogger(__name__)

HOSTNAMES = ("loveandlemons.com",)

LISTING_URLS = (
    "https://www.loveandlemons.com/easy-dinner-ideas/",
    "https://www.loveandlemons.com/rice-bowl-recipes/",
)
LINK_SELECTOR = "h4 > a"
LINK_PREFIX = "https://www.loveandlemons.com/"


def matches_url(hostname: str, path: str = "") -> bool:
    return any(hostname == h or hostname.endswith("." + h) for h in HOSTNAMES)


def parse_recipe_html(html: str | BeautifulSoup) -> ExtractedFields:
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "lxml")
    container = soup.select_one(WPRM_CONTAINER)
    if container is None:
        logger.debug("Love & Lemons page has no recipe card")
        return ExtractedFields()
    return parse_wprm_container(container)

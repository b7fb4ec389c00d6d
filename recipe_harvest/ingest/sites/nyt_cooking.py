"""NYT Cooking extractor.

NYT Cooking renders CSS-module class names with a build hash suffix
(``ingredient_ingredient__rfjvs``). Nodes are matched on the stable
``<module>_<name>__`` prefix so a new build hash does not break parsing.
Most recipes sit behind a subscription, so this extractor is often fed HTML
pasted in directly instead of a live fetch.
"""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from recipe_harvest.ingest.normalize import (
    clean_text,
    img_src,
    join_ingredient_parts,
    optional_text,
    parse_paren_count,
    parse_rating_avg,
)
from recipe_harvest.models.recipe_schema import ExtractedFields

logger = logging.getLogger(__name__)

HOSTNAMES = ("cooking.nytimes.com",)


def _cls(prefix: str) -> str:
    return f'[class*="{prefix}__"]'


TITLE = "h1.pantry--title-display"
HEADER_IMAGE = "img" + _cls("recipeheaderimage_image")
AVG_RATING = _cls("stats_avgRating")
RATING_INFO = _cls("stats_ratingInfo")
YIELD = _cls("ingredients_recipeYield") + " .pantry--ui"
TIME_TABLE_LABELS = _cls("stats_cookingTimeTable") + " dt"
INGREDIENT = _cls("ingredient_ingredient")
QUANTITY_PREFIX = "ingredient_quantity__"
STEP = _cls("preparation_step")
STEP_TEXT = _cls("preparation_stepContent") + " p"
TOPNOTE_PARAGRAPHS = _cls("topnote_topnoteParagraphs")
TOPNOTE = _cls("topnote_topnote")


def matches_url(hostname: str, path: str = "") -> bool:
    if any(hostname == h or hostname.endswith("." + h) for h in HOSTNAMES):
        return True
    return (hostname == "nytimes.com" or hostname.endswith(".nytimes.com")) and path.startswith("/recipes/")


def _text(soup: BeautifulSoup | Tag, selector: str) -> str:
    node = soup.select_one(selector)
    return clean_text(node.get_text(" ")) if node else ""


def _is_quantity(node) -> bool:
    return isinstance(node, Tag) and any(c.startswith(QUANTITY_PREFIX) for c in node.get("class", []))


def _ingredient_line(row: Tag) -> str:
    quantity = ""
    rest = []
    for child in row.children:
        if _is_quantity(child):
            quantity = child.get_text(" ")
        elif isinstance(child, NavigableString):
            rest.append(str(child))
        elif isinstance(child, Tag):
            rest.append(child.get_text(" "))
    return join_ingredient_parts(quantity, " ".join(rest))


def _times(soup: BeautifulSoup) -> tuple[Optional[str], Optional[str]]:
    """Prep and cook time from the stats table.

    When the table only has a "Total Time" row it is reported as cook time and
    prep time stays unset.
    """
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    for dt in soup.select(TIME_TABLE_LABELS):
        label = clean_text(dt.get_text(" ")).lower()
        dd = dt.find_next_sibling("dd")
        value = clean_text(dd.get_text(" ")) if dd else ""
        if "prep" in label:
            prep_time = value
        elif "cook" in label:
            cook_time = value
        elif label == "total time" and not prep_time and not cook_time:
            cook_time = value
    return optional_text(prep_time), optional_text(cook_time)


def parse_recipe_html(html: str | BeautifulSoup) -> ExtractedFields:
    soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "lxml")

    image = img_src(soup.select_one(HEADER_IMAGE)) or img_src(soup.select_one("figure img"))

    ingredients = []
    for row in soup.select(INGREDIENT):
        line = _ingredient_line(row)
        if line:
            ingredients.append(line)

    instructions = []
    for step in soup.select(STEP):
        text = clean_text(" ".join(p.get_text(" ") for p in step.select(STEP_TEXT)))
        if text:
            instructions.append(text)

    prep_time, cook_time = _times(soup)
    fields = ExtractedFields(
        name=_text(soup, TITLE),
        image=image,
        rating_avg=parse_rating_avg(_text(soup, AVG_RATING)),
        rating_count=parse_paren_count(_text(soup, RATING_INFO)),
        servings=_text(soup, YIELD),
        prep_time=prep_time,
        cook_time=cook_time,
        ingredients=ingredients,
        instructions=instructions,
        notes=_text(soup, TOPNOTE_PARAGRAPHS) or _text(soup, TOPNOTE),
    )
    logger.debug(
        "NYT Cooking parse: name=%r ingredients=%d steps=%d",
        fields.name, len(ingredients), len(instructions),
    )
    return fields

"""Generic HTML extractors: recipe-plugin markup and a last-resort heuristic.

Recipe plugins are tried in a fixed order: WP Recipe Maker, then Tasty
Recipes. Each returns None when its container is absent so the router can
fall through. The heuristic stage only succeeds with both a name and at least
one ingredient line.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from recipe_harvest.ingest.normalize import (
    clean_text,
    img_src,
    join_ingredient_parts,
    parse_int,
    parse_rating_avg,
)
from recipe_harvest.models.recipe_schema import ExtractedFields

logger = logging.getLogger(__name__)

WPRM_CONTAINER = ".wprm-recipe-container"
TASTY_CONTAINER = ".tasty-recipes"

NAME_SELECTORS = ("h1.recipe-title", "h1.entry-title", "h1")
INGREDIENT_SELECTORS = (
    ".recipe-ingredients li",
    ".ingredients li",
    '[itemprop="recipeIngredient"]',
    ".ingredient-list li",
)
INSTRUCTION_SELECTORS = (
    ".recipe-instructions li",
    ".instructions li",
    '[itemprop="recipeInstructions"]',
    ".recipe-steps li",
)
IMAGE_SELECTORS = (".recipe-image img", 'img[itemprop="image"]', ".entry-content img")


def _text(scope: Tag, selector: str) -> str:
    node = scope.select_one(selector)
    return clean_text(node.get_text(" ")) if node else ""


def _texts(scope: Tag, selector: str) -> List[str]:
    out = []
    for node in scope.select(selector):
        text = clean_text(node.get_text(" "))
        if text:
            out.append(text)
    return out


def _first_texts(scope: Tag, selectors) -> List[str]:
    for selector in selectors:
        found = _texts(scope, selector)
        if found:
            return found
    return []


def parse_wprm_container(container: Tag) -> ExtractedFields:
    """WP Recipe Maker markup inside one .wprm-recipe-container."""
    ingredients = []
    for row in container.select(".wprm-recipe-ingredient"):
        line = join_ingredient_parts(
            _text(row, ".wprm-recipe-ingredient-amount"),
            _text(row, ".wprm-recipe-ingredient-unit"),
            _text(row, ".wprm-recipe-ingredient-name"),
        )
        if line:
            ingredients.append(line)

    servings_node = container.select_one(".wprm-recipe-servings")
    servings = None
    if servings_node is not None:
        servings = servings_node.get("data-value") or servings_node.get_text(" ")

    return ExtractedFields(
        name=_text(container, ".wprm-recipe-name"),
        image=img_src(container.select_one(".wprm-recipe-image img")),
        rating_avg=parse_rating_avg(_text(container, ".wprm-recipe-rating-average")),
        rating_count=parse_int(_text(container, ".wprm-recipe-rating-count")),
        servings=clean_text(servings),
        prep_time=_text(container, ".wprm-recipe-prep-time-container .wprm-recipe-prep_time"),
        cook_time=_text(container, ".wprm-recipe-cook-time-container .wprm-recipe-cook_time"),
        ingredients=ingredients,
        instructions=_texts(container, ".wprm-recipe-instruction-text"),
        notes=_text(container, ".wprm-recipe-notes"),
    )


def parse_wprm(soup: BeautifulSoup) -> Optional[ExtractedFields]:
    container = soup.select_one(WPRM_CONTAINER)
    if container is None:
        return None
    return parse_wprm_container(container)


def parse_tasty(soup: BeautifulSoup) -> Optional[ExtractedFields]:
    container = soup.select_one(TASTY_CONTAINER)
    if container is None:
        return None
    # Tasty Recipes has no rating markup of its own
    return ExtractedFields(
        name=_text(container, ".tasty-recipes-title"),
        image=img_src(container.select_one(".tasty-recipes-image img")),
        servings=_text(container, ".tasty-recipes-yield"),
        prep_time=_text(container, ".tasty-recipes-prep-time"),
        cook_time=_text(container, ".tasty-recipes-cook-time"),
        ingredients=_texts(container, ".tasty-recipes-ingredients li"),
        instructions=_texts(container, ".tasty-recipes-instructions li"),
        notes=_text(container, ".tasty-recipes-notes"),
    )


def parse_heuristic(soup: BeautifulSoup) -> Optional[ExtractedFields]:
    """Common class-name conventions; never returns a half-populated guess."""
    name = ""
    for selector in NAME_SELECTORS:
        name = _text(soup, selector)
        if name:
            break
    ingredients = _first_texts(soup, INGREDIENT_SELECTORS)
    if not name or not ingredients:
        logger.debug("Heuristic parse rejected: name=%r ingredients=%d", name, len(ingredients))
        return None

    image = None
    for selector in IMAGE_SELECTORS:
        image = img_src(soup.select_one(selector))
        if image:
            break

    return ExtractedFields(
        name=name,
        image=image,
        ingredients=ingredients,
        instructions=_first_texts(soup, INSTRUCTION_SELECTORS),
    )

"""schema.org Recipe extraction from JSON-LD blocks."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterable, Iterator, Optional

from bs4 import BeautifulSoup

from recipe_harvest.ingest.errors import MalformedStructuredData
from recipe_harvest.ingest.normalize import (
    first_image,
    first_yield,
    optional_text,
    parse_duration,
    parse_int,
    parse_rating_avg,
    split_instructions,
)
from recipe_harvest.models.recipe_schema import ExtractedFields

logger = logging.getLogger(__name__)

# also matches "application/ld+json; charset=utf-8" and upper-case variants
_JSON_LD_TYPE_RE = re.compile(r"application/ld\+json", re.I)


def _load_block(body: str) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        # some pages wrap the object in stray text or concatenate objects;
        # try the outermost {...} once before giving up
        start = body.find("{")
        end = body.rfind("}")
        if start != -1 and end > start:
            try:
                return json.loads(body[start : end + 1])
            except ValueError as e:
                raise MalformedStructuredData(f"Invalid JSON-LD block: {e}") from e
        raise MalformedStructuredData("Invalid JSON-LD block")


def iter_json_ld_blocks(soup: BeautifulSoup) -> Iterator[Any]:
    """Parsed JSON-LD blocks in document order; malformed ones are skipped."""
    for i, script in enumerate(soup.find_all("script", attrs={"type": _JSON_LD_TYPE_RE})):
        body = (script.string or script.get_text() or "").strip()
        if not body:
            continue
        try:
            yield _load_block(body)
        except MalformedStructuredData as e:
            logger.debug("Skipping JSON-LD block %d: %s", i, e)


def is_recipe_type(obj: Any) -> bool:
    if not isinstance(obj, dict):
        return False
    t = obj.get("@type")
    if isinstance(t, list):
        return "Recipe" in t
    return t == "Recipe"


def _candidates(block: Any) -> Iterator[Any]:
    """Top-level items of a block: list roots and @graph collections flattened."""
    if isinstance(block, list):
        for item in block:
            yield from _candidates(item)
    elif isinstance(block, dict):
        graph = block.get("@graph")
        if isinstance(graph, list):
            yield from _candidates(graph)
        else:
            yield block


def find_recipe_object(blocks: Iterable[Any]) -> Optional[dict]:
    """First object whose @type is or includes "Recipe".

    Items are scanned in order and non-Recipe items are skipped. Objects that
    nest the recipe one level down (e.g. a WebPage with mainEntity) are
    checked after their own type.
    """
    for block in blocks:
        for item in _candidates(block):
            if is_recipe_type(item):
                return item
            if isinstance(item, dict):
                for value in item.values():
                    if is_recipe_type(value):
                        return value
    return None


def recipe_from_schema(obj: dict) -> ExtractedFields:
    rating = obj.get("aggregateRating") or {}
    if not isinstance(rating, dict):
        rating = {}
    rating_count = rating.get("ratingCount")
    if rating_count is None:
        rating_count = rating.get("reviewCount")
    ingredients = obj.get("recipeIngredient") or obj.get("ingredients") or []
    if isinstance(ingredients, str):
        ingredients = [ingredients]

    return ExtractedFields(
        name=optional_text(obj.get("name")),
        image=first_image(obj.get("image")),
        rating_avg=parse_rating_avg(rating.get("ratingValue")),
        rating_count=parse_int(rating_count),
        servings=first_yield(obj.get("recipeYield")),
        prep_time=parse_duration(obj.get("prepTime")),
        cook_time=parse_duration(obj.get("cookTime")),
        ingredients=[str(i) for i in ingredients if i],
        instructions=split_instructions(obj.get("recipeInstructions")),
        notes=optional_text(obj.get("description")),
    )


def parse_json_ld(soup: BeautifulSoup) -> Optional[ExtractedFields]:
    recipe_obj = find_recipe_object(iter_json_ld_blocks(soup))
    if recipe_obj is None:
        return None
    return recipe_from_schema(recipe_obj)

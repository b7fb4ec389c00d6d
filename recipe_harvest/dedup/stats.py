"""Cross-recipe ingredient overlap and grocery savings statistics."""

from __future__ import annotations

import logging
import math
from typing import Dict, Iterable, Sequence

from recipe_harvest.dedup.canonicalize import canonicalize
from recipe_harvest.models.recipe_schema import (
    CanonicalIngredient,
    IngredientStats,
    OverlappingIngredient,
    Recipe,
    RecipeIngredientCount,
)

logger = logging.getLogger(__name__)

UNKNOWN_RECIPE = "Unknown Recipe"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _display_name(key: str) -> str:
    return key[:1].upper() + key[1:]


def tally_ingredients(recipes: Iterable[Recipe]) -> Dict[str, CanonicalIngredient]:
    """Canonical key -> tally, in first-seen order. Noise keys are dropped."""
    tally: Dict[str, CanonicalIngredient] = {}
    for recipe in recipes:
        recipe_name = recipe.name or UNKNOWN_RECIPE
        for line in recipe.ingredients or []:
            key = canonicalize(line)
            if not key:
                continue
            entry = tally.get(key)
            if entry is None:
                entry = tally[key] = CanonicalIngredient(key=key)
            entry.count += 1
            if recipe_name not in entry.recipes:
                entry.recipes.append(recipe_name)
            if line not in entry.original_names:
                entry.original_names.append(line)
    return tally


def calculate_ingredient_stats(recipes: Sequence[Recipe]) -> IngredientStats:
    """Overlap statistics for a recipe set; an empty set gives zero stats.

    overlapScore = round(100 * sum(recipe count of shared ingredients)
                         / (unique ingredients * recipes))
    estimatedSavings = round(100 * (occurrences - unique) / occurrences) + "%"
    """
    recipes = list(recipes)
    if not recipes:
        return IngredientStats()

    by_recipe = [
        RecipeIngredientCount(recipe_name=r.name or UNKNOWN_RECIPE, count=len(r.ingredients or []))
        for r in recipes
    ]
    tally = tally_ingredients(recipes)

    overlapping = [
        OverlappingIngredient(
            name=_display_name(key),
            key=key,
            count=len(entry.recipes),
            occurrences=entry.count,
            recipes=list(entry.recipes),
        )
        for key, entry in tally.items()
        if len(entry.recipes) >= 2
    ]
    # stable: ties keep first-seen order
    overlapping.sort(key=lambda ing: ing.count, reverse=True)

    total_unique = len(tally)
    total_occurrences = sum(entry.count for entry in tally.values())

    max_overlap = total_unique * len(recipes)
    shared = sum(ing.count for ing in overlapping)
    overlap_score = _round_half_up(100 * shared / max_overlap) if max_overlap else 0

    savings = (
        _round_half_up(100 * (total_occurrences - total_unique) / total_occurrences)
        if total_occurrences
        else 0
    )

    logger.debug(
        "Ingredient stats: recipes=%d unique=%d occurrences=%d shared=%d",
        len(recipes), total_unique, total_occurrences, len(overlapping),
    )
    return IngredientStats(
        total_unique_ingredients=total_unique,
        total_ingredient_occurrences=total_occurrences,
        overlapping_ingredients=overlapping,
        ingredients_by_recipe=by_recipe,
        overlap_score=overlap_score,
        estimated_savings=f"{savings}%",
    )

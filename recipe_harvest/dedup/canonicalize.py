"""Canonicalize ingredient lines and provide the alias map.

Passes, in order: leading quantity, unit words, preparation/descriptor words,
parenthetical asides, punctuation and whitespace. The passes repeat until the
text stops changing, then the alias map is applied on an exact match only.
Two lines are "the same ingredient" only when their canonical keys are equal.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

VULGAR_FRACTIONS = "¼½¾⅐⅑⅒⅓⅔⅕⅖⅗⅘⅙⅚⅛⅜⅝⅞"
MIN_KEY_LENGTH = 2

UNITS = frozenset({
    "cup", "cups",
    "tablespoon", "tablespoons", "tbsp", "tbsps", "tbs", "tbl",
    "teaspoon", "teaspoons", "tsp", "tsps",
    "pound", "pounds", "lb", "lbs",
    "ounce", "ounces", "oz",
    "gram", "grams", "g", "kilogram", "kilograms", "kg",
    "ml", "milliliter", "milliliters", "millilitre", "millilitres",
    "l", "liter", "liters", "litre", "litres",
    "quart", "quarts", "qt", "pint", "pints", "gallon", "gallons",
    "pinch", "pinches", "dash", "dashes", "handful", "handfuls",
    "bunch", "bunches", "clove", "cloves", "head", "heads", "sprig", "sprigs",
    "piece", "pieces", "slice", "slices", "stick", "sticks",
    "can", "cans", "jar", "jars", "package", "packages", "pkg",
    "container", "containers", "bag", "bags", "box", "boxes", "bottle", "bottles",
})

DESCRIPTORS = frozenset({
    "to taste", "for garnish", "for serving", "at room temperature",
    "chopped", "diced", "minced", "sliced", "grated", "shredded", "crushed",
    "ground", "cubed", "halved", "quartered", "julienned", "torn",
    "fresh", "freshly", "dried", "frozen", "cooked", "raw",
    "large", "medium", "small", "optional", "about",
    "roughly", "finely", "thinly", "thickly", "coarsely",
    "peeled", "deveined", "seeded", "pitted", "trimmed", "rinsed", "drained",
    "softened", "melted", "divided", "packed", "boneless", "skinless",
})

# Leftover connectors after units/descriptors are gone ("pinch of salt" -> "of salt")
CONNECTORS = frozenset({"of", "and", "or", "plus"})

ALIAS_MAP: Mapping[str, str] = MappingProxyType({
    "extra virgin olive oil": "olive oil",
    "canola oil": "vegetable oil",
    "onions": "onion",
    "yellow onion": "onion",
    "white onion": "onion",
    "yellow onions": "onion",
    "red onions": "red onion",
    "spring onions": "green onion",
    "scallions": "green onion",
    "scallion": "green onion",
    "green onions": "green onion",
    "kosher salt": "salt",
    "sea salt": "salt",
    "table salt": "salt",
    "flaky salt": "salt",
    "pepper": "black pepper",
    "lemons": "lemon",
    "lemon juice": "lemon",
    "limes": "lime",
    "lime juice": "lime",
    "unsalted butter": "butter",
    "salted butter": "butter",
    "chicken breasts": "chicken breast",
    "chicken thighs": "chicken thigh",
    "tomatoes": "tomato",
    "roma tomatoes": "tomato",
    "grape tomatoes": "cherry tomatoes",
    "white rice": "rice",
    "spaghetti": "pasta",
    "penne": "pasta",
    "parmesan cheese": "parmesan",
    "parmigiano reggiano": "parmesan",
})


def _word_pattern(words) -> re.Pattern:
    # longest first so multi-word phrases win over their parts
    alternation = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(r"\b(?:" + alternation + r")\b", re.I)


_QUANTITY_RE = re.compile(r"^[\d" + VULGAR_FRACTIONS + r"][\d" + VULGAR_FRACTIONS + r"\s./⁄,\-–]*")
_UNITS_RE = _word_pattern(UNITS)
_DESCRIPTORS_RE = _word_pattern(DESCRIPTORS)
_PARENS_RE = re.compile(r"\([^()]*\)|\[[^\[\]]*\]")
_PUNCT_RE = re.compile(r"[^\w\s']|_")
_WS_RE = re.compile(r"\s+")
_EDGE_CONNECTORS_RE = re.compile(
    r"^(?:(?:" + "|".join(CONNECTORS) + r")\s+)+|(?:\s+(?:" + "|".join(CONNECTORS) + r"))+$"
)


def _normalize_once(s: str) -> str:
    s = _QUANTITY_RE.sub("", s.strip())
    s = _UNITS_RE.sub(" ", s)
    s = _DESCRIPTORS_RE.sub(" ", s)
    s = _PARENS_RE.sub(" ", s)
    s = _PUNCT_RE.sub(" ", s)
    s = _WS_RE.sub(" ", s).strip()
    s = _EDGE_CONNECTORS_RE.sub("", s)
    return s.strip()


def canonicalize(name: str) -> str:
    """Canonical ingredient key for one free-text ingredient line.

    Returns "" for lines that normalize to fewer than two characters or to a
    bare connector word such as "pinch of".
    """
    if not name:
        return ""
    s = name.lower()
    while True:
        nxt = _normalize_once(s)
        if nxt == s:
            break
        s = nxt
    s = ALIAS_MAP.get(s, s)
    if len(s) < MIN_KEY_LENGTH or s in CONNECTORS:
        return ""
    return s

"""Field normalization: raw extractor strings -> canonical Recipe values.

Helpers here never raise on bad input. A value that cannot be parsed comes
back as ``None`` (or an empty string/list for text helpers), so one broken
sub-field never fails a whole extraction.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, List, Optional

from recipe_harvest.ingest.errors import IncompleteExtraction
from recipe_harvest.models.recipe_schema import ExtractedFields, Recipe

_WS_RE = re.compile(r"\s+")
_ISO_DURATION_RE = re.compile(
    r"^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$",
    re.I,
)
_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_LEADING_INT_RE = re.compile(r"^[+-]?\d+")
_PAREN_COUNT_RE = re.compile(r"\(\s*(\d[\d,]*)\s*\)")
_LAZY_SRC_ATTRS = ("src", "data-src", "data-lazy-src", "data-original")


def clean_text(value: Any) -> str:
    """Collapse whitespace runs to one space and strip; None -> ''."""
    if value is None:
        return ""
    return _WS_RE.sub(" ", str(value)).strip()


def optional_text(value: Any) -> Optional[str]:
    text = clean_text(value)
    return text or None


def clean_lines(values: Iterable[Any]) -> List[str]:
    out = []
    for value in values:
        text = clean_text(value)
        if text:
            out.append(text)
    return out


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'s' if n > 1 else ''}"


def parse_duration(value: Any) -> Optional[str]:
    """Convert an ISO-8601 duration to readable text.

    "PT1H30M" -> "1 hr 30 mins", "PT45M" -> "45 mins". Zero components are
    omitted and an all-zero or empty duration gives None. Seconds are not
    shown. Text that is not ISO-8601 ("20 minutes") is returned as-is.
    """
    text = clean_text(value)
    if not text:
        return None
    m = _ISO_DURATION_RE.match(text)
    if not m:
        return text
    days = int(m.group(1) or 0)
    hours = int(m.group(2) or 0) + days * 24
    minutes = int(m.group(3) or 0)

    parts = []
    if hours > 0:
        parts.append(_plural(hours, "hr"))
    if minutes > 0:
        parts.append(_plural(minutes, "min"))
    return " ".join(parts) or None


def parse_rating_avg(value: Any) -> Optional[float]:
    """Leading decimal number of the value, or None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            rating = float(value)
        except OverflowError:
            return None
    else:
        m = _LEADING_FLOAT_RE.match(clean_text(value))
        if not m:
            return None
        rating = float(m.group(0))
    # JSON allows NaN and 1e400 (inf)
    return rating if math.isfinite(rating) else None


def parse_int(value: Any) -> Optional[int]:
    """Leading integer of the value ("1,204 ratings" -> 1204), or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    m = _LEADING_INT_RE.match(clean_text(value).replace(",", ""))
    if not m:
        return None
    return int(m.group(0))


def parse_paren_count(text: Any) -> Optional[int]:
    """Count inside the first parenthetical: "(14)" -> 14."""
    m = _PAREN_COUNT_RE.search(clean_text(text))
    if not m:
        return None
    return int(m.group(1).replace(",", ""))


def join_ingredient_parts(*parts: Any) -> str:
    """Reassemble quantity/unit/name nodes into one line with single spacing."""
    return clean_text(" ".join(clean_text(p) for p in parts))


def first_image(value: Any) -> Optional[str]:
    """schema.org image: string, list of strings, {url} or list of {url}."""
    if isinstance(value, str):
        return optional_text(value)
    if isinstance(value, dict):
        return optional_text(value.get("url") or value.get("contentUrl"))
    if isinstance(value, list) and value:
        return first_image(value[0])
    return None


def split_instructions(value: Any) -> List[str]:
    """schema.org recipeInstructions -> ordered step strings.

    Accepts a newline-delimited string, a list of strings, a list of HowToStep
    objects ({text}) and HowToSection objects whose itemListElement steps are
    flattened in place.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return clean_lines(value.splitlines())
    if isinstance(value, dict):
        if "itemListElement" in value:
            return split_instructions(value["itemListElement"])
        return clean_lines([value.get("text") or value.get("name")])
    if isinstance(value, list):
        steps: List[str] = []
        for item in value:
            steps.extend(split_instructions(item))
        return steps
    return []


def first_yield(value: Any) -> Optional[str]:
    """schema.org recipeYield: string, number or list -> one string."""
    if isinstance(value, list):
        return first_yield(value[0]) if value else None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return optional_text(value)


def img_src(tag) -> Optional[str]:
    """src of an <img>, falling back to common lazy-load attributes."""
    if tag is None:
        return None
    for attr in _LAZY_SRC_ATTRS:
        value = tag.get(attr)
        if value and not str(value).startswith("data:"):
            return str(value).strip()
    return None


def build_recipe(url: str, fields: ExtractedFields, strategy: Optional[str] = None) -> Recipe:
    """Convert extracted fields to a Recipe; a missing name is a failure."""
    name = optional_text(fields.name)
    if not name:
        raise IncompleteExtraction(url=url, strategy=strategy)
    return Recipe(
        url=url,
        name=name,
        image=optional_text(fields.image),
        rating_avg=fields.rating_avg,
        rating_count=fields.rating_count,
        servings=optional_text(fields.servings),
        prep_time=optional_text(fields.prep_time),
        cook_time=optional_text(fields.cook_time),
        ingredients=clean_lines(fields.ingredients),
        instructions=clean_lines(fields.instructions),
        notes=optional_text(fields.notes),
        dietary_tags=None,
    )

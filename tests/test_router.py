import asyncio
import threading
from pathlib import Path

import pytest

from recipe_harvest.ingest import router
from recipe_harvest.ingest.errors import (
    IncompleteExtraction,
    InvalidUrl,
    NetworkFailure,
    UnsupportedSource,
)
from recipe_harvest.ingest.router import Strategy

FIXTURES = Path(__file__).parent / "fixtures"
NYT_URL = "https://cooking.nytimes.com/recipes/1026157-chicken-and-herb-salad"
LAL_URL = "https://www.loveandlemons.com/lemon-pasta/"


def _read(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def test_site_strategy_dispatch_by_hostname():
    assert router.site_strategy_for_url(NYT_URL) is Strategy.NYT_COOKING
    assert router.site_strategy_for_url(LAL_URL) is Strategy.LOVE_AND_LEMONS
    assert router.site_strategy_for_url("https://loveandlemons.com/x/") is Strategy.LOVE_AND_LEMONS
    assert router.site_strategy_for_url("https://example.com/soup/") is None


def test_strategy_order():
    assert router.strategies_for_url(NYT_URL) == [
        Strategy.NYT_COOKING,
        Strategy.JSON_LD,
        Strategy.WPRM,
        Strategy.TASTY,
        Strategy.HEURISTIC,
    ]
    assert router.strategies_for_url("https://example.com/")[0] is Strategy.JSON_LD


@pytest.mark.parametrize(
    "url, fixture",
    [
        (NYT_URL, "nyt_cooking.html"),
        (LAL_URL, "love_and_lemons.html"),
        ("https://weeknight.example.com/chicken/", "jsonld_graph.html"),
        ("https://minimal.example.com/dal/", "tasty.html"),
        ("https://blog.example.com/soup/", "heuristic.html"),
        ("https://mirror.example.com/lemon-pasta/", "love_and_lemons.html"),
    ],
)
def test_supported_fixtures_yield_name_and_ingredients(url, fixture):
    recipe = router.extract_recipe(url, _read(fixture))
    assert recipe.url == url
    assert recipe.name
    assert len(recipe.ingredients) >= 1
    assert recipe.dietary_tags is None


def test_site_extractor_falls_through_to_structured_data():
    # a Love & Lemons URL whose page has no recipe card but does carry JSON-LD
    recipe = router.extract_recipe(LAL_URL, _read("jsonld_graph.html"))
    assert recipe.name == "Sheet Pan Chicken Thighs"
    assert recipe.cook_time == "1 hr 30 mins"


def test_unknown_markup_is_unsupported():
    with pytest.raises(UnsupportedSource) as exc:
        router.extract_recipe("https://example.com/blog/", _read("nyt_cooking.html"))
    assert exc.value.reason == "no_match"
    assert exc.value.url == "https://example.com/blog/"


def test_markup_without_name_is_incomplete():
    html = '<div class="tasty-recipes"><div class="tasty-recipes-ingredients"><ul><li>salt</li></ul></div></div>'
    with pytest.raises(IncompleteExtraction) as exc:
        router.extract_recipe("https://example.com/x/", html)
    assert exc.value.reason == "name_missing"
    assert exc.value.strategy == "tasty"


def test_validate_url():
    assert router.validate_url("  https://example.com/a  ") == "https://example.com/a"
    with pytest.raises(InvalidUrl) as exc:
        router.validate_url("   ")
    assert exc.value.reason == "url_empty"
    with pytest.raises(InvalidUrl) as exc:
        router.validate_url("not a url")
    assert exc.value.reason == "url_invalid"
    with pytest.raises(InvalidUrl):
        router.validate_url("ftp://example.com/recipe")


def test_scrape_recipe_fetches_once(monkeypatch):
    calls = []

    def fake_fetch(url, timeout=None):
        calls.append(url)
        return _read("love_and_lemons.html"), url

    monkeypatch.setattr(router, "fetch_url", fake_fetch)
    recipe = router.scrape_recipe(LAL_URL)
    assert calls == [LAL_URL]
    assert recipe.name == "Lemon Pasta"
    assert recipe.rating_count == 147


def test_scrape_recipe_with_supplied_html_does_not_fetch(monkeypatch):
    def fail_fetch(url, timeout=None):
        raise AssertionError("fetch_url should not be called")

    monkeypatch.setattr(router, "fetch_url", fail_fetch)
    recipe = router.scrape_recipe(NYT_URL, html=_read("nyt_cooking.html"))
    assert recipe.prep_time == "25 minutes"
    assert recipe.rating_avg == 5


def test_async_scrape_parses_off_the_event_loop(monkeypatch):
    threads = []
    real_extract = router.extract_recipe

    def tracking_extract(url, html):
        threads.append(threading.get_ident())
        return real_extract(url, html)

    monkeypatch.setattr(router, "extract_recipe", tracking_extract)

    async def run():
        return await router.scrape_recipe_async(None, LAL_URL, html=_read("love_and_lemons.html"))

    recipe = asyncio.run(run())
    assert recipe.name == "Lemon Pasta"
    assert threads and threads[0] != threading.get_ident()


def test_scrape_recipe_network_failure_propagates(monkeypatch):
    def down(url, timeout=None):
        raise NetworkFailure(url, "HTTP 503", status_code=503)

    monkeypatch.setattr(router, "fetch_url", down)
    with pytest.raises(NetworkFailure) as exc:
        router.scrape_recipe(LAL_URL)
    assert exc.value.status_code == 503
    assert exc.value.reason == "network_error"


def test_source_name_and_support():
    assert router.source_name(NYT_URL) == "NY Times Cooking"
    assert router.source_name(LAL_URL) == "Love & Lemons"
    assert router.source_name("https://www.halfbakedharvest.com/soup/") == "HALFBAKEDHARVEST"
    assert router.source_name("nonsense") == "RECIPE"
    assert router.is_supported_url(NYT_URL)
    assert not router.is_supported_url("https://example.com/")


def test_recipe_serializes_with_camel_case_keys():
    recipe = router.extract_recipe(NYT_URL, _read("nyt_cooking.html"))
    data = recipe.model_dump(by_alias=True)
    assert data["ratingCount"] == 14
    assert data["prepTime"] == "25 minutes"
    assert data["dietary_tags"] is None

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from recipe_harvest.cli import app
from recipe_harvest.ingest.sites import love_and_lemons
from recipe_harvest.orchestrate import run

FIXTURES = Path(__file__).parent / "fixtures"

runner = CliRunner()


def _write(tmp_path, name, data):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf8")
    return str(path)


def test_load_recipes_accepts_object_list_and_batch(tmp_path):
    single = _write(tmp_path, "one.json", {"url": "https://a.test/1", "name": "Soup", "ratingAvg": 4.5})
    many = _write(
        tmp_path,
        "many.json",
        [{"url": "https://a.test/2", "name": "Salad"}, {"url": "https://a.test/3", "name": "Stew"}],
    )
    batch = _write(tmp_path, "batch.json", {"recipes": [{"url": "https://a.test/4", "name": "Dal"}], "failures": []})
    recipes = run.load_recipes([single, many, batch])
    assert [r.name for r in recipes] == ["Soup", "Salad", "Stew", "Dal"]
    assert recipes[0].rating_avg == 4.5


def test_stats_for_files(tmp_path):
    path = _write(
        tmp_path,
        "recipes.json",
        [
            {"url": "https://a.test/1", "name": "Soup", "ingredients": ["1 onion", "2 cups vegetable broth"]},
            {"url": "https://a.test/2", "name": "Stew", "ingredients": ["1 large onion, diced", "1 lb beef"]},
        ],
    )
    stats = run.stats_for_files([path])
    assert [i.key for i in stats.overlapping_ingredients] == ["onion"]
    assert stats.overlapping_ingredients[0].recipes == ["Soup", "Stew"]


def test_url_to_recipe_reads_saved_page(monkeypatch):
    def no_fetch(url, timeout=None):
        raise AssertionError("should not fetch")

    monkeypatch.setattr("recipe_harvest.ingest.router.fetch_url", no_fetch)
    recipe = run.url_to_recipe(
        "https://www.loveandlemons.com/lemon-pasta/", html_path=str(FIXTURES / "love_and_lemons.html")
    )
    assert recipe.name == "Lemon Pasta"


def test_harvest_uses_publisher_link_convention(monkeypatch):
    seen = {}

    async def fake_harvest(urls, client=None, selector="a[href]", prefix=None):
        seen.update(urls=urls, selector=selector, prefix=prefix)
        return run.BatchResult()

    monkeypatch.setattr(run, "harvest_listings", fake_harvest)
    monkeypatch.setattr(run.settings, "LISTING_URLS", [])
    run.harvest()
    assert seen["urls"] == list(love_and_lemons.LISTING_URLS)
    assert seen["selector"] == love_and_lemons.LINK_SELECTOR
    assert seen["prefix"] == love_and_lemons.LINK_PREFIX

    run.harvest(["https://example.com/roundup/"])
    assert seen["selector"] == "a[href]"
    assert seen["prefix"] is None


def test_cli_stats(tmp_path):
    path = _write(
        tmp_path,
        "recipes.json",
        [
            {"url": "https://a.test/1", "name": "Soup", "ingredients": ["1 onion", "salt"]},
            {"url": "https://a.test/2", "name": "Stew", "ingredients": ["2 onions", "pepper"]},
        ],
    )
    result = runner.invoke(app, ["stats", path])
    assert result.exit_code == 0
    assert "Onion" in result.output


def test_cli_scrape_with_saved_page():
    result = runner.invoke(
        app,
        [
            "scrape",
            "https://www.loveandlemons.com/lemon-pasta/",
            "--html",
            str(FIXTURES / "love_and_lemons.html"),
        ],
    )
    assert result.exit_code == 0
    assert "Lemon Pasta" in result.output
    assert '"ratingCount": 147' in result.output


@pytest.mark.parametrize("url", ["", "not a url"])
def test_cli_scrape_rejects_bad_url(url):
    result = runner.invoke(app, ["scrape", url])
    assert result.exit_code == 1
    assert "Error" in result.output

"""Typer CLI for recipe-harvest (scrape, scrape-many, harvest, stats)."""

from __future__ import annotations

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from recipe_harvest.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

from recipe_harvest.ingest.errors import ExtractionError
from recipe_harvest.ingest.router import source_name
from recipe_harvest.orchestrate import run as orchestrator

app = typer.Typer()
console = Console()


def _dump(model) -> str:
    return json.dumps(model.model_dump(by_alias=True), ensure_ascii=False, indent=2)


@app.command()
def scrape(
    url: str,
    html: Optional[str] = typer.Option(None, help="Parse this saved HTML file instead of fetching the URL."),
):
    """Extract a single recipe and print it as JSON."""
    try:
        recipe = orchestrator.url_to_recipe(url, html_path=html)
    except (ExtractionError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]{source_name(recipe.url)}[/green]: {recipe.name}", highlight=False)
    console.print_json(_dump(recipe))


@app.command("scrape-many")
def scrape_many(urls: List[str]):
    """Extract several recipes; one result per URL."""
    results = orchestrator.scrape_many(urls)
    console.print_json(json.dumps([r.model_dump(by_alias=True) for r in results], ensure_ascii=False))
    if not any(r.success for r in results):
        raise typer.Exit(code=1)


@app.command()
def harvest(listing_urls: Optional[List[str]] = typer.Argument(None)):
    """Scrape every recipe linked from listing pages."""
    try:
        result = orchestrator.harvest(listing_urls)
    except ExtractionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    console.print_json(_dump(result))
    console.print(f"Harvested {len(result.recipes)} recipes, {len(result.failures)} failures.")


@app.command()
def stats(files: List[str]):
    """Ingredient overlap statistics for recipes saved as JSON."""
    try:
        result = orchestrator.stats_for_files(files)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Shared ingredients")
    table.add_column("Ingredient")
    table.add_column("Recipes", justify="right")
    table.add_column("Used in")
    for ing in result.overlapping_ingredients:
        table.add_row(ing.name, str(ing.count), ", ".join(ing.recipes))
    console.print(table)
    console.print(
        f"Unique ingredients: {result.total_unique_ingredients}  "
        f"Occurrences: {result.total_ingredient_occurrences}  "
        f"Overlap score: {result.overlap_score}  "
        f"Estimated savings: {result.estimated_savings}"
    )


if __name__ == "__main__":
    app()

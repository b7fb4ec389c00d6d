import json
import sys
import pathlib

from bs4 import BeautifulSoup
from dotenv import load_dotenv

load_dotenv()

# Ensure project root is on sys.path so `recipe_harvest` can be imported
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from recipe_harvest.ingest.fetch import fetch_url
from recipe_harvest.ingest.jsonld import find_recipe_object, iter_json_ld_blocks

url = sys.argv[1] if len(sys.argv) > 1 else "https://www.loveandlemons.com/lemon-pasta/"
html, _ = fetch_url(url)
blocks = list(iter_json_ld_blocks(BeautifulSoup(html, "lxml")))
print("Found", len(blocks), "JSON-LD blocks")
for i, b in enumerate(blocks[:10]):
    print("--- block", i)
    print(json.dumps(b, indent=2)[:1000])

recipe = find_recipe_object(blocks)
print("--- Recipe object ---")
print(json.dumps(recipe, indent=2)[:2000] if recipe else "none")

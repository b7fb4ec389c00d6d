from recipe_harvest.dedup.stats import calculate_ingredient_stats, tally_ingredients
from recipe_harvest.models.recipe_schema import Recipe


def _recipe(name, ingredients):
    return Recipe(url=f"https://example.com/{name.lower().replace(' ', '-')}/", name=name, ingredients=ingredients)


STIR_FRY = _recipe(
    "Veggie Fried Rice",
    [
        "2 tbsp olive oil",
        "3 garlic cloves, minced",
        "1 yellow onion, diced",
        "1 cup white rice",
        "2 carrots, chopped",
        "2 celery stalks",
    ],
)
TOFU = _recipe(
    "Ginger Tofu",
    [
        "1 tbsp extra-virgin olive oil",
        "2 cloves garlic",
        "1 onion",
        "14 ounces firm tofu",
        "1 tablespoon grated ginger",
        "3 tablespoons soy sauce",
        "2 scallions, thinly sliced",
    ],
)


def test_empty_collection_gives_zero_stats():
    stats = calculate_ingredient_stats([])
    assert stats.total_unique_ingredients == 0
    assert stats.total_ingredient_occurrences == 0
    assert stats.overlapping_ingredients == []
    assert stats.ingredients_by_recipe == []
    assert stats.overlap_score == 0
    assert stats.estimated_savings == "0%"


def test_three_shared_out_of_ten_unique():
    stats = calculate_ingredient_stats([STIR_FRY, TOFU])
    assert stats.total_unique_ingredients == 10
    assert stats.total_ingredient_occurrences == 13
    assert [i.key for i in stats.overlapping_ingredients] == ["olive oil", "garlic", "onion"]
    # 100 * (3 ingredients * 2 recipes) / (10 unique * 2 recipes)
    assert stats.overlap_score == 30
    # 100 * (13 - 10) / 13 = 23.08
    assert stats.estimated_savings == "23%"
    assert [(r.recipe_name, r.count) for r in stats.ingredients_by_recipe] == [
        ("Veggie Fried Rice", 6),
        ("Ginger Tofu", 7),
    ]


def test_overlapping_entries_carry_display_name_and_recipes():
    stats = calculate_ingredient_stats([STIR_FRY, TOFU])
    olive = stats.overlapping_ingredients[0]
    assert olive.name == "Olive oil"
    assert olive.count == 2
    assert olive.occurrences == 2
    assert olive.recipes == ["Veggie Fried Rice", "Ginger Tofu"]


def test_aliases_counted_once_per_line_but_overlap_needs_two_recipes():
    single = _recipe("Dressing", ["2 tbsp extra-virgin olive oil", "1 tbsp olive oil"])
    stats = calculate_ingredient_stats([single])
    assert stats.total_unique_ingredients == 1
    assert stats.total_ingredient_occurrences == 2
    assert stats.overlapping_ingredients == []

    other = _recipe("Roast Potatoes", ["1 tbsp olive oil", "1 pound potatoes"])
    stats = calculate_ingredient_stats([single, other])
    assert [(i.key, i.count, i.occurrences) for i in stats.overlapping_ingredients] == [
        ("olive oil", 2, 3)
    ]


def test_overlap_sorted_by_recipe_count_descending():
    a = _recipe("A", ["salt", "butter"])
    b = _recipe("B", ["salt", "butter", "flour"])
    c = _recipe("C", ["kosher salt", "flour"])
    stats = calculate_ingredient_stats([a, b, c])
    assert [(i.key, i.count) for i in stats.overlapping_ingredients] == [
        ("salt", 3),
        ("butter", 2),
        ("flour", 2),
    ]


def test_scores_stay_within_bounds_with_repeated_lines():
    a = _recipe("A", ["salt"] * 5)
    b = _recipe("B", ["salt"] * 5)
    stats = calculate_ingredient_stats([a, b])
    assert 0 <= stats.overlap_score <= 100
    assert stats.overlap_score == 100
    assert stats.estimated_savings == "90%"


def test_noise_lines_are_not_counted():
    stats = calculate_ingredient_stats([_recipe("A", ["1 g", "", "salt"])])
    assert stats.total_unique_ingredients == 1
    assert stats.total_ingredient_occurrences == 1
    assert stats.ingredients_by_recipe[0].count == 3


def test_tally_tracks_original_strings():
    tally = tally_ingredients([STIR_FRY, TOFU])
    assert tally["olive oil"].original_names == ["2 tbsp olive oil", "1 tbsp extra-virgin olive oil"]
    assert tally["green onion"].recipes == ["Ginger Tofu"]


def test_stats_serialize_with_camel_case_keys():
    data = calculate_ingredient_stats([STIR_FRY, TOFU]).model_dump(by_alias=True)
    assert data["overlapScore"] == 30
    assert data["estimatedSavings"] == "23%"
    assert data["ingredientsByRecipe"][0] == {"recipeName": "Veggie Fried Rice", "count": 6}

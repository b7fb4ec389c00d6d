from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ExtractedFields(BaseModel):
    """Raw fields produced by one extraction strategy, before normalization."""

    name: Optional[str] = None
    image: Optional[str] = None
    rating_avg: Optional[float] = None
    rating_count: Optional[int] = None
    servings: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(min_length=1)
    name: Optional[str] = None
    image: Optional[str] = None
    rating_avg: Optional[float] = Field(default=None, alias="ratingAvg")
    rating_count: Optional[int] = Field(default=None, alias="ratingCount")
    servings: Optional[str] = None
    prep_time: Optional[str] = Field(default=None, alias="prepTime")
    cook_time: Optional[str] = Field(default=None, alias="cookTime")
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    # owned by the classification service; never set at extraction time
    dietary_tags: Optional[List[str]] = None


class CanonicalIngredient(BaseModel):
    key: str
    count: int = 0
    recipes: List[str] = Field(default_factory=list)
    original_names: List[str] = Field(default_factory=list)


class OverlappingIngredient(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    key: str
    count: int
    occurrences: int
    recipes: List[str]


class RecipeIngredientCount(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recipe_name: str = Field(alias="recipeName")
    count: int


class IngredientStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_unique_ingredients: int = Field(default=0, alias="totalUniqueIngredients")
    total_ingredient_occurrences: int = Field(default=0, alias="totalIngredientOccurrences")
    overlapping_ingredients: List[OverlappingIngredient] = Field(
        default_factory=list, alias="overlappingIngredients"
    )
    ingredients_by_recipe: List[RecipeIngredientCount] = Field(
        default_factory=list, alias="ingredientsByRecipe"
    )
    overlap_score: int = Field(default=0, alias="overlapScore")
    estimated_savings: str = Field(default="0%", alias="estimatedSavings")


class ScrapeResult(BaseModel):
    url: str
    success: bool
    recipe: Optional[Recipe] = None
    reason: Optional[str] = None
    error: Optional[str] = None


class BatchResult(BaseModel):
    recipes: List[Recipe] = Field(default_factory=list)
    failures: List[ScrapeResult] = Field(default_factory=list)

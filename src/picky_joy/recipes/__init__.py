"""Recipe extraction from assistant replies, plus saving and rating."""

from .models import ExtractedRecipe, RecipePattern
from .extractor import RECIPE_PATTERNS, extract_recipe, has_recipe
from .service import RatingSummary, compute_rating_summary, rate_recipe, save_extracted_recipe

__all__ = [
    "ExtractedRecipe",
    "RecipePattern",
    "RECIPE_PATTERNS",
    "extract_recipe",
    "has_recipe",
    "RatingSummary",
    "compute_rating_summary",
    "rate_recipe",
    "save_extracted_recipe",
]

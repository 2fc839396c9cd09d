"""Saving extracted recipes and rating them."""

import logging
from dataclasses import dataclass

from picky_joy.errors import NotFoundError, ValidationError

from .extractor import extract_recipe
from .models import ExtractedRecipe

logger = logging.getLogger(__name__)

MIN_STARS = 1
MAX_STARS = 5

# Recipes at or above this average show up as family favourites
WINNER_THRESHOLD = 4


@dataclass
class RatingSummary:
    rating_avg: float
    rating_count: int


def compute_rating_summary(ratings: list[int]) -> RatingSummary:
    """Average and count over every rating a recipe has received."""
    if not ratings:
        return RatingSummary(rating_avg=0.0, rating_count=0)
    return RatingSummary(rating_avg=sum(ratings) / len(ratings), rating_count=len(ratings))


async def save_extracted_recipe(store, user_id: str, content: str) -> tuple[str, ExtractedRecipe]:
    """
    Extract a recipe from message content and persist it for the user.

    Returns the new recipe id (to key the rating prompt) and the recipe.
    Raises ValidationError when the content holds no recognisable recipe.
    """
    recipe = extract_recipe(content)
    if recipe is None:
        raise ValidationError("No recipe found in message")

    row = await store.create_recipe(user_id, {**recipe.to_row(), "nutrition_info": None})
    recipe_id = str(row["id"])
    logger.info(f"Saved recipe {recipe_id} '{recipe.title}' for user {user_id}")
    return recipe_id, recipe


async def rate_recipe(
    store,
    user_id: str,
    recipe_id: str,
    stars: int,
    comment: str | None = None,
) -> RatingSummary:
    """Record a 1-5 star rating and refresh the recipe's aggregate."""
    if not MIN_STARS <= stars <= MAX_STARS:
        raise ValidationError(f"Rating must be between {MIN_STARS} and {MAX_STARS}")

    if await store.get_recipe(user_id, recipe_id) is None:
        raise NotFoundError("Recipe not found")

    comment = comment.strip() if comment and comment.strip() else None
    await store.add_rating(user_id, recipe_id, stars, comment)

    summary = compute_rating_summary(await store.list_ratings(recipe_id))
    await store.update_recipe_rating(recipe_id, summary.rating_avg, summary.rating_count)
    return summary

"""API endpoints for saving and rating recipes found in chat replies."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from picky_joy.db.store import ProfileStore
from picky_joy.recipes import extract_recipe, rate_recipe, save_extracted_recipe
from picky_joy.recipes.service import WINNER_THRESHOLD
from picky_joy.web.auth import AuthenticatedUser, get_current_user
from picky_joy.web.dependencies import get_profile_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


# =============================================================================
# Request/Response Models
# =============================================================================


class MessageContent(BaseModel):
    """Assistant message text to scan for a recipe."""

    content: str


class RecipePreviewResponse(BaseModel):
    title: str
    ingredients: list[str]
    instructions: str


class ExtractResponse(BaseModel):
    found: bool
    recipe: RecipePreviewResponse | None = None


class SaveResponse(BaseModel):
    """Saved recipe; recipe_id keys the follow-up rating prompt."""

    recipe_id: str
    recipe: RecipePreviewResponse


class RatingRequest(BaseModel):
    rating: int
    comment: str | None = None


class RatingResponse(BaseModel):
    recipe_id: str
    rating_avg: float
    rating_count: int


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/extract", response_model=ExtractResponse)
async def preview_recipe(
    req: MessageContent,
    user: AuthenticatedUser = Depends(get_current_user),
) -> ExtractResponse:
    """Detect a recipe without saving anything."""
    recipe = extract_recipe(req.content)
    if recipe is None:
        return ExtractResponse(found=False)
    return ExtractResponse(found=True, recipe=RecipePreviewResponse(**recipe.to_row()))


@router.post("", response_model=SaveResponse)
async def save_recipe(
    req: MessageContent,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
) -> SaveResponse:
    """Extract the recipe from an assistant message and save it."""
    recipe_id, recipe = await save_extracted_recipe(store, user.id, req.content)
    return SaveResponse(recipe_id=recipe_id, recipe=RecipePreviewResponse(**recipe.to_row()))


@router.post("/{recipe_id}/ratings", response_model=RatingResponse)
async def add_rating(
    recipe_id: str,
    req: RatingRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
) -> RatingResponse:
    summary = await rate_recipe(store, user.id, recipe_id, req.rating, req.comment)
    logger.info(f"Recipe {recipe_id} rated {req.rating} by user {user.id}")
    return RatingResponse(
        recipe_id=recipe_id,
        rating_avg=summary.rating_avg,
        rating_count=summary.rating_count,
    )


@router.get("/winners")
async def list_winners(
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """Family favourites: recipes averaging 4 stars or more."""
    return {"data": await store.list_winning_recipes(user.id, WINNER_THRESHOLD)}

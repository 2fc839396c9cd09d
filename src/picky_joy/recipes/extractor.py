"""
Recipe extraction from assistant replies.

A shape heuristic, not a parser: RECIPE_PATTERNS is tried in order and the
first pattern whose title and ingredients rules both produce content wins.
Unrecognised formatting simply yields None. Text that only resembles a
recipe can still match; there is no marker token to tell them apart.
"""

import logging
import re

from .models import ExtractedRecipe, RecipePattern

logger = logging.getLogger(__name__)

# Bullet-like delimiters between list items
ITEM_DELIMITERS = re.compile(r"[•\-*]")

_FLAGS = re.IGNORECASE

# Priority order matters: the default system prompt asks for the first layout
RECIPE_PATTERNS: list[RecipePattern] = [
    # **Recipe Name**: Toast / **Ingredients**: ... / **Instructions**: ... / **Tips**: ...
    RecipePattern(
        name="markdown",
        title=re.compile(r"\*\*Recipe Name\*\*:\s*([^\n]+)", _FLAGS),
        ingredients=re.compile(
            r"\*\*Ingredients\*\*:\s*([\s\S]*?)(?=\*\*Instructions\*\*|\*\*Tips\*\*|\Z)", _FLAGS
        ),
        instructions=re.compile(r"\*\*Instructions\*\*:\s*([\s\S]*?)(?=\*\*Tips\*\*|\Z)", _FLAGS),
    ),
    # Recipe: Toast / Ingredients: ... / Instructions: (or Steps:) ...
    RecipePattern(
        name="labelled",
        title=re.compile(r"Recipe:\s*([^\n]+)", _FLAGS),
        ingredients=re.compile(r"Ingredients:\s*([\s\S]*?)(?=Instructions:|Steps:|\Z)", _FLAGS),
        instructions=re.compile(r"(?:Instructions|Steps):\s*([\s\S]*?)(?=Tips:|\Z)", _FLAGS),
    ),
    # Text opening with "<Name> Recipe", sections as above
    RecipePattern(
        name="titled",
        title=re.compile(r"^([^:\n]+?)\s*Recipe", _FLAGS),
        ingredients=re.compile(r"Ingredients:\s*([\s\S]*?)(?=Instructions:|Steps:|\Z)", _FLAGS),
        instructions=re.compile(r"(?:Instructions|Steps):\s*([\s\S]*?)(?=Tips:|\Z)", _FLAGS),
    ),
]


def split_items(block: str) -> list[str]:
    """Split a block on bullet delimiters, trimming and dropping empty pieces."""
    return [item.strip() for item in ITEM_DELIMITERS.split(block) if item.strip()]


def extract_with_pattern(content: str, pattern: RecipePattern) -> ExtractedRecipe | None:
    """Apply a single pattern. None unless title and a non-empty ingredient list are found."""
    title_match = pattern.title.search(content)
    ingredients_match = pattern.ingredients.search(content)
    if not title_match or not ingredients_match:
        return None

    title = title_match.group(1).strip()
    ingredients = split_items(ingredients_match.group(1).strip())
    if not title or not ingredients:
        return None

    instructions_match = pattern.instructions.search(content)
    instructions_text = instructions_match.group(1).strip() if instructions_match else ""
    steps = split_items(instructions_text)

    return ExtractedRecipe(
        title=title,
        ingredients=ingredients,
        instructions="\n".join(steps) if steps else instructions_text,
        pattern=pattern.name,
    )


def extract_recipe(
    content: str | None,
    patterns: list[RecipePattern] | None = None,
) -> ExtractedRecipe | None:
    """
    Recover a recipe from one message's text.

    Args:
        content: Assistant message text
        patterns: Pattern list in priority order (defaults to RECIPE_PATTERNS)

    Returns:
        The first successful parse, or None
    """
    if not content:
        return None

    for pattern in patterns if patterns is not None else RECIPE_PATTERNS:
        recipe = extract_with_pattern(content, pattern)
        if recipe is not None:
            logger.debug(f"Recipe '{recipe.title}' matched pattern '{pattern.name}'")
            return recipe

    return None


def has_recipe(content: str | None) -> bool:
    """Whether the 'save recipe' affordance should be offered for this text."""
    return extract_recipe(content) is not None

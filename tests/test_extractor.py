"""
Tests for recipe extraction from assistant replies.
"""

import re

from picky_joy.recipes.extractor import (
    RECIPE_PATTERNS,
    extract_recipe,
    extract_with_pattern,
    has_recipe,
    split_items,
)
from picky_joy.recipes.models import ExtractedRecipe, RecipePattern


class TestMarkdownPattern:
    """Tests for the **Recipe Name** layout requested by the default prompt."""

    def test_toast_scenario(self, toast_reply):
        recipe = extract_recipe(toast_reply)
        assert recipe == ExtractedRecipe(
            title="Toast",
            ingredients=["Bread", "Butter"],
            instructions="Toast it",
        )
        assert recipe.pattern == "markdown"

    def test_tips_section_is_excluded(self):
        text = (
            "**Recipe Name**: Rainbow Wraps\n"
            "**Ingredients**:\n• Tortilla\n• Hummus\n• Carrots\n"
            "**Instructions**:\n- Spread hummus\n- Roll it up\n"
            "**Tips**: Let them pick the colours"
        )
        recipe = extract_recipe(text)
        assert recipe.title == "Rainbow Wraps"
        assert recipe.ingredients == ["Tortilla", "Hummus", "Carrots"]
        assert recipe.instructions == "Spread hummus\nRoll it up"

    def test_missing_instructions_gives_empty_string(self):
        recipe = extract_recipe("**Recipe Name**: Apple Slices\n**Ingredients**: * Apple")
        assert recipe.ingredients == ["Apple"]
        assert recipe.instructions == ""

    def test_case_insensitive_headers(self):
        recipe = extract_recipe("**recipe name**: Dip\n**ingredients**: - Yogurt")
        assert recipe.title == "Dip"


class TestFallbackPatterns:
    """Tests for the looser layouts."""

    def test_labelled_pattern(self):
        text = "Recipe: Mini Pizzas\nIngredients: - Muffins - Sauce - Cheese\nSteps: - Top - Bake\nTips: fun"
        recipe = extract_recipe(text)
        assert recipe.pattern == "labelled"
        assert recipe.title == "Mini Pizzas"
        assert recipe.ingredients == ["Muffins", "Sauce", "Cheese"]
        assert recipe.instructions == "Top\nBake"

    def test_titled_pattern(self):
        text = "Banana Oat Cookie Recipe\nIngredients: - Banana\n- Oats\nInstructions: Mash and bake."
        recipe = extract_recipe(text)
        assert recipe.pattern == "titled"
        assert recipe.title == "Banana Oat Cookie"
        assert recipe.ingredients == ["Banana", "Oats"]
        assert recipe.instructions == "Mash and bake."

    def test_markdown_wins_over_looser_pattern(self):
        text = (
            "Recipe: Wrong Title\nIngredients: - Wrong\n\n"
            "**Recipe Name**: Right Title\n**Ingredients**: - Right\n**Instructions**: Do it"
        )
        recipe = extract_recipe(text)
        assert recipe.pattern == "markdown"
        assert recipe.title == "Right Title"
        assert recipe.ingredients == ["Right"]

    def test_empty_ingredients_falls_through_to_next_pattern(self):
        text = (
            "**Recipe Name**: Nothing\n**Ingredients**: -\n**Instructions**: none\n\n"
            "Recipe: Soup\nIngredients: - Water"
        )
        recipe = extract_recipe(text)
        assert recipe.title == "Soup"
        assert recipe.pattern == "labelled"


class TestNoMatch:
    """Tests for text without a recipe."""

    def test_plain_text(self):
        text = "Picky eating is common at this age. Keep offering new foods without pressure."
        assert extract_recipe(text) is None
        assert has_recipe(text) is False

    def test_title_without_ingredients(self):
        assert extract_recipe("**Recipe Name**: Toast\nJust toast some bread.") is None

    def test_empty_and_none(self):
        assert extract_recipe("") is None
        assert extract_recipe(None) is None

    def test_has_recipe_true(self, toast_reply):
        assert has_recipe(toast_reply) is True


class TestExtractionProperties:
    """Determinism and data-driven pattern list."""

    def test_idempotent(self, toast_reply):
        first = extract_recipe(toast_reply)
        second = extract_recipe(toast_reply)
        assert first == second
        assert first.ingredients == second.ingredients

    def test_pattern_order(self):
        assert [p.name for p in RECIPE_PATTERNS] == ["markdown", "labelled", "titled"]

    def test_custom_pattern_list(self):
        custom = RecipePattern(
            name="dish",
            title=re.compile(r"Dish:\s*([^\n]+)"),
            ingredients=re.compile(r"Needs:\s*([\s\S]*?)(?=How:|\Z)"),
            instructions=re.compile(r"How:\s*([\s\S]*)"),
        )
        recipe = extract_recipe("Dish: Jelly\nNeeds: - Juice - Gelatin\nHow: Chill", patterns=[custom])
        assert recipe.title == "Jelly"
        assert recipe.ingredients == ["Juice", "Gelatin"]
        assert extract_with_pattern("Dish: Jelly", custom) is None

    def test_split_items(self):
        assert split_items("• a\n• b\n\n- c * d") == ["a", "b", "c", "d"]
        assert split_items("  ") == []

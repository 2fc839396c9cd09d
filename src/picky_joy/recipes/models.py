"""Data models for recipe extraction."""

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RecipePattern:
    """
    One recognised recipe layout.

    A pattern applies when both `title` and `ingredients` match; group 1 of
    each regex is the captured block. `instructions` is optional in the text.
    """

    name: str
    title: re.Pattern
    ingredients: re.Pattern
    instructions: re.Pattern


@dataclass
class ExtractedRecipe:
    """Recipe recovered from an assistant reply, ready to save."""

    title: str
    ingredients: list[str] = field(default_factory=list)
    instructions: str = ""
    pattern: str | None = field(default=None, compare=False)

    def to_row(self) -> dict:
        return {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
        }

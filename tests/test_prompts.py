"""
Tests for system prompt and turn assembly.
"""

from picky_joy.conversation.models import ChildProfile, Turn
from picky_joy.conversation.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    ENRICHMENT_INSTRUCTION,
    assemble_turns,
    build_profile_enrichment,
    build_system_prompt,
)


class TestBuildSystemPrompt:
    """Tests for the effective system prompt."""

    def test_base_used_without_override(self):
        assert build_system_prompt("BASE") == "BASE"

    def test_override_replaces_base(self):
        result = build_system_prompt("BASE", "Be brief.")
        assert result.startswith("Be brief.")
        assert "BASE" not in result

    def test_blank_override_falls_back_to_base(self):
        assert build_system_prompt("BASE", "   ") == "BASE"
        assert build_system_prompt("BASE", "") == "BASE"

    def test_profile_appended_after_blank_line(self, sample_profile):
        result = build_system_prompt("BASE", None, sample_profile)
        assert result.startswith("BASE\n\nCurrent child profile: Mia")

    def test_override_with_profile(self, sample_profile):
        result = build_system_prompt("BASE", "CUSTOM", sample_profile)
        assert result.startswith("CUSTOM\n\n")
        assert "Allergies: peanuts" in result

    def test_default_prompt_asks_for_recipe_layout(self):
        assert "**Recipe Name**:" in DEFAULT_SYSTEM_PROMPT
        assert "**Ingredients**:" in DEFAULT_SYSTEM_PROMPT


class TestProfileEnrichment:
    """Tests for the child profile block."""

    def test_full_profile(self, sample_profile):
        result = build_profile_enrichment(sample_profile)
        assert result.splitlines() == [
            "Current child profile: Mia (5 years old)",
            "Likes: pasta, apples",
            "Allergies: peanuts",
            ENRICHMENT_INSTRUCTION,
        ]

    def test_name_only_profile_has_no_likes_or_allergies(self):
        result = build_profile_enrichment(ChildProfile(name="Leo"))
        assert "Likes" not in result
        assert "Allergies" not in result
        assert result.splitlines()[0] == "Current child profile: Leo"

    def test_age_suffix_without_lists(self):
        result = build_profile_enrichment(ChildProfile(name="Leo", age=3))
        assert result.splitlines()[0] == "Current child profile: Leo (3 years old)"
        assert len(result.splitlines()) == 2

    def test_age_zero_is_rendered(self):
        result = build_profile_enrichment(ChildProfile(name="Baby", age=0))
        assert "(0 years old)" in result


class TestAssembleTurns:
    """Tests for turn ordering."""

    def test_system_history_user_order(self):
        history = [
            Turn(role="user", content="first"),
            Turn(role="assistant", content="second"),
        ]
        turns = assemble_turns("BASE", None, None, history, "third")

        assert [t.role for t in turns] == ["system", "user", "assistant", "user"]
        assert [t.content for t in turns[1:]] == ["first", "second", "third"]

    def test_exactly_one_trailing_user_turn(self):
        turns = assemble_turns("BASE", None, None, [], "hello")
        assert len(turns) == 2
        assert turns[-1] == Turn(role="user", content="hello")

    def test_history_is_not_mutated(self):
        history = [Turn(role="user", content="earlier")]
        assemble_turns("BASE", None, None, history, "now")
        assert history == [Turn(role="user", content="earlier")]

"""
Picky Joy - Profile Store.

All table access goes through ProfileStore. It wraps anything with a
PostgREST-style table() builder (the Supabase client in production, a
MagicMock in tests).

Soft reads used to build the prompt (override, profile, history) never
raise: they return a LookupResult. Everything else raises and lets the
caller decide.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from picky_joy.conversation.models import (
    HISTORY_WINDOW,
    ChildProfile,
    LookupResult,
    Turn,
)

logger = logging.getLogger(__name__)

HISTORY_PAGE_SIZE = 100
WINNERS_PAGE_SIZE = 20


class TableClient(Protocol):
    """Anything exposing the Supabase/PostgREST query builder."""

    def table(self, name: str) -> Any:
        ...


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _single_row(response: Any) -> dict | None:
    """maybe_single() returns None or an empty response when no row matches."""
    if response is None:
        return None
    data = response.data
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


class ProfileStore:
    """Keyed reads/writes over user_settings, child_profiles, messages, recipes, ratings."""

    def __init__(self, client: TableClient):
        self.client = client

    # =========================================================================
    # Prompt inputs (soft reads)
    # =========================================================================

    async def get_system_prompt_override(self, user_id: str) -> LookupResult[str]:
        """The user's saved system prompt, if any."""
        try:
            response = (
                self.client.table("user_settings")
                .select("system_prompt")
                .eq("user_id", user_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            return LookupResult.failed(e)

        row = _single_row(response)
        prompt = (row or {}).get("system_prompt")
        if not prompt or not prompt.strip():
            return LookupResult.not_found()
        return LookupResult.found(prompt)

    async def get_child_profile(self, user_id: str, profile_id: str) -> LookupResult[ChildProfile]:
        """A profile owned by user_id. Someone else's profile is not_found."""
        try:
            response = (
                self.client.table("child_profiles")
                .select("*")
                .eq("id", profile_id)
                .eq("user_id", user_id)  # Security: ensure user owns profile
                .maybe_single()
                .execute()
            )
            row = _single_row(response)
            if row is None:
                return LookupResult.not_found()
            return LookupResult.found(ChildProfile.from_row(row))
        except Exception as e:
            return LookupResult.failed(e)

    async def get_recent_turns(self, user_id: str, limit: int = HISTORY_WINDOW) -> LookupResult[list[Turn]]:
        """
        The most recent persisted turns, oldest first.

        Storage is queried newest-first with a limit, then reversed.
        """
        try:
            response = (
                self.client.table("messages")
                .select("role, content")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            return LookupResult.failed(e)

        rows = response.data or []
        turns = [
            Turn(role=row["role"], content=row["content"])
            for row in reversed(rows)
            if row.get("role") in ("user", "assistant") and row.get("content") is not None
        ]
        if not turns:
            return LookupResult.not_found()
        return LookupResult.found(turns)

    # =========================================================================
    # Messages
    # =========================================================================

    async def save_turn(self, user_id: str, turn: Turn) -> dict:
        """Persist one turn. Raises on failure."""
        data = {
            "user_id": user_id,
            "role": turn.role,
            "content": turn.content,
            "created_at": _utc_now(),
        }
        response = self.client.table("messages").insert(data).execute()
        return response.data[0] if response.data else data

    async def list_messages(self, user_id: str, limit: int = HISTORY_PAGE_SIZE) -> list[dict]:
        """Chat history, newest first."""
        response = (
            self.client.table("messages")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    # =========================================================================
    # User settings
    # =========================================================================

    async def upsert_system_prompt(self, user_id: str, system_prompt: str) -> dict:
        data = {
            "user_id": user_id,
            "system_prompt": system_prompt,
            "updated_at": _utc_now(),
        }
        response = self.client.table("user_settings").upsert(data, on_conflict="user_id").execute()
        return response.data[0] if response.data else data

    async def delete_system_prompt(self, user_id: str) -> None:
        self.client.table("user_settings").delete().eq("user_id", user_id).execute()

    # =========================================================================
    # Child profiles
    # =========================================================================

    async def list_child_profiles(self, user_id: str) -> list[dict]:
        """All profiles for a user, newest first."""
        response = (
            self.client.table("child_profiles")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    async def create_child_profile(self, user_id: str, profile: dict) -> dict:
        data = {"user_id": user_id, **profile}
        response = self.client.table("child_profiles").insert(data).execute()
        return response.data[0]

    async def update_child_profile(self, user_id: str, profile_id: str, updates: dict) -> dict | None:
        response = (
            self.client.table("child_profiles")
            .update(updates)
            .eq("id", profile_id)
            .eq("user_id", user_id)
            .execute()
        )
        return response.data[0] if response.data else None

    async def delete_child_profile(self, user_id: str, profile_id: str) -> bool:
        response = (
            self.client.table("child_profiles")
            .delete()
            .eq("id", profile_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)

    # =========================================================================
    # Recipes & ratings
    # =========================================================================

    async def create_recipe(self, user_id: str, recipe: dict) -> dict:
        data = {"user_id": user_id, **recipe}
        response = self.client.table("recipes").insert(data).execute()
        return response.data[0]

    async def get_recipe(self, user_id: str, recipe_id: str) -> dict | None:
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", recipe_id)
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return _single_row(response)

    async def add_rating(self, user_id: str, recipe_id: str, rating: int, comment: str | None) -> dict:
        data = {
            "recipe_id": recipe_id,
            "user_id": user_id,
            "rating": rating,
            "comment": comment,
        }
        response = self.client.table("ratings").insert(data).execute()
        return response.data[0] if response.data else data

    async def list_ratings(self, recipe_id: str) -> list[int]:
        response = self.client.table("ratings").select("rating").eq("recipe_id", recipe_id).execute()
        return [row["rating"] for row in response.data or []]

    async def update_recipe_rating(self, recipe_id: str, rating_avg: float, rating_count: int) -> None:
        (
            self.client.table("recipes")
            .update({"rating_avg": rating_avg, "rating_count": rating_count})
            .eq("id", recipe_id)
            .execute()
        )

    async def list_winning_recipes(
        self,
        user_id: str,
        min_rating: float = 4,
        limit: int = WINNERS_PAGE_SIZE,
    ) -> list[dict]:
        """Family favourites: the top `limit` highly rated recipes, best average first."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("user_id", user_id)
            .gte("rating_avg", min_rating)
            .order("rating_avg", desc=True)
            .order("rating_count", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

"""
Pytest configuration and fixtures for Picky Joy tests.
"""

import os
import pytest
from unittest.mock import MagicMock

# Set test environment before importing picky_joy modules
os.environ["PICKY_ENV"] = "development"
os.environ["PICKY_LOG_PROMPTS"] = "0"

from picky_joy.config import get_settings
from picky_joy.conversation.handler import ConversationHandler
from picky_joy.conversation.models import ChildProfile, LookupResult, Turn
from picky_joy.db.client import reset_service_client
from picky_joy.errors import AuthError
from picky_joy.llm.client import reset_client

VALID_TOKEN = "good-token"
USER_ID = "user-1"


class FakeUser:
    def __init__(self, user_id: str = USER_ID):
        self.id = user_id


async def fake_authenticate(authorization):
    """Accepts only 'Bearer good-token'."""
    if not authorization:
        raise AuthError("Missing authorization header")
    if authorization != f"Bearer {VALID_TOKEN}":
        raise AuthError("Invalid or expired token")
    return FakeUser()


class FakeStore:
    """In-memory ProfileStore stand-in with switchable failures."""

    def __init__(self):
        self.override: str | None = None
        self.profiles: dict[str, tuple[str, ChildProfile]] = {}
        self.messages: list[Turn] = []
        self.recipes: dict[str, dict] = {}
        self.ratings: dict[str, list[int]] = {}
        self.fail_override = False
        self.fail_profile = False
        self.fail_history = False
        self.fail_save = False
        self.calls: list[str] = []

    async def get_system_prompt_override(self, user_id):
        self.calls.append("get_system_prompt_override")
        if self.fail_override:
            return LookupResult.failed("settings table unavailable")
        if not self.override:
            return LookupResult.not_found()
        return LookupResult.found(self.override)

    async def get_child_profile(self, user_id, profile_id):
        self.calls.append("get_child_profile")
        if self.fail_profile:
            return LookupResult.failed("profiles table unavailable")
        owner, profile = self.profiles.get(profile_id, (None, None))
        if profile is None or owner != user_id:
            return LookupResult.not_found()
        return LookupResult.found(profile)

    async def get_recent_turns(self, user_id, limit=10):
        self.calls.append("get_recent_turns")
        if self.fail_history:
            return LookupResult.failed("messages table unavailable")
        if not self.messages:
            return LookupResult.not_found()
        return LookupResult.found(list(self.messages[-limit:]))

    async def save_turn(self, user_id, turn):
        self.calls.append(f"save_turn:{turn.role}")
        if self.fail_save:
            raise RuntimeError("insert failed")
        self.messages.append(turn)
        return {"id": f"msg-{len(self.messages)}"}

    async def create_recipe(self, user_id, recipe):
        recipe_id = f"recipe-{len(self.recipes) + 1}"
        self.recipes[recipe_id] = {"id": recipe_id, "user_id": user_id, **recipe}
        return self.recipes[recipe_id]

    async def get_recipe(self, user_id, recipe_id):
        recipe = self.recipes.get(recipe_id)
        if recipe is None or recipe["user_id"] != user_id:
            return None
        return recipe

    async def add_rating(self, user_id, recipe_id, rating, comment):
        self.ratings.setdefault(recipe_id, []).append(rating)
        return {"recipe_id": recipe_id, "rating": rating, "comment": comment}

    async def list_ratings(self, recipe_id):
        return list(self.ratings.get(recipe_id, []))

    async def update_recipe_rating(self, recipe_id, rating_avg, rating_count):
        self.recipes[recipe_id].update(rating_avg=rating_avg, rating_count=rating_count)


class FakeInference:
    """Records every completion call and returns a canned reply."""

    def __init__(self, reply: str = "Try mini banana pancakes!"):
        self.reply = reply
        self.calls: list[dict] = []
        self.error: Exception | None = None

    async def __call__(self, turns, *, max_tokens, temperature):
        self.calls.append({"turns": list(turns), "max_tokens": max_tokens, "temperature": temperature})
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(autouse=True)
def fresh_singletons():
    """Each test starts with unloaded settings and no cached clients."""
    get_settings.cache_clear()
    reset_service_client()
    reset_client()
    yield
    get_settings.cache_clear()
    reset_service_client()
    reset_client()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_inference():
    return FakeInference()


@pytest.fixture
def handler(fake_store, fake_inference):
    """ConversationHandler wired to in-memory collaborators."""
    return ConversationHandler(
        authenticate=fake_authenticate,
        get_store=lambda: fake_store,
        complete=fake_inference,
        base_instruction="BASE PROMPT",
    )


@pytest.fixture
def auth_header():
    return f"Bearer {VALID_TOKEN}"


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock_client = MagicMock()

    # Mock table operations (every builder method chains)
    mock_table = MagicMock()
    for method in ("select", "insert", "update", "upsert", "delete", "eq", "gte", "order", "limit", "maybe_single"):
        getattr(mock_table, method).return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[])

    mock_client.table.return_value = mock_table

    return mock_client


@pytest.fixture
def mock_openai():
    """Mock OpenAI client for unit tests."""
    mock_client = MagicMock()

    mock_completion = MagicMock()
    mock_completion.choices = [MagicMock(message=MagicMock(content="Here is a fun snack idea."))]
    mock_client.chat.completions.create.return_value = mock_completion

    return mock_client


@pytest.fixture
def sample_profile():
    """Sample child profile for testing."""
    return ChildProfile(
        id="profile-1",
        name="Mia",
        age=5,
        preferences=["pasta", "apples"],
        allergies=["peanuts"],
    )


@pytest.fixture
def sample_message_rows():
    """Message rows as Supabase returns them (newest first)."""
    return [
        {"role": "assistant", "content": "How about cheesy broccoli bites?"},
        {"role": "user", "content": "She hates broccoli."},
        {"role": "assistant", "content": "Hi! What does your child like?"},
        {"role": "user", "content": "Hello"},
    ]


@pytest.fixture
def toast_reply():
    return "**Recipe Name**: Toast\n**Ingredients**: - Bread\n- Butter\n**Instructions**: Toast it"

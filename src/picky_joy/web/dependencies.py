"""
Shared FastAPI dependencies.

Tests swap these out through app.dependency_overrides.
"""

from picky_joy.config import get_settings
from picky_joy.conversation.handler import ConversationHandler
from picky_joy.db.client import get_service_client
from picky_joy.db.store import ProfileStore
from picky_joy.llm.client import complete
from picky_joy.web.auth import authenticate


def get_profile_store() -> ProfileStore:
    """Store backed by the service-role Supabase client."""
    return ProfileStore(get_service_client())


def get_conversation_handler() -> ConversationHandler:
    """Chat pipeline wired to Supabase Auth, the profile store and OpenAI."""
    settings = get_settings()
    return ConversationHandler(
        authenticate=authenticate,
        get_store=get_profile_store,
        complete=complete,
        preflight=settings.require_chat_settings,
        max_tokens=settings.chat_max_tokens,
        temperature=settings.chat_temperature,
    )

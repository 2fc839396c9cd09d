"""
Picky Joy - Database access.

Supabase-backed store for settings, child profiles, messages, recipes and ratings.
"""

from picky_joy.db.client import get_service_client
from picky_joy.db.store import ProfileStore

__all__ = [
    "get_service_client",
    "ProfileStore",
]

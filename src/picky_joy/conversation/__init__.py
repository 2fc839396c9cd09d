"""
Picky Joy - Conversation assembly.

Turn models and prompt assembly. The request pipeline lives in
picky_joy.conversation.handler and the client-side state object in
picky_joy.conversation.state.
"""

from picky_joy.conversation.models import (
    HISTORY_WINDOW,
    ChildProfile,
    LookupResult,
    LookupStatus,
    Turn,
)
from picky_joy.conversation.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    assemble_turns,
    build_profile_enrichment,
    build_system_prompt,
)

__all__ = [
    "HISTORY_WINDOW",
    "ChildProfile",
    "LookupResult",
    "LookupStatus",
    "Turn",
    "DEFAULT_SYSTEM_PROMPT",
    "assemble_turns",
    "build_profile_enrichment",
    "build_system_prompt",
]

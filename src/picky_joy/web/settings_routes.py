"""System prompt settings endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from picky_joy.conversation.prompts import DEFAULT_SYSTEM_PROMPT
from picky_joy.db.store import ProfileStore
from picky_joy.errors import UpstreamError, ValidationError
from picky_joy.web.auth import AuthenticatedUser, get_current_user
from picky_joy.web.dependencies import get_profile_store

router = APIRouter(prefix="/settings", tags=["settings"])


class SystemPromptUpdate(BaseModel):
    system_prompt: str


@router.get("/system-prompt")
async def get_system_prompt(
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """The caller's saved prompt, or the default when none is saved."""
    result = await store.get_system_prompt_override(user.id)
    if result.error:
        raise UpstreamError("Failed to load system prompt")
    return {
        "system_prompt": result.value_or(DEFAULT_SYSTEM_PROMPT),
        "is_default": not result.is_found,
    }


@router.put("/system-prompt")
async def update_system_prompt(
    body: SystemPromptUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    if not body.system_prompt.strip():
        raise ValidationError("System prompt cannot be empty")
    row = await store.upsert_system_prompt(user.id, body.system_prompt)
    return {"data": row}


@router.delete("/system-prompt")
async def reset_system_prompt(
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """Drop the override so chats fall back to the default prompt."""
    await store.delete_system_prompt(user.id)
    return {"system_prompt": DEFAULT_SYSTEM_PROMPT, "is_default": True}

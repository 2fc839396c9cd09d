"""Chat history browsing and export endpoints."""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from picky_joy.db.store import ProfileStore
from picky_joy.web.auth import AuthenticatedUser, get_current_user
from picky_joy.web.dependencies import get_profile_store

router = APIRouter(prefix="/history", tags=["history"])

RoleFilter = Literal["all", "user", "assistant"]


def filter_messages(messages: list[dict], search: str = "", role: RoleFilter = "all") -> list[dict]:
    """Case-insensitive content search plus an optional role filter."""
    needle = search.lower()
    return [
        m for m in messages
        if needle in (m.get("content") or "").lower()
        and (role == "all" or m.get("role") == role)
    ]


def format_transcript(messages: list[dict]) -> str:
    """Plain-text transcript, oldest first. `messages` arrive newest first."""
    return "\n\n".join(
        f"{'You' if m.get('role') == 'user' else 'Assistant'}: {m.get('content', '')}"
        for m in reversed(messages)
    )


@router.get("")
async def list_history(
    search: str = "",
    role: RoleFilter = "all",
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """Up to 100 recent messages, newest first."""
    messages = filter_messages(await store.list_messages(user.id), search, role)
    return {"data": messages, "count": len(messages)}


@router.get("/export")
async def export_history(
    search: str = "",
    role: RoleFilter = "all",
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    messages = filter_messages(await store.list_messages(user.id), search, role)
    filename = f"chat-history-{date.today().isoformat()}.txt"
    return PlainTextResponse(
        format_transcript(messages),
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )

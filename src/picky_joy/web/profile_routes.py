"""Child profile CRUD endpoints."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from picky_joy.db.store import ProfileStore
from picky_joy.errors import NotFoundError, ValidationError
from picky_joy.web.auth import AuthenticatedUser, get_current_user
from picky_joy.web.dependencies import get_profile_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["profiles"])


def split_list_field(value: list[str] | str | None) -> list[str]:
    """Accept ['a', 'b'] or 'a, b'. Blank entries are dropped."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


class ProfileInput(BaseModel):
    name: str
    age: int | None = None
    preferences: list[str] | str | None = None
    allergies: list[str] | str | None = None

    @field_validator("preferences", "allergies")
    @classmethod
    def _normalize_list(cls, value):
        return split_list_field(value)

    def to_row(self) -> dict:
        name = self.name.strip()
        if not name:
            raise ValidationError("Profile name is required")
        return {
            "name": name,
            "age": self.age,
            "preferences": self.preferences or [],
            "allergies": self.allergies or [],
        }


@router.get("")
async def list_profiles(
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """The caller's child profiles, newest first."""
    return {"data": await store.list_child_profiles(user.id)}


@router.post("")
async def create_profile(
    body: ProfileInput,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    profile = await store.create_child_profile(user.id, body.to_row())
    logger.info(f"Created child profile {profile.get('id')} for user {user.id}")
    return {"data": profile}


@router.put("/{profile_id}")
async def update_profile(
    profile_id: str,
    body: ProfileInput,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    profile = await store.update_child_profile(user.id, profile_id, body.to_row())
    if profile is None:
        raise NotFoundError("Profile not found")
    return {"data": profile}


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    if not await store.delete_child_profile(user.id, profile_id):
        raise NotFoundError("Profile not found")
    return {"success": True}

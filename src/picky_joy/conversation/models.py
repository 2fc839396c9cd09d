"""
Picky Joy - Conversation data models.

Turns are immutable once constructed. Soft store reads return a
LookupResult so callers can tell "no row" from "the read blew up"
even though both collapse to the same default.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# Number of persisted turns sent to the model as context
HISTORY_WINDOW = 10

Role = Literal["system", "user", "assistant"]

T = TypeVar("T")


class Turn(BaseModel):
    """One role-tagged message in a conversation sequence."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_openai(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChildProfile(BaseModel):
    """A child's profile as stored in child_profiles."""

    id: str | None = None
    name: str
    age: int | None = None
    preferences: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict) -> "ChildProfile":
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            name=row["name"],
            age=row.get("age"),
            preferences=row.get("preferences") or [],
            allergies=row.get("allergies") or [],
        )


class LookupStatus(str, Enum):
    """Outcome of a soft (non-fatal) store read."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class LookupResult(Generic[T]):
    status: LookupStatus
    value: T | None = None
    error: str | None = None

    @classmethod
    def found(cls, value: T) -> "LookupResult[T]":
        return cls(LookupStatus.FOUND, value)

    @classmethod
    def not_found(cls) -> "LookupResult[T]":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception | str) -> "LookupResult[T]":
        return cls(LookupStatus.LOOKUP_FAILED, error=str(error))

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    def value_or(self, default: T) -> T:
        """Collapse to the found value, or the default for not_found/lookup_failed."""
        if self.is_found and self.value is not None:
            return self.value
        return default


class ChatPayload(BaseModel):
    """Body of POST /api/chat. Blank-message checks happen in the handler."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    selected_profile_id: str | None = Field(default=None, alias="selectedProfileId")


class ChatReply(BaseModel):
    message: str

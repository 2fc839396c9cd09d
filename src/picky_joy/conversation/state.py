"""
Picky Joy - Client conversation state.

The view's message list as an explicit object owned by the caller (CLI
loop, tests, any client) rather than a process-wide singleton. submit()
takes the state through one round trip to the chat endpoint and returns it.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from picky_joy.recipes.extractor import extract_recipe
from picky_joy.recipes.models import ExtractedRecipe

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error. Please try again."

SendMessage = Callable[[str], Awaitable[str]]


class Message(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def recipe(self) -> ExtractedRecipe | None:
        """Recipe found in this message. User-authored text never yields one."""
        if self.role != "assistant":
            return None
        return extract_recipe(self.content)


class ConversationState(BaseModel):
    messages: list[Message] = Field(default_factory=list)
    is_loading: bool = False

    def add_message(self, role: Literal["user", "assistant"], content: str) -> Message:
        message = Message(role=role, content=content)
        self.messages.append(message)
        return message

    def set_messages(self, messages: list[Message]) -> None:
        self.messages = list(messages)

    def clear_messages(self) -> None:
        self.messages = []

    def recipe_messages(self) -> list[tuple[Message, ExtractedRecipe]]:
        """Assistant messages that carry a saveable recipe."""
        found = []
        for message in self.messages:
            recipe = message.recipe
            if recipe is not None:
                found.append((message, recipe))
        return found

    async def submit(self, text: str, send: SendMessage) -> "ConversationState":
        """
        Post one user message and record the reply.

        Ignored while a previous submission is in flight or when the text is
        blank. A failed send is shown as a generic assistant error message.
        """
        text = text.strip()
        if not text or self.is_loading:
            return self

        self.add_message("user", text)
        self.is_loading = True
        try:
            reply = await send(text)
            self.add_message("assistant", reply)
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            self.add_message("assistant", ERROR_REPLY)
        finally:
            self.is_loading = False

        return self

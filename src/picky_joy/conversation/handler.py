"""
Picky Joy - Conversation Handler.

One chat request, strictly in order, no retries, no rollback:

    AUTH_PENDING -> AUTHORIZED | REJECTED
    AUTHORIZED -> BODY_VALIDATED | REJECTED
    BODY_VALIDATED -> PROMPT_ASSEMBLED -> INFERENCE_CALLED -> PERSISTED -> RESPONDED

Authorization and body validation happen before any store or model call.
Prompt inputs (override, profile, history) are soft reads. The user turn
is written before the model call and the assistant turn after it; both
writes are best-effort and never change the response. Any other failure
after authorization becomes a generic UpstreamError.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from picky_joy.conversation.models import (
    ChatPayload,
    ChatReply,
    ChildProfile,
    LookupResult,
    Turn,
)
from picky_joy.conversation.prompts import DEFAULT_SYSTEM_PROMPT, assemble_turns
from picky_joy.errors import PickyJoyError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7


class HandlerState(str, Enum):
    AUTH_PENDING = "auth_pending"
    AUTHORIZED = "authorized"
    REJECTED = "rejected"
    BODY_VALIDATED = "body_validated"
    PROMPT_ASSEMBLED = "prompt_assembled"
    INFERENCE_CALLED = "inference_called"
    PERSISTED = "persisted"
    RESPONDED = "responded"


class Caller(Protocol):
    id: str


class InferenceOracle(Protocol):
    async def __call__(self, turns: list[Turn], *, max_tokens: int, temperature: float) -> str:
        ...


Authenticator = Callable[[str | None], Awaitable[Caller]]


@dataclass
class PromptInputs:
    """Everything read from the store to build the prompt, with lookup outcomes kept."""

    override: LookupResult[str]
    profile: LookupResult[ChildProfile] | None
    history: LookupResult[list[Turn]]

    def to_turns(self, base_instruction: str, new_user_text: str) -> list[Turn]:
        profile = self.profile.value_or(None) if self.profile is not None else None
        return assemble_turns(
            base_instruction=base_instruction,
            user_override=self.override.value_or(None),
            profile=profile,
            history=self.history.value_or([]),
            new_user_text=new_user_text,
        )


@dataclass
class ChatExchange:
    """Full record of one handled request."""

    states: list[HandlerState] = field(default_factory=lambda: [HandlerState.AUTH_PENDING])
    user_id: str | None = None
    inputs: PromptInputs | None = None
    turns: list[Turn] = field(default_factory=list)
    user_turn_saved: bool = False
    assistant_turn_saved: bool = False
    reply: ChatReply | None = None

    def advance(self, state: HandlerState) -> None:
        logger.debug(f"Chat request {self.states[-1].value} -> {state.value}")
        self.states.append(state)


class ConversationHandler:
    """
    Orchestrates auth -> store reads -> prompt -> model -> store writes.

    Collaborators are injected so the pipeline runs without Supabase or
    OpenAI in tests:
        authenticate: bearer header -> caller with .id (raises AuthError)
        get_store: returns a ProfileStore, called only once authorized
        complete: the inference call
        preflight: optional config check run after validation
    """

    def __init__(
        self,
        *,
        authenticate: Authenticator,
        get_store: Callable[[], Any],
        complete: InferenceOracle,
        preflight: Callable[[], None] | None = None,
        base_instruction: str = DEFAULT_SYSTEM_PROMPT,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.authenticate = authenticate
        self.get_store = get_store
        self.complete = complete
        self.preflight = preflight
        self.base_instruction = base_instruction
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def handle(self, authorization: str | None, payload: ChatPayload | dict | None) -> ChatReply:
        exchange = await self.run(authorization, payload)
        return exchange.reply

    async def run(self, authorization: str | None, payload: ChatPayload | dict | None) -> ChatExchange:
        exchange = ChatExchange()

        try:
            caller = await self.authenticate(authorization)
        except PickyJoyError:
            exchange.advance(HandlerState.REJECTED)
            raise
        exchange.user_id = caller.id
        exchange.advance(HandlerState.AUTHORIZED)

        try:
            request = self._validate(payload)
        except ValidationError:
            exchange.advance(HandlerState.REJECTED)
            raise
        message = request.message.strip()
        exchange.advance(HandlerState.BODY_VALIDATED)

        try:
            if self.preflight is not None:
                self.preflight()
            store = self.get_store()

            exchange.inputs = await self.gather_prompt_inputs(store, caller.id, request.selected_profile_id)
            exchange.turns = exchange.inputs.to_turns(self.base_instruction, message)
            exchange.advance(HandlerState.PROMPT_ASSEMBLED)

            user_turn = exchange.turns[-1]
            exchange.user_turn_saved = await self._save_best_effort(store, caller.id, user_turn)

            assistant_text = await self.complete(
                exchange.turns,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
            if not assistant_text:
                raise RuntimeError("Model returned an empty completion")
            exchange.advance(HandlerState.INFERENCE_CALLED)

            assistant_turn = Turn(role="assistant", content=assistant_text)
            exchange.assistant_turn_saved = await self._save_best_effort(store, caller.id, assistant_turn)
            exchange.advance(HandlerState.PERSISTED)

        except PickyJoyError:
            raise
        except Exception as e:
            logger.exception(f"Chat request failed for user {caller.id}: {e}")
            raise UpstreamError() from e

        exchange.reply = ChatReply(message=assistant_text)
        exchange.advance(HandlerState.RESPONDED)
        return exchange

    async def gather_prompt_inputs(self, store: Any, user_id: str, profile_id: str | None) -> PromptInputs:
        """Soft reads for the prompt. Failures are logged, never raised."""
        override = await store.get_system_prompt_override(user_id)
        profile = await store.get_child_profile(user_id, profile_id) if profile_id else None
        history = await store.get_recent_turns(user_id)

        for name, result in (("system prompt override", override), ("child profile", profile), ("history", history)):
            if result is not None and result.error:
                logger.warning(f"{name.capitalize()} lookup failed for user {user_id}, using default: {result.error}")

        return PromptInputs(override=override, profile=profile, history=history)

    @staticmethod
    def _validate(payload: ChatPayload | dict | None) -> ChatPayload:
        if payload is None:
            raise ValidationError("Message is required")
        if isinstance(payload, dict):
            try:
                payload = ChatPayload.model_validate(payload)
            except Exception:
                raise ValidationError("Invalid request body")
        if not payload.message or not payload.message.strip():
            raise ValidationError("Message is required")
        return payload

    @staticmethod
    async def _save_best_effort(store: Any, user_id: str, turn: Turn) -> bool:
        try:
            await store.save_turn(user_id, turn)
            return True
        except Exception as e:
            logger.error(f"Failed to save {turn.role} message for user {user_id}: {e}")
            return False

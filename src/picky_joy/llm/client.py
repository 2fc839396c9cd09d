"""
Picky Joy - LLM Client.

Wraps the OpenAI chat completions API. This is the only place the app
talks to the model; the conversation handler treats complete() as an
opaque text-completion oracle.
"""

from openai import OpenAI

from picky_joy.config import get_settings
from picky_joy.conversation.models import Turn
from picky_joy.errors import ConfigurationError
from picky_joy.llm.prompt_logger import log_prompt

# Singleton client instance
_client: OpenAI | None = None


def get_client() -> OpenAI:
    """
    Get the OpenAI client.

    Uses singleton pattern to reuse connection. No SDK-level retries:
    a failed completion fails the request.
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.openai_api_key:
            raise ConfigurationError(details="Missing environment variables: OPENAI_API_KEY")
        _client = OpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=0,
        )

    return _client


def reset_client() -> None:
    global _client
    _client = None


async def complete(
    turns: list[Turn],
    *,
    max_tokens: int,
    temperature: float,
    model: str | None = None,
) -> str:
    """
    Generate one assistant turn from an ordered list of turns.

    Args:
        turns: System turn, history, and the new user turn, in order
        max_tokens: Upper bound on generated tokens
        temperature: Sampling temperature

    Returns:
        The generated text ("" if the model returned no content)
    """
    client = get_client()
    model = model or get_settings().openai_model
    messages = [turn.to_openai() for turn in turns]
    params = {"max_tokens": max_tokens, "temperature": temperature}

    try:
        response = client.chat.completions.create(
            model=model,
            messages=messages,
            **params,
        )
        text = response.choices[0].message.content or ""

        log_prompt(model=model, messages=messages, params=params, response=text)

        return text

    except Exception as e:
        log_prompt(model=model, messages=messages, params=params, error=str(e))
        raise

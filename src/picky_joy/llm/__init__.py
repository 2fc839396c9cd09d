"""
Picky Joy - LLM integration.

Plain-text chat completions via OpenAI, with optional prompt logging.
"""

from picky_joy.llm.client import complete, get_client

__all__ = [
    "complete",
    "get_client",
]

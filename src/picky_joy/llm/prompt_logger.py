"""
Picky Joy - Prompt Logger.

Logs every chat completion (turns + response) to markdown files for debugging.
Enabled via PICKY_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any

# Configuration
LOG_PROMPTS = os.getenv("PICKY_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        _ensure_log_dir()


def is_enabled() -> bool:
    return LOG_PROMPTS


def _ensure_log_dir() -> None:
    """Create the log directory if it doesn't exist."""
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    """Get or create a session ID for this run."""
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    """Get the directory for this session's logs."""
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir


def log_prompt(
    *,
    model: str,
    messages: list[dict[str, Any]],
    params: dict[str, Any] | None = None,
    response: str | None = None,
    error: str | None = None,
) -> Path | None:
    """
    Log a chat completion call to a file.

    Args:
        model: The model used
        messages: The role-tagged messages sent to the API
        params: Sampling parameters (max_tokens, temperature)
        response: The generated text (optional)
        error: Any error that occurred (optional)

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1

    _ensure_log_dir()
    filepath = _get_session_dir() / f"{_call_counter:02d}_chat.md"

    params_str = ""
    if params:
        params_str = "\n**Params:** " + ", ".join(f"{k}={v}" for k, v in params.items())

    content = f"""# LLM Call: chat

**Time:** {datetime.now().isoformat()}
**Model:** {model}{params_str}

---

"""
    for message in messages:
        content += f"## {message['role'].title()}\n\n```\n{message['content']}\n```\n\n"

    content += "---\n\n## Response\n\n"
    if error:
        content += f"**ERROR:** {error}\n"
    elif response is not None:
        content += f"```\n{response}\n```\n"
    else:
        content += "(No response yet)\n"

    filepath.write_text(content, encoding="utf-8")

    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not LOG_PROMPTS:
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session (for testing or new conversation)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0

"""Factory helpers for creating session graph payloads."""

from __future__ import annotations

from typing import Any

from src.engine.conversation import start_assessment


def new_session_state(session_id: str) -> dict[str, Any]:
    """Return a fresh session state dict used by CLI and web entrypoints."""
    return {
        "session_id": session_id,
        "messages": [],
        "conversation": start_assessment().to_dict(),
        "action": {},
        "needs_prompt": True,
        "last_error": "",
        "profile": {},
        "guidance": "",
        "done": False,
    }

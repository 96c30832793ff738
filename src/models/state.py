"""Shared state definition for the LangGraph assessment session graph.

The engine's ``ConversationState`` travels through the graph in its
``to_dict()`` form so checkpoints only ever hold plain JSON-like data,
next to the chat transcript and the final outputs.
"""

from __future__ import annotations

from typing import Any

from langgraph.graph import MessagesState


class SessionState(MessagesState):
    """Full shared state for the assessment session graph.

    Extends MessagesState (which provides `messages: list[AnyMessage]`
    with the `add_messages` reducer) with the engine's serialised state.
    """

    # --- Session identity ---
    session_id: str

    # --- Engine state (ConversationState.to_dict()) ---
    conversation: dict[str, Any]

    # --- Human input (set by interrupt/resume) ---
    action: dict[str, Any]

    # --- Control flow ---
    needs_prompt: bool  # True when the current question must be (re)asked
    last_error: str  # malformed-input message for the caller, "" when none

    # --- Output ---
    profile: dict[str, Any]
    guidance: str
    done: bool

"""LangGraph workflow — hosts one assessment session around the pure engine.

The engine (``src.engine.conversation``) decides everything; the graph
only carries its state between user turns, keeps the chat transcript,
and runs synthesis once the conversation is complete.

Flow:
    START → router → ask → human_turn → apply_action → router → …
                  ↘ synthesize → END   (when the conversation is complete)

The human_turn node uses LangGraph's `interrupt()` to pause execution
and wait for the next user action, which callers resume via
`Command(resume={"action": ..., ...})`:

    {"action": "answer", "value": <str | list[str] | number | None>}
    {"action": "toggle", "option": <str>}
    {"action": "back"}
"""

from __future__ import annotations

import logging
from typing import Any

from langchain_core.messages import AIMessage, HumanMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, START, StateGraph
from langgraph.types import Command, interrupt

from src.engine.conversation import current_question, go_back, submit_answer, toggle_option
from src.errors import MalformedResponseError
from src.models.conversation import ConversationState
from src.models.state import SessionState
from src.scoring.guidance import generate_guidance
from src.scoring.report import format_profile, format_question
from src.scoring.synthesizer import synthesize_profile

logger = logging.getLogger(__name__)

ACTIONS = ("answer", "toggle", "back")


def _conversation(state: SessionState) -> ConversationState:
    return ConversationState.from_dict(state["conversation"])


def _render_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(str(v) for v in value)
    return str(value)


# ── Graph nodes ───────────────────────────────────────────────────────────


def router(state: SessionState) -> Command:
    """Decide whether to ask, wait for input, or synthesize the profile."""
    conversation = _conversation(state)
    if conversation.is_complete:
        return Command(goto="synthesize")
    if state.get("needs_prompt", True):
        return Command(goto="ask")
    return Command(goto="human_turn")


def ask(state: SessionState) -> dict:
    """Post the current question (and any pending notice) as a bot message."""
    conversation = _conversation(state)
    question = current_question(conversation)
    text = format_question(question)  # type: ignore[arg-type]
    if conversation.notice:
        text = f"{conversation.notice}\n\n{text}"
    return {"messages": [AIMessage(content=text)], "needs_prompt": False}


def human_turn(state: SessionState) -> dict:
    """Pause execution and wait for the next user action via interrupt()."""
    action: dict[str, Any] = interrupt(
        {"question_id": state["conversation"].get("current_question_id")}
    )
    return {"action": action}


def apply_action(state: SessionState) -> dict:
    """Run the user's action through the engine.

    Malformed input leaves the conversation untouched and is reported
    through ``last_error`` for the caller to re-prompt.
    """
    action = state.get("action") or {}
    kind = action.get("action", "answer")
    before = _conversation(state)

    if kind not in ACTIONS:
        return {"last_error": f"Unknown action: {kind!r}", "needs_prompt": False}

    try:
        if kind == "back":
            after = go_back(before)
        elif kind == "toggle":
            after = toggle_option(before, action.get("option"))
        else:
            after = submit_answer(before, action.get("value"))
    except MalformedResponseError as e:
        logger.debug("Rejected %s action: %s", kind, e)
        return {"last_error": str(e), "needs_prompt": False}

    update: dict[str, Any] = {
        "conversation": after.to_dict(),
        "last_error": "",
        "needs_prompt": (
            after.current_question_id != before.current_question_id
            or after.notice is not None
        ),
    }
    if kind == "answer" and after is not before:
        value = action.get("value")
        if value is None:
            value = before.pending_selection
        update["messages"] = [HumanMessage(content=_render_value(value))]
    return update


def synthesize(state: SessionState) -> dict:
    """Build the profile and guidance once the conversation is complete."""
    conversation = _conversation(state)
    profile = synthesize_profile(conversation.responses)
    guidance = generate_guidance(
        profile.perma_scores, profile.mbti_type, profile.perma_details
    )
    logger.info("Session %s synthesized type %s", state.get("session_id"), profile.mbti_type)
    return {
        "profile": profile.to_dict(),
        "guidance": guidance,
        "done": True,
        "messages": [AIMessage(content=format_profile(profile, guidance))],
    }


# ── Build the graph ───────────────────────────────────────────────────────


def build_graph():
    """Construct and compile the assessment StateGraph."""
    graph = StateGraph(SessionState)

    graph.add_node("router", router)
    graph.add_node("ask", ask)
    graph.add_node("human_turn", human_turn)
    graph.add_node("apply_action", apply_action)
    graph.add_node("synthesize", synthesize)

    graph.add_edge(START, "router")
    # router uses Command to go to "ask", "human_turn" or "synthesize"
    graph.add_edge("ask", "human_turn")
    graph.add_edge("human_turn", "apply_action")
    graph.add_edge("apply_action", "router")
    graph.add_edge("synthesize", END)

    checkpointer = MemorySaver()
    return graph.compile(checkpointer=checkpointer)

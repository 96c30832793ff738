"""CLI entry-point — run the assessment questionnaire in the terminal.

Usage:
    python -m src.main
    # or via pyproject entry-point:  assessment
"""

from __future__ import annotations

import uuid
from typing import Any

from dotenv import load_dotenv
from langgraph.types import Command

from src.catalog.questions import Question, get_catalog
from src.logging_config import setup_logging
from src.models.initial_state import new_session_state
from src.workflow import build_graph

load_dotenv()


BANNER = """
╔══════════════════════════════════════════════════════════════╗
║            Happiness & Personality Profile Builder           ║
║                                                              ║
║  Answer a few quick questions so we can personalise your     ║
║  experience. Pick options by number (comma-separate several  ║
║  for multi-choice). Type 'back' to change your last answer   ║
║  or 'quit' to leave.                                         ║
╚══════════════════════════════════════════════════════════════╝
"""


def _parse_answer(question: Question, raw: str) -> Any:
    """Turn typed input into the value shape the question expects.

    Returns None when the input cannot be read, so the caller re-asks.
    """
    if question.kind == "slider":
        try:
            number = float(raw)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number

    if question.kind == "free-text":
        return raw

    def pick(token: str) -> str:
        if token.isdigit() and 1 <= int(token) <= len(question.options):
            return question.options[int(token) - 1]
        return token

    # Option texts may themselves contain commas.
    if question.kind == "single-select":
        if raw in question.options:
            return raw
        if "," in raw and all(p.strip().isdigit() for p in raw.split(",")):
            return None
        return pick(raw)

    if raw in question.options:
        return [raw]
    return [pick(p.strip()) for p in raw.split(",") if p.strip()]


def main() -> None:
    setup_logging("WARNING")
    print(BANNER)

    graph = build_graph()
    catalog = get_catalog()
    thread_id = str(uuid.uuid4())
    config = {"configurable": {"thread_id": thread_id}}

    # First invocation runs router → ask → human_turn and pauses at the interrupt
    result = graph.invoke(new_session_state(session_id=thread_id[:8]), config)
    shown = 0

    while True:
        messages = result.get("messages", [])
        for msg in messages[shown:]:
            if msg.type == "ai":
                print(f"\n🤖  {msg.content}\n")
        shown = len(messages)

        if result.get("last_error"):
            print(f"   ⚠ {result['last_error']}")

        if result.get("done"):
            break

        question_id = result["conversation"]["current_question_id"]
        question = catalog.get(question_id)

        try:
            raw = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nSession ended by user. Nothing was saved.")
            break

        if not raw:
            continue
        if raw.lower() == "quit":
            print("\nSession ended. Nothing was saved.")
            break
        if raw.lower() == "back":
            result = graph.invoke(Command(resume={"action": "back"}), config)
            continue

        value = _parse_answer(question, raw)
        if value is None:
            print("   Sorry, I couldn't read that. Please try again.")
            continue
        result = graph.invoke(Command(resume={"action": "answer", "value": value}), config)


if __name__ == "__main__":
    main()

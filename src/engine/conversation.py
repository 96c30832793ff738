"""Conversation state machine — drives the questionnaire one action at a time.

States:
    AwaitingAnswer(current_question_id)  →  …  →  Complete (current is None)

Every operation takes a ``ConversationState`` and returns a new one; the
input state is never modified, so callers can keep old states around
(undo, checkpoints, tests).

Branching:
  - gating question "I know my type"    → jump to the direct-entry question
  - gating question "I'm not sure"      → jump to the first dimension question
  - direct entry, invalid (1st time)    → re-ask with a format hint
  - direct entry, invalid (2nd time)    → reroute into the dimension questions
  - direct entry, valid                 → continue, skipping dimension questions
  - anything else                       → next question in catalog order
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import replace
from numbers import Real
from typing import Any

from src.catalog.questions import (
    DIMENSION_QUESTION_IDS,
    DIRECT_ENTRY_QUESTION_ID,
    GATING_QUESTION_ID,
    Question,
    QuestionCatalog,
    get_catalog,
)
from src.engine import validator
from src.errors import MalformedResponseError
from src.models.conversation import ConversationState
from src.models.responses import Response
from src.settings import MAX_MBTI_ATTEMPTS

logger = logging.getLogger(__name__)


# ── Structural validation ─────────────────────────────────────────────────


def build_response(question: Question, value: Any) -> Response | None:
    """Check ``value`` against the question kind and wrap it.

    Returns None for an empty submission (blank text, no selection),
    which callers treat as a no-op.  Raises ``MalformedResponseError``
    when the shape does not match; nothing is coerced.
    """
    if question.kind in ("single-select", "free-text"):
        if not isinstance(value, str):
            raise MalformedResponseError(
                f"{question.id} expects text, got {type(value).__name__}"
            )
        text = value.strip()
        return Response.single(text) if text else None

    if question.kind == "multi-select":
        if isinstance(value, (str, bytes)) or not isinstance(value, Collection):
            raise MalformedResponseError(
                f"{question.id} expects a collection of options, got {type(value).__name__}"
            )
        selected: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise MalformedResponseError(
                    f"{question.id} selections must be text, got {type(item).__name__}"
                )
            item = item.strip()
            if item and item not in selected:
                selected.append(item)
        return Response.multi(selected) if selected else None

    # slider
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedResponseError(
            f"{question.id} expects a number, got {type(value).__name__}"
        )
    low, high = question.scale  # type: ignore[misc]
    if not low <= value <= high:
        raise MalformedResponseError(
            f"{question.id} expects a value between {low:g} and {high:g}, got {value}"
        )
    return Response.slider(value)


def _indicates_known_type(answer: str) -> bool:
    return answer.strip().lower().startswith("yes")


# ── Transitions ───────────────────────────────────────────────────────────


def start_assessment(catalog: QuestionCatalog | None = None) -> ConversationState:
    """Begin a new assessment at the first catalog question."""
    catalog = catalog or get_catalog()
    first = catalog.first()
    return ConversationState(current_question_id=first.id, history=(first.id,))


def current_question(
    state: ConversationState, catalog: QuestionCatalog | None = None
) -> Question | None:
    """The question awaiting an answer, or None once complete."""
    if state.current_question_id is None:
        return None
    return (catalog or get_catalog()).get(state.current_question_id)


def _advance(
    state: ConversationState,
    next_question: Question | None,
    responses: dict[str, Response],
    **changes: Any,
) -> ConversationState:
    """Move forward to ``next_question`` (or to Complete when None)."""
    notice = changes.pop("notice", None)
    base = replace(
        state,
        responses=responses,
        pending_selection=(),
        notice=notice,
        **changes,
    )
    if next_question is None:
        logger.info("Assessment complete after %d questions", len(base.history))
        return replace(base, current_question_id=None)

    logger.debug("Advancing %s -> %s", state.current_question_id, next_question.id)
    return replace(
        base,
        current_question_id=next_question.id,
        history=base.history + (next_question.id,),
    )


def submit_answer(
    state: ConversationState,
    value: Any,
    catalog: QuestionCatalog | None = None,
) -> ConversationState:
    """Record an answer to the current question and move on.

    ``value`` may be None on a multi-select question to submit the
    pending toggled selection.  Empty submissions return ``state``
    unchanged.
    """
    catalog = catalog or get_catalog()
    question = current_question(state, catalog)
    if question is None:
        raise MalformedResponseError("The assessment is already complete")

    if value is None and question.kind == "multi-select":
        value = state.pending_selection
    response = build_response(question, value)
    if response is None:
        return state

    responses = dict(state.responses)

    if question.id == GATING_QUESTION_ID:
        responses[question.id] = response
        knows = _indicates_known_type(response.value)
        target = DIRECT_ENTRY_QUESTION_ID if knows else DIMENSION_QUESTION_IDS[0]
        return _advance(
            state,
            catalog.get(target),
            responses,
            knows_own_type=knows,
            invalid_mbti_attempts=0,
        )

    if question.id == DIRECT_ENTRY_QUESTION_ID:
        return _submit_type_code(state, response.value, responses, catalog)

    responses[question.id] = response
    return _advance(
        state,
        catalog.next_eligible(question.id, skip_conditional=state.knows_own_type),
        responses,
    )


def _submit_type_code(
    state: ConversationState,
    raw_code: str,
    responses: dict[str, Response],
    catalog: QuestionCatalog,
) -> ConversationState:
    result = validator.validate(raw_code)
    if result.is_valid:
        responses[DIRECT_ENTRY_QUESTION_ID] = Response.single(result.normalized)
        return _advance(
            state,
            catalog.next_eligible(DIRECT_ENTRY_QUESTION_ID, skip_conditional=True),
            responses,
            knows_own_type=True,
            invalid_mbti_attempts=0,
        )

    # Invalid codes are never recorded.
    responses.pop(DIRECT_ENTRY_QUESTION_ID, None)
    attempts = state.invalid_mbti_attempts + 1
    if attempts < MAX_MBTI_ATTEMPTS:
        logger.debug("Invalid MBTI code %r (attempt %d), re-prompting", raw_code, attempts)
        return replace(
            state,
            responses=responses,
            invalid_mbti_attempts=attempts,
            pending_selection=(),
            notice=validator.FORMAT_HINT.format(raw=raw_code),
        )

    logger.info("Invalid MBTI code on attempt %d, rerouting to dimension questions", attempts)
    return _advance(
        state,
        catalog.get(DIMENSION_QUESTION_IDS[0]),
        responses,
        knows_own_type=False,
        invalid_mbti_attempts=0,
        notice=validator.REROUTE_NOTICE,
    )


def go_back(state: ConversationState) -> ConversationState:
    """Undo the most recent forward step.

    The question returned to loses its recorded answer, so the user
    re-answers it from blank.  At the first question this is a no-op.
    """
    if not state.can_go_back:
        return state

    responses = dict(state.responses)
    if state.is_complete:
        history = state.history
    else:
        responses.pop(state.history[-1], None)
        history = state.history[:-1]
    target = history[-1]
    responses.pop(target, None)

    logger.debug("Going back %s -> %s", state.current_question_id, target)
    return replace(
        state,
        current_question_id=target,
        history=history,
        responses=responses,
        invalid_mbti_attempts=0,
        pending_selection=(),
        notice=None,
    )


def toggle_option(
    state: ConversationState,
    option: str,
    catalog: QuestionCatalog | None = None,
) -> ConversationState:
    """Add or remove one option from the pending multi-select answer."""
    question = current_question(state, catalog)
    if question is None or question.kind != "multi-select":
        raise MalformedResponseError("The current question does not take multiple selections")
    if option not in question.options:
        raise MalformedResponseError(f"{option!r} is not an option of {question.id}")

    if option in state.pending_selection:
        pending = tuple(o for o in state.pending_selection if o != option)
    else:
        pending = state.pending_selection + (option,)
    return replace(state, pending_selection=pending)

"""The engine's own conversation state value.

Immutable, passed into and returned from every engine call; nothing
else mutates it.  It round-trips through plain dicts so a session host
can checkpoint it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.models.responses import Response, responses_from_dict, responses_to_dict


@dataclass(frozen=True)
class ConversationState:
    """One in-progress assessment.

    ``history[-1]`` is the question currently asked (or, once complete,
    the last question answered).  ``notice`` holds re-prompt or reroute
    text produced by the transition that returned this state.
    """

    current_question_id: str | None
    history: tuple[str, ...] = ()
    responses: dict[str, Response] = field(default_factory=dict)
    knows_own_type: bool = False
    invalid_mbti_attempts: int = 0
    pending_selection: tuple[str, ...] = ()
    notice: str | None = None

    @property
    def is_complete(self) -> bool:
        return self.current_question_id is None

    @property
    def can_go_back(self) -> bool:
        if self.is_complete:
            return bool(self.history)
        return len(self.history) > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_question_id": self.current_question_id,
            "history": list(self.history),
            "responses": responses_to_dict(self.responses),
            "knows_own_type": self.knows_own_type,
            "invalid_mbti_attempts": self.invalid_mbti_attempts,
            "pending_selection": list(self.pending_selection),
            "notice": self.notice,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationState:
        return cls(
            current_question_id=data.get("current_question_id"),
            history=tuple(data.get("history", ())),
            responses=responses_from_dict(data.get("responses", {})),
            knows_own_type=bool(data.get("knows_own_type", False)),
            invalid_mbti_attempts=int(data.get("invalid_mbti_attempts", 0)),
            pending_selection=tuple(data.get("pending_selection", ())),
            notice=data.get("notice"),
        )

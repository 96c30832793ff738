"""Tagged-union response values keyed by question id.

Three shapes cover every question kind:
  - ``single`` — a string (single-select and free-text answers)
  - ``multi``  — an ordered tuple of distinct strings (multi-select)
  - ``slider`` — a number inside the question's declared scale
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

ResponseKind = Literal["single", "multi", "slider"]


@dataclass(frozen=True)
class Response:
    """One recorded answer."""

    kind: ResponseKind
    value: Any

    @classmethod
    def single(cls, value: str) -> Response:
        return cls("single", value)

    @classmethod
    def multi(cls, values: tuple[str, ...] | list[str]) -> Response:
        return cls("multi", tuple(values))

    @classmethod
    def slider(cls, value: float | int) -> Response:
        return cls("slider", value)

    def as_text(self) -> str:
        """Render the answer the way it appears in the chat transcript."""
        if self.kind == "multi":
            return ", ".join(self.value)
        if self.kind == "slider":
            return f"{self.value:g}"
        return str(self.value)

    def to_dict(self) -> dict[str, Any]:
        value = list(self.value) if self.kind == "multi" else self.value
        return {"kind": self.kind, "value": value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Response:
        kind = data["kind"]
        if kind == "multi":
            return cls.multi(data["value"])
        if kind not in ("single", "slider"):
            raise ValueError(f"Unknown response kind: {kind!r}")
        return cls(kind, data["value"])


Responses = dict[str, Response]


def responses_to_dict(responses: Responses) -> dict[str, dict[str, Any]]:
    return {qid: r.to_dict() for qid, r in responses.items()}


def responses_from_dict(data: dict[str, dict[str, Any]]) -> Responses:
    return {qid: Response.from_dict(r) for qid, r in data.items()}

"""Question catalog — the ordered, immutable questionnaire definition.

The catalog is read from a versioned JSON asset (``data/questions.json``)
once per process and cached.  Loading validates the whole asset up front
so a broken catalog fails at start-up rather than mid-conversation.

The module also owns the *id contract*: which question ids drive
branching and which ones feed each profile field.
"""

from __future__ import annotations

import functools
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Literal

from src.errors import UnknownQuestionError
from src.settings import PERMA_MAX_SCORE, PERMA_MIN_SCORE

logger = logging.getLogger(__name__)

QuestionKind = Literal["single-select", "multi-select", "slider", "free-text"]
QUESTION_KINDS: frozenset[str] = frozenset(
    {"single-select", "multi-select", "slider", "free-text"}
)

# ── Id contract ───────────────────────────────────────────────────────────
NAME_QUESTION_ID = "name"
GATING_QUESTION_ID = "mbti_know"
DIRECT_ENTRY_QUESTION_ID = "mbti_input"
DIMENSION_QUESTION_IDS: tuple[str, ...] = ("mbti_ei", "mbti_sn", "mbti_tf", "mbti_jp")

PERMA_DIMENSIONS: tuple[str, ...] = (
    "positiveEmotion",
    "engagement",
    "relationships",
    "meaning",
    "accomplishment",
)
PERMA_SCORE_IDS: dict[str, str] = {dim: f"perma_{dim}" for dim in PERMA_DIMENSIONS}
PERMA_DETAIL_IDS: dict[str, str] = {
    "positiveEmotion": "perma_happy_events",
    "engagement": "perma_flow_activity",
    "relationships": "perma_important_relationships",
    "meaning": "perma_meaning_sources",
    "accomplishment": "perma_proud_achievement",
}
INTERESTS_QUESTION_ID = "primary_interests"
GOALS_QUESTION_ID = "main_goals"
CHALLENGE_QUESTION_ID = "challenge_preference"

_REQUIRED_IDS: tuple[str, ...] = (
    GATING_QUESTION_ID,
    DIRECT_ENTRY_QUESTION_ID,
    *DIMENSION_QUESTION_IDS,
    *PERMA_SCORE_IDS.values(),
)


@dataclass(frozen=True)
class Question:
    """A single catalog entry."""

    id: str
    prompt: str
    kind: QuestionKind
    options: tuple[str, ...] = ()
    scale: tuple[float, float] | None = None
    resolves: tuple[str, ...] = ()  # dimension letters, aligned with options

    @property
    def is_select(self) -> bool:
        return self.kind in ("single-select", "multi-select")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "prompt": self.prompt, "kind": self.kind}
        if self.options:
            data["options"] = list(self.options)
        if self.scale is not None:
            data["scale"] = list(self.scale)
        return data


class QuestionCatalog:
    """Ordered lookup over a fixed tuple of questions.

    Has no side effects; the only failure mode is asking about an id the
    catalog does not hold, which raises ``UnknownQuestionError``.
    """

    def __init__(self, questions: tuple[Question, ...], version: str = ""):
        self._questions = questions
        self._index = {q.id: i for i, q in enumerate(questions)}
        self.version = version
        self._validate()

    def _validate(self) -> None:
        if len(self._index) != len(self._questions):
            seen: set[str] = set()
            for q in self._questions:
                if q.id in seen:
                    raise ValueError(f"Duplicate question id in catalog: {q.id}")
                seen.add(q.id)

        for q in self._questions:
            if q.kind not in QUESTION_KINDS:
                raise ValueError(f"Question {q.id} has unknown kind {q.kind!r}")
            if q.is_select and len(q.options) < 2:
                raise ValueError(f"Question {q.id} needs at least two options")
            if q.kind == "slider":
                if q.scale is None or q.scale[0] >= q.scale[1]:
                    raise ValueError(f"Slider {q.id} needs a [min, max] scale with min < max")

        missing = [qid for qid in _REQUIRED_IDS if qid not in self._index]
        if missing:
            raise ValueError(f"Catalog is missing required questions: {', '.join(missing)}")

        for qid in DIMENSION_QUESTION_IDS:
            q = self.get(qid)
            if q.kind != "single-select" or len(q.resolves) != len(q.options):
                raise ValueError(
                    f"Dimension question {qid} must be single-select with one letter per option"
                )
        for qid in PERMA_SCORE_IDS.values():
            q = self.get(qid)
            if q.kind != "slider":
                raise ValueError(f"PERMA question {qid} must be a slider")
            low, high = q.scale  # type: ignore[misc]
            if low < PERMA_MIN_SCORE or high > PERMA_MAX_SCORE:
                raise ValueError(
                    f"PERMA slider {qid} scale [{low:g}, {high:g}] falls outside "
                    f"[{PERMA_MIN_SCORE:g}, {PERMA_MAX_SCORE:g}]"
                )

    # =========================================================================
    # Public API
    # =========================================================================

    def total(self) -> int:
        return len(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._index

    def question_at(self, index: int) -> Question:
        if not 0 <= index < len(self._questions):
            raise UnknownQuestionError(index)
        return self._questions[index]

    def index_of(self, question_id: str) -> int:
        try:
            return self._index[question_id]
        except KeyError:
            raise UnknownQuestionError(question_id) from None

    def get(self, question_id: str) -> Question:
        return self._questions[self.index_of(question_id)]

    def first(self) -> Question:
        return self._questions[0]

    def is_conditional(self, question_id: str) -> bool:
        """True for the dimension questions skipped when the type is known."""
        self.index_of(question_id)
        return question_id in DIMENSION_QUESTION_IDS

    def next_eligible(self, after_id: str, skip_conditional: bool) -> Question | None:
        """Return the next question in catalog order, or None at the end.

        Conditional questions are passed over when ``skip_conditional`` is
        set.  The direct-entry question is only reached by an explicit jump
        from the gating question, so ordinary traversal passes over it too.
        """
        for question in self._questions[self.index_of(after_id) + 1:]:
            if question.id == DIRECT_ENTRY_QUESTION_ID:
                continue
            if skip_conditional and self.is_conditional(question.id):
                continue
            return question
        return None


# ── Loading ───────────────────────────────────────────────────────────────


def _parse_question(raw: dict[str, Any]) -> Question:
    try:
        scale = raw.get("scale")
        return Question(
            id=raw["id"],
            prompt=raw["prompt"],
            kind=raw["kind"],
            options=tuple(raw.get("options", ())),
            scale=(float(scale[0]), float(scale[1])) if scale is not None else None,
            resolves=tuple(letter.upper() for letter in raw.get("resolves", ())),
        )
    except (KeyError, IndexError, TypeError) as e:
        raise ValueError(f"Malformed question entry {raw!r}: {e}") from e


def parse_catalog(data: dict[str, Any]) -> QuestionCatalog:
    """Build a catalog from the decoded JSON document."""
    questions = tuple(_parse_question(q) for q in data.get("questions", []))
    if not questions:
        raise ValueError("Question catalog is empty")
    return QuestionCatalog(questions, version=str(data.get("version", "")))


def load_catalog(path: str | Path) -> QuestionCatalog:
    """Read and validate a catalog file."""
    catalog_path = Path(path)
    if not catalog_path.is_file():
        raise FileNotFoundError(f"Question catalog not found: {catalog_path}")
    with open(catalog_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Error parsing catalog file {catalog_path}: {e}") from e
    catalog = parse_catalog(data)
    logger.info(
        "Question catalog v%s loaded with %d questions", catalog.version, catalog.total()
    )
    return catalog


@functools.lru_cache(maxsize=1)
def get_catalog() -> QuestionCatalog:
    """Return the process-wide catalog (loaded on first use)."""
    from src import settings

    return load_catalog(settings.QUESTION_CATALOG_PATH)


def reset() -> None:
    """Drop the cached catalog (tests)."""
    get_catalog.cache_clear()

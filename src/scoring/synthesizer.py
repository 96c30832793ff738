"""Profile synthesizer — turns a completed response map into a Profile.

Pure and deterministic: the same responses always produce an equal
Profile.  The catalog is consulted only for the id contract and for
which letter each dimension option resolves to, never for ordering.

  - PERMA scores are the self-reported slider values, unchanged.
  - The type comes from the validated direct-entry code when present,
    otherwise from the four dimension answers (one letter each).
  - Free-form and multi-select answers are copied through with light
    normalisation (trim, de-duplicate).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from src.catalog.questions import (
    CHALLENGE_QUESTION_ID,
    DIMENSION_QUESTION_IDS,
    DIRECT_ENTRY_QUESTION_ID,
    GOALS_QUESTION_ID,
    INTERESTS_QUESTION_ID,
    NAME_QUESTION_ID,
    PERMA_DETAIL_IDS,
    PERMA_DIMENSIONS,
    PERMA_SCORE_IDS,
    QuestionCatalog,
    get_catalog,
)
from src.engine.validator import MBTI_TYPES
from src.errors import IncompleteProfileError
from src.models.profile import Profile
from src.models.responses import Response

UNRESOLVED_LETTER = "_"


def _resolve_letter(
    response: Response | None, letters: tuple[str, ...], options: tuple[str, ...]
) -> str | None:
    """Map a dimension answer to its letter, or None if it cannot be resolved."""
    if response is None or response.kind != "single":
        return None
    answer = str(response.value).strip()
    if answer.upper() in letters:
        return answer.upper()
    for option, letter in zip(options, letters, strict=True):
        if answer.lower() == option.lower():
            return letter
    return None


def _dimension_letters(
    responses: Mapping[str, Response], catalog: QuestionCatalog
) -> list[str | None]:
    letters = []
    for qid in DIMENSION_QUESTION_IDS:
        question = catalog.get(qid)
        letters.append(_resolve_letter(responses.get(qid), question.resolves, question.options))
    return letters


def _direct_entry_code(responses: Mapping[str, Response]) -> str | None:
    response = responses.get(DIRECT_ENTRY_QUESTION_ID)
    if response is None or response.kind != "single":
        return None
    code = str(response.value).strip().upper()
    return code if code in MBTI_TYPES else None


def resolve_mbti_type(
    responses: Mapping[str, Response], catalog: QuestionCatalog | None = None
) -> str:
    """Return the 4-letter type or raise ``IncompleteProfileError``."""
    code = _direct_entry_code(responses)
    if code is not None:
        return code

    letters = _dimension_letters(responses, catalog or get_catalog())
    unresolved = [
        qid
        for qid, letter in zip(DIMENSION_QUESTION_IDS, letters, strict=True)
        if letter is None
    ]
    if unresolved:
        raise IncompleteProfileError(
            f"Cannot resolve MBTI type, unanswered dimensions: {', '.join(unresolved)}"
        )
    return "".join(letters)  # type: ignore[arg-type]


def partial_type_code(
    responses: Mapping[str, Response], catalog: QuestionCatalog | None = None
) -> str:
    """Preview the type mid-assessment, e.g. ``E_F_``."""
    code = _direct_entry_code(responses)
    if code is not None:
        return code
    letters = _dimension_letters(responses, catalog or get_catalog())
    return "".join(letter or UNRESOLVED_LETTER for letter in letters)


def communication_style_for(mbti_type: str) -> str:
    """Thinking types get direct/analytical, feeling types supportive/creative."""
    extravert = mbti_type.startswith("E")
    if "T" in mbti_type:
        return "direct" if extravert else "analytical"
    return "supportive" if extravert else "creative"


def _challenge_level(response: Response | None) -> str:
    answer = str(response.value).lower() if response is not None else ""
    if "stretch" in answer:
        return "high"
    if "manageable" in answer:
        return "low"
    return "medium"


def _normalise_list(response: Response | None) -> tuple[str, ...]:
    if response is None:
        return ()
    values = response.value if response.kind == "multi" else (response.value,)
    seen: set[str] = set()
    out: list[str] = []
    for value in values:
        item = str(value).strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            out.append(item)
    return tuple(out)


def _text(response: Response | None) -> str:
    return str(response.value).strip() if response is not None else ""


def _perma_scores(responses: Mapping[str, Response]) -> dict[str, float]:
    scores: dict[str, float] = {}
    for dim in PERMA_DIMENSIONS:
        response = responses.get(PERMA_SCORE_IDS[dim])
        if response is None or response.kind != "slider":
            raise IncompleteProfileError(f"Missing PERMA rating for {dim}")
        scores[dim] = response.value
    return scores


def _perma_details(responses: Mapping[str, Response]) -> dict[str, Any]:
    details: dict[str, Any] = {}
    for dim in PERMA_DIMENSIONS:
        response = responses.get(PERMA_DETAIL_IDS[dim])
        if response is None:
            continue
        details[dim] = _normalise_list(response) if response.kind == "multi" else _text(response)
    return details


def synthesize_profile(
    responses: Mapping[str, Response], catalog: QuestionCatalog | None = None
) -> Profile:
    """Build the Profile from a completed response map.

    Raises
    ------
    IncompleteProfileError
        If a PERMA rating or an MBTI dimension cannot be read.
    """
    mbti_type = resolve_mbti_type(responses, catalog)
    goals = _normalise_list(responses.get(GOALS_QUESTION_ID))

    return Profile(
        name=_text(responses.get(NAME_QUESTION_ID)),
        mbti_type=mbti_type,
        perma_scores=_perma_scores(responses),
        interests=_normalise_list(responses.get(INTERESTS_QUESTION_ID)),
        communication_style=communication_style_for(mbti_type),
        primary_goal=goals[0] if goals else "",
        goals=goals,
        challenge_level=_challenge_level(responses.get(CHALLENGE_QUESTION_ID)),
        perma_details=_perma_details(responses),
    )


# ── Caller views (plain field selection) ──────────────────────────────────


def wellness_configuration(profile: Profile) -> dict[str, Any]:
    """Fields the wellness features read from a profile."""
    return {
        "perma_scores": dict(profile.perma_scores),
        "primary_goal": profile.primary_goal,
        "goals": list(profile.goals),
        "challenge_level": profile.challenge_level,
    }


def content_configuration(profile: Profile) -> dict[str, Any]:
    """Fields the content recommender reads from a profile."""
    return {
        "mbti_type": profile.mbti_type,
        "interests": list(profile.interests),
        "communication_style": profile.communication_style,
    }

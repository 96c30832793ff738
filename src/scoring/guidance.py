"""PERMA guidance — turns a profile's scores into a short focus narrative.

Algorithm:
  1. Focus dimensions are those scoring below the focus threshold (7),
     kept in the fixed PERMA order, which breaks every tie below.
  2. If the user's type has a preferred growth dimension among them, it
     comes first, framed around the type.
  3. Up to two more focus dimensions follow in PERMA order.
  4. With no focus dimensions at all, a single affirming message.

Each entry quotes the user's own detail answer for that dimension when
one was captured, and falls back to a generic prompt otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from src.catalog.questions import PERMA_DIMENSIONS
from src.settings import is_focus_score, is_strength_score

MAX_SECONDARY_ENTRIES = 2

DIMENSION_LABELS: dict[str, str] = {
    "positiveEmotion": "Positive Emotion",
    "engagement": "Engagement",
    "relationships": "Relationships",
    "meaning": "Meaning",
    "accomplishment": "Accomplishment",
}

GENERIC_TIPS: dict[str, str] = {
    "positiveEmotion": "Let's explore what brings you joy and positivity.",
    "engagement": "Let's find activities that help you feel 'in the zone'.",
    "relationships": "Let's talk about your connections and support network.",
    "meaning": "Let's reflect on what gives your life purpose and meaning.",
    "accomplishment": "Let's celebrate your achievements and set new goals.",
}

DETAIL_TIPS: dict[str, str] = {
    "positiveEmotion": "Remember what made you happy recently: {detail}. Try to bring more of that into your day.",
    "engagement": "You feel engaged when doing: {detail}. Try to make time for this activity.",
    "relationships": "Your important relationships: {detail}. Consider reaching out to one of them.",
    "meaning": "Sources of meaning for you: {detail}. Reflect on how to nurture these.",
    "accomplishment": "You are proud of: {detail}. Celebrate your achievements and set new goals.",
}

# One preferred growth dimension per type.
MBTI_GROWTH_FOCUS: dict[str, str] = {
    "INTJ": "meaning",
    "INTP": "engagement",
    "ENTJ": "accomplishment",
    "ENTP": "engagement",
    "INFJ": "meaning",
    "INFP": "meaning",
    "ENFJ": "relationships",
    "ENFP": "engagement",
    "ISTJ": "accomplishment",
    "ISFJ": "relationships",
    "ESTJ": "accomplishment",
    "ESFJ": "relationships",
    "ISTP": "engagement",
    "ISFP": "positiveEmotion",
    "ESTP": "engagement",
    "ESFP": "positiveEmotion",
}

AFFIRMATION = (
    "You're doing well across all happiness dimensions! "
    "Keep nurturing what works for you."
)

SubAnswers = Mapping[str, "str | Sequence[str]"]


def focus_areas(scores: Mapping[str, float]) -> list[str]:
    """Dimensions below the focus threshold, in PERMA order."""
    return [dim for dim in PERMA_DIMENSIONS if dim in scores and is_focus_score(scores[dim])]


def strengths(scores: Mapping[str, float]) -> list[str]:
    """Dimensions at or above the strength threshold, in PERMA order."""
    return [dim for dim in PERMA_DIMENSIONS if dim in scores and is_strength_score(scores[dim])]


def lowest_dimension(scores: Mapping[str, float]) -> str:
    """The single lowest-scoring dimension; ties go to the earlier one in PERMA order."""
    present = [dim for dim in PERMA_DIMENSIONS if dim in scores]
    if not present:
        raise ValueError("No PERMA scores given")
    return min(present, key=lambda dim: scores[dim])


def focus_summary(scores: Mapping[str, float]) -> str:
    """One-line focus hint for the lowest dimension, e.g. for a dashboard card."""
    dim = lowest_dimension(scores)
    return f"Focus area: {DIMENSION_LABELS[dim]}. {GENERIC_TIPS[dim]}"


def _detail_text(detail: str | Sequence[str] | None) -> str:
    if detail is None:
        return ""
    if isinstance(detail, str):
        return detail.strip()
    return ", ".join(item.strip() for item in detail if item.strip())


def dimension_tip(dimension: str, sub_answers: SubAnswers | None = None) -> str:
    """Tip for one dimension, quoting the user's detail answer if any."""
    detail = _detail_text((sub_answers or {}).get(dimension))
    if detail:
        return DETAIL_TIPS[dimension].format(detail=detail)
    return GENERIC_TIPS[dimension]


def guidance_entries(
    scores: Mapping[str, float],
    mbti_type: str | None = None,
    sub_answers: SubAnswers | None = None,
) -> list[str]:
    """Ordered guidance entries; empty when nothing needs focus."""
    low_dims = focus_areas(scores)
    entries: list[str] = []

    code = mbti_type.strip().upper() if mbti_type else ""
    growth = MBTI_GROWTH_FOCUS.get(code)
    if growth in low_dims:
        entries.append(
            f"Based on your MBTI ({code}), focusing on "
            f'"{DIMENSION_LABELS[growth]}" may help you feel more fulfilled. '
            f"{dimension_tip(growth, sub_answers)}"
        )
        low_dims.remove(growth)

    for dim in low_dims[:MAX_SECONDARY_ENTRIES]:
        lead = "could also boost" if entries else "could boost"
        entries.append(
            f'Improving "{DIMENSION_LABELS[dim]}" {lead} your happiness. '
            f"{dimension_tip(dim, sub_answers)}"
        )
    return entries


def generate_guidance(
    scores: Mapping[str, float],
    mbti_type: str | None = None,
    sub_answers: SubAnswers | None = None,
) -> str:
    """Build the guidance narrative; never empty.

    Parameters
    ----------
    scores : mapping
        PERMA dimension → 0–10 score.
    mbti_type : str, optional
        Four-letter type; enables the growth-dimension affinity entry.
    sub_answers : mapping, optional
        Dimension → the user's detail answer (text or list of choices).

    Returns
    -------
    str
        Up to three entries separated by blank lines, or the affirming
        message when every score is at or above the focus threshold.
    """
    entries = guidance_entries(scores, mbti_type, sub_answers)
    if not entries:
        return AFFIRMATION
    return "\n\n".join(entries)

"""MBTI code validation for the direct-entry branch.

Normalization is trim + uppercase; validity is plain membership in the
16 canonical codes.  There is no fuzzy matching.
"""

from __future__ import annotations

from typing import NamedTuple

MBTI_TYPES: frozenset[str] = frozenset(
    {
        "INTJ", "INTP", "ENTJ", "ENTP",
        "INFJ", "INFP", "ENFJ", "ENFP",
        "ISTJ", "ISFJ", "ESTJ", "ESFJ",
        "ISTP", "ISFP", "ESTP", "ESFP",
    }
)

FORMAT_HINT = (
    "Hmm, \"{raw}\" doesn't look like an MBTI type. Please enter four letters, "
    "one from each pair: E/I, S/N, T/F, J/P (for example INTJ or ENFP)."
)
REROUTE_NOTICE = (
    "No problem, let's work it out together with four quick questions instead."
)


class MbtiValidation(NamedTuple):
    normalized: str
    is_valid: bool


def validate(raw_input: str) -> MbtiValidation:
    """Normalize a typed code and check it against the canonical set."""
    normalized = raw_input.strip().upper()
    return MbtiValidation(normalized, normalized in MBTI_TYPES)

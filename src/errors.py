"""Integrity errors raised by the assessment engine.

None of these are user-facing text.  An invalid MBTI code is not an
error at all; it is handled by the retry-then-reroute transition.
"""

from __future__ import annotations


class AssessmentError(Exception):
    """Base class for every engine integrity signal."""


class UnknownQuestionError(AssessmentError, KeyError):
    """A question id that the catalog does not contain (wiring bug)."""

    def __init__(self, question_id: object):
        self.question_id = question_id
        super().__init__(f"Unknown question id: {question_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class MalformedResponseError(AssessmentError, ValueError):
    """A submitted value does not match the current question's kind."""


class IncompleteProfileError(AssessmentError):
    """Synthesis was asked for a profile the responses cannot support."""

"""Profile — the synthesized output handed to callers by value."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src import settings


@dataclass(frozen=True)
class Profile:
    """Personality / wellness profile built once per completed assessment.

    ``interests`` keeps the full normalised list for persistence;
    ``display_interests`` is the capped view for presentation.
    """

    name: str
    mbti_type: str
    perma_scores: dict[str, float]
    interests: tuple[str, ...] = ()
    communication_style: str = ""
    primary_goal: str = ""
    goals: tuple[str, ...] = ()
    challenge_level: str = "medium"
    perma_details: dict[str, Any] = field(default_factory=dict)

    @property
    def display_interests(self) -> tuple[str, ...]:
        return self.interests[: settings.INTEREST_DISPLAY_LIMIT]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "mbti_type": self.mbti_type,
            "perma_scores": dict(self.perma_scores),
            "interests": list(self.interests),
            "display_interests": list(self.display_interests),
            "communication_style": self.communication_style,
            "primary_goal": self.primary_goal,
            "goals": list(self.goals),
            "challenge_level": self.challenge_level,
            "perma_details": {
                k: list(v) if isinstance(v, tuple) else v
                for k, v in self.perma_details.items()
            },
        }

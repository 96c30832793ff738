"""Plain-text renderings used in the chat transcript."""

from __future__ import annotations

from src.catalog.questions import PERMA_DIMENSIONS, Question
from src.models.profile import Profile
from src.scoring.guidance import DIMENSION_LABELS, lowest_dimension, strengths


def format_question(question: Question) -> str:
    """The bot's chat message for a question, options numbered from 1."""
    lines = [question.prompt]
    if question.options:
        lines.extend(f"  {i}. {option}" for i, option in enumerate(question.options, 1))
    if question.kind == "multi-select":
        lines.append("  (choose one or more)")
    if question.scale is not None:
        low, high = question.scale
        lines.append(f"  (rate from {low:g} to {high:g})")
    return "\n".join(lines)


def format_profile(profile: Profile, guidance: str) -> str:
    """Format a finished profile and its guidance for display."""
    greeting = f"Thank you, {profile.name}!" if profile.name else "Thank you!"
    lines = [
        greeting,
        "",
        f"  Personality type:     {profile.mbti_type}",
        f"  Communication style:  {profile.communication_style}",
    ]
    if profile.primary_goal:
        lines.append(f"  Primary goal:         {profile.primary_goal}")
    if profile.display_interests:
        lines.append(f"  Interests:            {', '.join(profile.display_interests)}")

    lines.append("")
    lines.append("  Happiness (PERMA) scores:")
    for dim in PERMA_DIMENSIONS:
        score = profile.perma_scores[dim]
        filled = int(round(score))
        bar = "█" * filled + "░" * (10 - filled)
        lines.append(f"    {DIMENSION_LABELS[dim]:16s} {score:4.1f}/10  {bar}")

    top = strengths(profile.perma_scores)
    if top:
        lines.append(f"  Strengths: {', '.join(DIMENSION_LABELS[d] for d in top)}")
    growth = lowest_dimension(profile.perma_scores)
    lines.append(f"  Growth area: {DIMENSION_LABELS[growth]}")

    lines.append("")
    lines.append(guidance)
    return "\n".join(lines)

"""Project-wide settings and shared assessment constants.

All environment-dependent values are read **lazily** on first access
(not at import time) and cached via ``functools.lru_cache``.  Call
``reset()`` in tests to clear the cache after changing env vars —
no ``importlib.reload`` required.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING, Final

from src.paths import CATALOG_PATH


def _float_env(name: str, default: float) -> float:
    """Parse float environment values with a safe fallback."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    """Parse positive integer environment values with a safe fallback."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


# ── Constants (never change at runtime) ──────────────────────────────────
# A user is asked for a free-text type code at most this many times
# before being rerouted into the dimension questions.
MAX_MBTI_ATTEMPTS: Final[int] = 2

PERMA_MIN_SCORE: Final[float] = 0.0
PERMA_MAX_SCORE: Final[float] = 10.0


# ── Lazy settings cache ──────────────────────────────────────────────────

@functools.lru_cache(maxsize=1)
def _load_settings() -> dict[str, object]:
    """Read env-dependent settings once and cache the result."""
    return {
        "PERMA_FOCUS_THRESHOLD": _float_env("PERMA_FOCUS_THRESHOLD", 7.0),
        "PERMA_STRENGTH_THRESHOLD": _float_env("PERMA_STRENGTH_THRESHOLD", 8.0),
        "INTEREST_DISPLAY_LIMIT": _int_env("INTEREST_DISPLAY_LIMIT", 5),
        "QUESTION_CATALOG_PATH": os.getenv("QUESTION_CATALOG_PATH", str(CATALOG_PATH)),
    }


def reset() -> None:
    """Clear the cached settings — call from tests after monkeypatching env vars."""
    _load_settings.cache_clear()


# Type declarations for static analysis (not set at runtime so
# ``__getattr__`` is invoked on attribute access).
if TYPE_CHECKING:
    PERMA_FOCUS_THRESHOLD: float
    PERMA_STRENGTH_THRESHOLD: float
    INTEREST_DISPLAY_LIMIT: int
    QUESTION_CATALOG_PATH: str


def __getattr__(name: str) -> object:
    """PEP 562 module-level ``__getattr__`` — provides lazy env reads."""
    settings = _load_settings()
    if name in settings:
        return settings[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


# ── Public helpers ────────────────────────────────────────────────────────


def is_focus_score(score: float) -> bool:
    """True when a PERMA score sits below the focus-area threshold."""
    return score < _load_settings()["PERMA_FOCUS_THRESHOLD"]  # type: ignore[operator]


def is_strength_score(score: float) -> bool:
    """True when a PERMA score reaches the strength threshold."""
    return score >= _load_settings()["PERMA_STRENGTH_THRESHOLD"]  # type: ignore[operator]

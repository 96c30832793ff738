"""Centralized path constants for the project.

The question catalog is a versioned data asset shipped alongside the
code; every module resolves it through this file.
"""

from __future__ import annotations

from pathlib import Path

PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
DATA_DIR: Path = PROJECT_ROOT / "data"
CATALOG_PATH: Path = DATA_DIR / "questions.json"

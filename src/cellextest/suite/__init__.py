"""Case tables: loading, fixtures and execution."""
from __future__ import annotations

from pathlib import Path
from typing import List

from .loader import SUITE_SCHEMA, load_suite, parse_suite
from .models import Suite, SuiteOptions, SuiteSetup

TABLES_DIR = Path(__file__).parent / "tables"

__all__ = [
    "SUITE_SCHEMA",
    "Suite",
    "SuiteOptions",
    "SuiteSetup",
    "TABLES_DIR",
    "bundled_suites",
    "load_suite",
    "parse_suite",
    "resolve_suite",
]


def bundled_suites() -> List[str]:
    return sorted(path.stem for path in TABLES_DIR.glob("*.yaml"))


def resolve_suite(name_or_path: str) -> Path:
    """Map a bundled table name or a filesystem path to a table file."""

    candidate = Path(name_or_path).expanduser()
    if candidate.is_file():
        return candidate
    bundled = TABLES_DIR / f"{name_or_path}.yaml"
    if bundled.is_file():
        return bundled
    known = ", ".join(bundled_suites()) or "<none>"
    raise FileNotFoundError(f"No case table '{name_or_path}'. Bundled tables: {known}")

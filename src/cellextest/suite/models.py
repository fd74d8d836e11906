"""Data models for case tables."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from cellextest.core.models import TestCase


@dataclass(frozen=True)
class SuiteSetup:
    login: Optional[str] = None
    provision: Sequence[str] = field(default_factory=tuple)


@dataclass(frozen=True)
class Suite:
    name: str
    cases: Sequence[TestCase]
    description: str = ""
    setup: SuiteSetup = field(default_factory=SuiteSetup)
    path: Optional[Path] = None

    def groups(self) -> tuple[str, ...]:
        seen: list[str] = []
        for case in self.cases:
            if case.group not in seen:
                seen.append(case.group)
        return tuple(seen)


@dataclass(frozen=True)
class SuiteOptions:
    cases: Sequence[str] = field(default_factory=tuple)
    groups: Sequence[str] = field(default_factory=tuple)
    tags: Sequence[str] = field(default_factory=tuple)
    list_only: bool = False

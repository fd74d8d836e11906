"""JSON reporter emitting structured execution results."""
from __future__ import annotations

import datetime as dt
import json
import pathlib
import time
from typing import Any, Dict, Sequence

import click
from jsonschema import validate

from cellextest.core.results import CaseOutcome, SuiteSummary
from cellextest.suite.models import Suite

from .base import Reporter
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION


class JsonReporter(Reporter):
    """Writes results to a JSON file validated against the schema."""

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)
        self._records: list[Dict[str, Any]] = []
        self._suite: Suite | None = None
        self._start_time = 0.0

    def on_start(self, suite: Suite, total: int) -> None:
        self._suite = suite
        self._records.clear()
        self._start_time = time.perf_counter()

    def on_case_result(self, outcome: CaseOutcome, index: int, total: int) -> None:
        self._records.append(_outcome_to_dict(outcome))

    def on_complete(self, outcomes: Sequence[CaseOutcome], summary: SuiteSummary) -> None:
        if self._suite is None:
            return
        payload = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "suite": self._suite.name,
            "summary": {
                "total": summary.total,
                "passed": summary.passed,
                "failed": summary.failed,
                "skipped": summary.skipped,
                "duration_s": time.perf_counter() - self._start_time,
            },
            "groups": [
                {
                    "group": group.group,
                    "total": group.total,
                    "passed": group.passed,
                    "failed": group.failed,
                    "skipped": group.skipped,
                }
                for group in summary.groups
            ],
            "cases": self._records,
        }
        validate(instance=payload, schema=JSON_SCHEMA_V1)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem protection
            raise RuntimeError(f"Failed to write JSON report to {self._path}: {exc}") from exc
        click.echo(f"JSON report written to {self._path}")


def _outcome_to_dict(outcome: CaseOutcome) -> Dict[str, Any]:
    case = outcome.case
    record: Dict[str, Any] = {
        "id": case.id,
        "group": case.group,
        "description": case.description,
        "operation": case.operation.label(),
        "status": outcome.status,
        "duration_ms": outcome.duration_s * 1000,
        "expected": outcome.expected,
        "actual": outcome.actual,
    }
    if outcome.detail:
        record["detail"] = outcome.detail
    if outcome.reason:
        record["reason"] = outcome.reason
    if outcome.mismatches:
        record["mismatches"] = [
            {
                "field": item.field,
                "expected": _jsonify(item.expected),
                "actual": _jsonify(item.actual),
                "rule": item.rule,
            }
            for item in outcome.mismatches
        ]
    return record


def _jsonify(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _jsonify(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonify(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)

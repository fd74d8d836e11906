"""YAML loader and validation for case tables."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from cellextest.core.models import (
    ExpectError,
    Expectation,
    ExpectSuccess,
    Operation,
    SkipCondition,
    TestCase,
)
from cellextest.config import ROLES
from cellextest.errors import CaseTableError

from .fixtures import PROVISIONABLE, known_tokens, template_fields
from .models import Suite, SuiteSetup

_OPERATION_SCHEMA = {
    "type": ["string", "object"],
    "properties": {
        "method": {"type": "string", "enum": ["GET", "POST", "PUT", "PATCH", "DELETE"]},
        "path": {"type": "string"},
        "encoding": {"type": "string", "enum": ["json", "multipart"]},
        "name": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}

SUITE_SCHEMA = {
    "type": "object",
    "required": ["suite", "cases"],
    "properties": {
        "suite": {"type": "string", "minLength": 1},
        "description": {"type": "string"},
        "setup": {
            "type": "object",
            "properties": {
                "login": {"type": "string", "enum": list(ROLES)},
                "provision": {"type": "array", "items": {"type": "string", "enum": list(PROVISIONABLE)}},
            },
            "additionalProperties": False,
        },
        "defaults": {
            "type": "object",
            "properties": {"operation": _OPERATION_SCHEMA},
            "additionalProperties": False,
        },
        "cases": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["id", "group"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "group": {"type": "string", "minLength": 1},
                    "description": {"type": "string"},
                    "operation": _OPERATION_SCHEMA,
                    "payload": {"type": "object"},
                    "expect": {
                        "oneOf": [
                            {"type": "string", "enum": ["success"]},
                            {
                                "type": "object",
                                "properties": {
                                    "success": {"type": "boolean"},
                                    "error": {
                                        "type": "object",
                                        "properties": {
                                            "status": {"type": "integer"},
                                            "code": {"type": "integer"},
                                            "message": {"type": "string", "minLength": 1},
                                        },
                                        "additionalProperties": False,
                                    },
                                },
                                "additionalProperties": False,
                            },
                        ]
                    },
                    "skip_if": {
                        "type": "object",
                        "required": ["status", "reason"],
                        "properties": {
                            "status": {"type": "integer"},
                            "reason": {"type": "string"},
                        },
                        "additionalProperties": False,
                    },
                    "requires": {"type": "array", "items": {"type": "string"}},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "additionalProperties": False,
            },
        },
    },
}
_validator = Draft7Validator(SUITE_SCHEMA)


def load_suite(path: str | Path) -> Suite:
    """Load and validate a case table file."""

    suite_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(suite_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise CaseTableError("Case table must contain a mapping at the top level")
    return parse_suite(raw, path=suite_path)


def parse_suite(raw: Mapping[str, Any], *, path: Optional[Path] = None) -> Suite:
    errors = sorted(_validator.iter_errors(raw), key=lambda e: list(e.path))
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise CaseTableError(f"Case table schema validation failed: {messages}")
    defaults = raw.get("defaults") or {}
    default_operation = _operation_fields(defaults.get("operation"))
    tokens = known_tokens()
    cases: list[TestCase] = []
    seen: set[str] = set()
    for entry in raw["cases"]:
        case = _parse_case(entry, default_operation)
        if case.id in seen:
            raise CaseTableError(f"Duplicate case id '{case.id}'")
        seen.add(case.id)
        _check_tokens(case, tokens)
        cases.append(case)
    setup_raw = raw.get("setup") or {}
    setup = SuiteSetup(
        login=setup_raw.get("login"),
        provision=tuple(setup_raw.get("provision", []) or []),
    )
    return Suite(
        name=raw["suite"],
        description=str(raw.get("description", "")),
        setup=setup,
        cases=tuple(cases),
        path=path,
    )


def _operation_fields(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, str):
        method, _, route = raw.strip().partition(" ")
        if not route:
            raise CaseTableError(f"operation shorthand must be 'METHOD /path' (got {raw!r})")
        return {"method": method.upper(), "path": route.strip()}
    return dict(raw)


def _parse_case(entry: Mapping[str, Any], default_operation: Mapping[str, Any]) -> TestCase:
    case_id = entry["id"]
    fields = dict(default_operation)
    fields.update(_operation_fields(entry.get("operation")))
    try:
        operation = Operation(**fields)
        expectation = _parse_expectation(entry.get("expect", "success"))
    except (TypeError, ValueError) as exc:
        raise CaseTableError(f"Case '{case_id}': {exc}") from exc
    skip_raw = entry.get("skip_if")
    skip = SkipCondition(status=skip_raw["status"], reason=skip_raw["reason"]) if skip_raw else None
    return TestCase(
        id=case_id,
        group=entry["group"],
        description=str(entry.get("description", "")),
        operation=operation,
        payload=dict(entry.get("payload") or {}),
        expectation=expectation,
        skip=skip,
        requires=tuple(entry.get("requires", []) or []),
        tags=tuple(entry.get("tags", []) or []),
    )


def _parse_expectation(raw: Any) -> Expectation:
    if raw == "success":
        return ExpectSuccess()
    success = raw.get("success")
    error = raw.get("error")
    if success and error is not None:
        raise ValueError("a success expectation cannot declare error fields")
    if error is None:
        if success is False:
            raise ValueError("expect.success: false requires an error block")
        return ExpectSuccess()
    return ExpectError(
        status=error.get("status"),
        code=error.get("code"),
        message=error.get("message"),
    )


def _check_tokens(case: TestCase, tokens: frozenset[str]) -> None:
    try:
        used = set(template_fields(case.operation.path)) | set(template_fields(case.payload))
    except ValueError as exc:
        raise CaseTableError(f"Case '{case.id}' has a malformed placeholder: {exc}") from exc
    used |= set(case.requires)
    unknown = sorted(used - tokens)
    if unknown:
        available = ", ".join(sorted(tokens))
        raise CaseTableError(f"Case '{case.id}' references unknown token(s) {unknown}. Available tokens: {available}")

"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "cellextest report",
    "type": "object",
    "required": ["schema_version", "generated_at", "suite", "summary", "groups", "cases"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "suite": {"type": "string"},
        "summary": {
            "type": "object",
            "required": ["total", "passed", "failed", "skipped", "duration_s"],
            "properties": {
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "skipped": {"type": "integer"},
                "duration_s": {"type": "number"},
            },
        },
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["group", "total", "passed", "failed", "skipped"],
                "properties": {
                    "group": {"type": "string"},
                    "total": {"type": "integer"},
                    "passed": {"type": "integer"},
                    "failed": {"type": "integer"},
                    "skipped": {"type": "integer"},
                },
            },
        },
        "cases": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "group", "description", "operation", "status", "duration_ms"],
                "properties": {
                    "id": {"type": "string"},
                    "group": {"type": "string"},
                    "description": {"type": "string"},
                    "operation": {"type": "string"},
                    "status": {"type": "string", "enum": ["passed", "failed", "skipped"]},
                    "duration_ms": {"type": "number"},
                    "expected": {"type": ["string", "null"]},
                    "actual": {"type": ["string", "null"]},
                    "detail": {"type": "string"},
                    "reason": {"type": "string"},
                    "mismatches": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["field", "expected", "actual", "rule"],
                            "properties": {
                                "field": {"type": "string"},
                                "rule": {"type": "string"},
                            },
                        },
                    },
                },
            },
        },
    },
}

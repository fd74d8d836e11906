from __future__ import annotations

import pytest

from cellextest.core.comparator import compare_error
from cellextest.core.models import ExpectError
from cellextest.errors import DispatchError


def test_all_declared_fields_match() -> None:
    expectation = ExpectError(status=400, code=1003, message="ít nhất 3 ký tự")
    error = DispatchError(400, {"code": 1003, "message": "Tên đăng nhập phải có ít nhất 3 ký tự"})
    result = compare_error(expectation, error)
    assert result.passed
    assert result.message == ""


def test_undeclared_fields_are_ignored() -> None:
    result = compare_error(ExpectError(code=1003), DispatchError(418, {"code": 1003, "message": "anything"}))
    assert result.passed


def test_each_mismatch_is_reported() -> None:
    expectation = ExpectError(status=400, code=1003, message="Email không hợp lệ")
    error = DispatchError(500, {"code": 9999, "message": "Internal error"})
    result = compare_error(expectation, error)
    assert not result.passed
    assert [item.field for item in result.mismatches] == ["status", "code", "message"]
    assert "status: expected 400, actual 500" in result.message
    assert "message: expected to contain 'Email không hợp lệ'" in result.message


def test_server_error_never_substitutes_for_declared_status() -> None:
    result = compare_error(ExpectError(status=400), DispatchError(500, {"message": "boom"}))
    assert not result.passed


def test_missing_message_is_a_mismatch() -> None:
    result = compare_error(ExpectError(message="bắt buộc"), DispatchError(400, None))
    assert not result.passed
    assert result.mismatches[0].actual is None
    assert result.mismatches[0].rule == "contains"


def test_plain_text_body_is_used_as_message() -> None:
    result = compare_error(ExpectError(message="Bad Gateway"), DispatchError(502, "502 Bad Gateway"))
    assert result.passed


def test_error_expectation_requires_a_field() -> None:
    with pytest.raises(ValueError):
        ExpectError()

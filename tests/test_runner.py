from __future__ import annotations

from typing import List

import pytest

from cellextest.core.models import ExpectError, ExpectSuccess, Operation, SkipCondition, TestCase
from cellextest.core.results import summarize
from cellextest.core.runner import CaseRunner
from cellextest.errors import SetupFailure, SkipCase

from helpers import FakeDispatcher, error, ok

LOGIN = Operation(method="POST", path="/auth/login")
SIGNUP = Operation(method="POST", path="/auth/send-signup-code")


def _case(case_id: str, expectation=None, *, operation: Operation = LOGIN, group: str = "Email Format", **kwargs) -> TestCase:
    return TestCase(
        id=case_id,
        group=group,
        description=f"case {case_id}",
        operation=operation,
        payload={"email": "x@y.z", "password": "pw"},
        expectation=expectation or ExpectSuccess(),
        **kwargs,
    )


def test_error_case_passes_when_fields_match() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": error(400, 1003, "Tên đăng nhập phải có ít nhất 3 ký tự")})
    outcomes = CaseRunner(dispatcher).run([_case("TC_1", ExpectError(code=1003, message="ít nhất 3 ký tự"))])
    assert [outcome.status for outcome in outcomes] == ["passed"]
    assert outcomes[0].actual.startswith("status=400")


def test_error_case_fails_when_request_succeeds() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": ok({"result": {"token": "t"}})})
    outcome = CaseRunner(dispatcher).run([_case("TC_2", ExpectError(status=401))])[0]
    assert outcome.failed
    assert "but the request succeeded" in outcome.detail
    assert outcome.actual == "status=200"


def test_success_case_fails_on_error_response() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": error(401, 1006, "Unauthenticated")})
    outcome = CaseRunner(dispatcher).run([_case("TC_3")])[0]
    assert outcome.failed
    assert outcome.detail.startswith("expected success but got status=401")


def test_mismatches_are_carried_on_the_outcome() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": error(500, None, "Internal")})
    outcome = CaseRunner(dispatcher).run([_case("TC_4", ExpectError(status=400))])[0]
    assert outcome.failed
    assert outcome.mismatches[0].field == "status"
    assert outcome.mismatches[0].actual == 500


def test_skip_condition_turns_matching_status_into_skip() -> None:
    skip = SkipCondition(status=404, reason="Account does not exist - skipping test")
    dispatcher = FakeDispatcher({"POST /auth/login": error(404, None, "not found")})
    outcome = CaseRunner(dispatcher).run([_case("TC_5", ExpectError(status=403), skip=skip)])[0]
    assert outcome.skipped
    assert outcome.reason == "Account does not exist - skipping test"


def test_unexpected_exception_fails_only_that_case() -> None:
    def explode(_):
        raise KeyError("result")

    dispatcher = FakeDispatcher({"POST /auth/login": explode, "POST /auth/send-signup-code": ok()})
    outcomes = CaseRunner(dispatcher).run([_case("TC_6"), _case("TC_7", operation=SIGNUP)])
    assert [outcome.status for outcome in outcomes] == ["failed", "passed"]
    assert "unexpected exception KeyError" in outcomes[0].detail


def test_transport_failure_is_reported_with_no_status() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": error(None, None, "Connection refused")})
    outcome = CaseRunner(dispatcher).run([_case("TC_8", ExpectError(status=400))])[0]
    assert outcome.failed
    assert "status=None" in outcome.actual


def test_setup_failure_skips_every_case() -> None:
    dispatcher = FakeDispatcher({})

    def setup() -> None:
        raise SetupFailure("login as vendor failed")

    outcomes = CaseRunner(dispatcher).run([_case("TC_9"), _case("TC_10")], setup=setup)
    assert [outcome.status for outcome in outcomes] == ["skipped", "skipped"]
    assert outcomes[0].reason == "setup failed: login as vendor failed"
    assert dispatcher.calls == []


def test_setup_failure_mid_run_skips_remaining_cases() -> None:
    def lost(_):
        raise SetupFailure("session expired")

    dispatcher = FakeDispatcher({"POST /auth/login": ok(), "POST /auth/send-signup-code": lost})
    cases = [_case("TC_11"), _case("TC_12", operation=SIGNUP), _case("TC_13")]
    outcomes = CaseRunner(dispatcher).run(cases)
    assert [outcome.status for outcome in outcomes] == ["passed", "skipped", "skipped"]
    assert len(dispatcher.calls) == 2


def test_prepare_skip_and_rendering() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": ok()})

    def prepare(case: TestCase) -> TestCase:
        if case.id == "TC_15":
            raise SkipCase("fixture unavailable: product_id")
        return case

    outcomes = CaseRunner(dispatcher).run([_case("TC_14"), _case("TC_15")], prepare=prepare)
    assert [outcome.status for outcome in outcomes] == ["passed", "skipped"]
    assert outcomes[1].reason == "fixture unavailable: product_id"


def test_results_follow_table_order_and_callback_indices() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": error(400, 1003, "bad")})
    seen: List[tuple] = []
    cases = [_case(f"TC_{n}", ExpectError(code=1003)) for n in range(3)]
    outcomes = CaseRunner(dispatcher).run(cases, on_result=lambda outcome, index, total: seen.append((outcome.case.id, index, total)))
    assert [outcome.case.id for outcome in outcomes] == ["TC_0", "TC_1", "TC_2"]
    assert seen == [("TC_0", 1, 3), ("TC_1", 2, 3), ("TC_2", 3, 3)]


def test_summarize_groups_in_first_appearance_order() -> None:
    dispatcher = FakeDispatcher({"POST /auth/login": ok()})
    cases = [
        _case("A1", group="Password Format"),
        _case("B1", ExpectError(status=400), group="Email Format"),
        _case("A2", group="Password Format"),
    ]
    summary = summarize(CaseRunner(dispatcher).run(cases))
    assert [group.group for group in summary.groups] == ["Password Format", "Email Format"]
    assert (summary.total, summary.passed, summary.failed, summary.skipped) == (3, 2, 1, 0)
    assert summary.group("Email Format").failed == 1


@pytest.mark.parametrize("status", [302, 500])
def test_success_case_fails_on_non_2xx_response(status: int) -> None:
    operation = Operation(name="ui.login")
    dispatcher = FakeDispatcher({operation.label(): ok(status=status)})
    outcome = CaseRunner(dispatcher).run([_case("TC_16", operation=operation)])[0]
    assert outcome.failed
    assert outcome.actual == f"status={status}"
    assert outcome.detail == f"expected a 2xx response but got status={status}"


def test_full_error_triple_passes_and_each_changed_field_is_named() -> None:
    declared = ExpectError(status=400, code=1004, message="Mật khẩu không hợp lệ")
    observed = {"status": 400, "code": 1004, "message": "Mật khẩu không hợp lệ"}
    dispatcher = FakeDispatcher({"POST /auth/login": error(**observed)})
    assert CaseRunner(dispatcher).run([_case("TC_17", declared)])[0].passed

    for field, other in (("status", 422), ("code", 1005), ("message", "Email không hợp lệ")):
        changed = dict(observed, **{field: other})
        dispatcher = FakeDispatcher({"POST /auth/login": error(**changed)})
        outcome = CaseRunner(dispatcher).run([_case("TC_17", declared)])[0]
        assert outcome.failed
        assert [mismatch.field for mismatch in outcome.mismatches] == [field]

"""Executor for case tables against a live backend."""
from __future__ import annotations

import fnmatch
import logging
from typing import Callable, List, Optional, Sequence

import click

from cellextest.api.client import ApiClient
from cellextest.config import Settings
from cellextest.core.dispatch import Dispatcher, HttpDispatcher, NamedOperationDispatcher, RoutingDispatcher
from cellextest.core.models import TestCase
from cellextest.core.results import summarize
from cellextest.core.runner import CaseRunner
from cellextest.errors import DispatchError, SetupFailure
from cellextest.reporting import JsonReporter, Reporter, ReportManager, TerminalReporter

from .fixtures import RunFixtures
from .models import Suite, SuiteOptions

logger = logging.getLogger(__name__)


def run_suite(
    suite: Suite,
    options: Optional[SuiteOptions] = None,
    *,
    settings: Settings,
    client: Optional[ApiClient] = None,
    named: Optional[Dispatcher] = None,
    report_format: str = "terminal",
    report_path: str | None = None,
    use_color: bool = True,
) -> int:
    """Execute the suite; returns process exit code (0 success, 1 failures)."""

    options = options or SuiteOptions()
    cases = select_cases(suite.cases, options)
    if options.list_only:
        for case in cases:
            click.echo(f"{case.id}\t{case.group}\t{case.description}")
        return 0
    if not cases:
        click.echo("No cases matched the provided filters.")
        return 1

    client = client or ApiClient.from_settings(settings)
    fixtures = RunFixtures(settings)
    dispatcher = RoutingDispatcher(HttpDispatcher(client), named or NamedOperationDispatcher())
    manager = ReportManager(_build_reporters(report_format, report_path, use_color))

    def login() -> None:
        role = suite.setup.login
        try:
            creds = settings.account(role)
        except KeyError as exc:
            raise SetupFailure(f"no credentials configured for role {role}") from exc
        try:
            client.login(creds.email, creds.password)
        except DispatchError as exc:
            raise SetupFailure(f"login as {role} ({creds.email}) failed: {exc.detail()}") from exc
        if not client.auth.is_authenticated:
            raise SetupFailure(f"login as {role} ({creds.email}) returned no token")
        logger.info("logged in as %s", role)

    def setup() -> None:
        client.auth.clear()
        if suite.setup.login:
            login()
        if suite.setup.provision:
            fixtures.provision(client, suite.setup.provision)

    manager.start(suite, len(cases))
    try:
        outcomes = CaseRunner(dispatcher).run(
            cases,
            setup=setup,
            prepare=fixtures.render,
            on_result=manager.handle_result,
        )
    finally:
        _cleanup(fixtures, client, login if suite.setup.login else None)
    summary = summarize(outcomes)
    manager.complete(outcomes, summary)
    return 0 if summary.failed == 0 else 1


def select_cases(cases: Sequence[TestCase], options: SuiteOptions) -> List[TestCase]:
    selected: List[TestCase] = []
    for case in cases:
        if options.cases and not any(fnmatch.fnmatchcase(case.id, pattern) for pattern in options.cases):
            continue
        if options.groups and case.group not in options.groups:
            continue
        if options.tags and not set(options.tags) & set(case.tags):
            continue
        selected.append(case)
    return selected


def _cleanup(fixtures: RunFixtures, client: ApiClient, login: Optional[Callable[[], None]]) -> None:
    # A 401 during the run clears the token; sign in again so provisioned records can be deleted.
    if fixtures.created_products and not client.auth.is_authenticated and login is not None:
        try:
            login()
        except SetupFailure as exc:
            logger.warning("cannot sign in for cleanup: %s", exc)
    if fixtures.created_products and not client.auth.is_authenticated:
        logger.warning("leaving provisioned product(s) %s: not authenticated", ", ".join(fixtures.created_products))
    else:
        fixtures.cleanup(client)
    client.auth.clear()


def _build_reporters(report_format: str, report_path: str | None, use_color: bool) -> List[Reporter]:
    if report_format == "terminal":
        return [TerminalReporter(use_color=use_color)]
    if report_format == "json":
        if not report_path:
            raise ValueError("--report-path is required when --report=json")
        return [TerminalReporter(use_color=use_color), JsonReporter(report_path)]
    raise ValueError(f"Unsupported report format '{report_format}'")

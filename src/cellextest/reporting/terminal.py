"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

import time
from typing import Sequence

import click
from colorama import Fore, Style, init as colorama_init

from cellextest.core.results import CaseOutcome, SuiteSummary
from cellextest.suite.models import Suite

from .base import Reporter

STATUS_LABELS = {
    "passed": ("PASS", Fore.GREEN),
    "failed": ("FAIL", Fore.RED),
    "skipped": ("SKIP", Fore.YELLOW),
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True) -> None:
        self._use_color = use_color
        self._start_time = 0.0
        self._suite: Suite | None = None
        self._failures: list[tuple[int, CaseOutcome]] = []
        if use_color:
            colorama_init()

    def on_start(self, suite: Suite, total: int) -> None:
        self._suite = suite
        self._start_time = time.perf_counter()
        self._failures.clear()
        header = f"Running suite {suite.name}: {total} case(s)"
        if suite.setup.login:
            header += f" as {suite.setup.login}"
        click.echo(self._styled(header, "cyan"))

    def on_case_result(self, outcome: CaseOutcome, index: int, total: int) -> None:
        ms = outcome.duration_s * 1000
        click.echo(f"[{index}/{total}] {self._label(outcome.status)} {outcome.case.identifier()} ({ms:.0f} ms)")
        if outcome.failed:
            self._failures.append((index, outcome))
            self._print_failure_details(outcome)
        elif outcome.skipped and outcome.reason:
            click.echo(f"    reason: {outcome.reason}")

    def on_complete(self, outcomes: Sequence[CaseOutcome], summary: SuiteSummary) -> None:
        duration = time.perf_counter() - self._start_time
        click.echo("Groups:")
        for group in summary.groups:
            click.echo(
                f"  - {group.group}: {group.total} case(s), passed={group.passed} "
                f"failed={group.failed} skipped={group.skipped}"
            )
        color = "green" if summary.failed == 0 else "red"
        click.echo(
            self._styled(
                f"Summary: total={summary.total} passed={summary.passed} failed={summary.failed} "
                f"skipped={summary.skipped} duration={duration:.2f}s",
                color,
            )
        )
        if self._failures:
            click.echo(self._styled("Failure details:", "red"))
            for index, outcome in self._failures:
                click.echo(f"  [{index}] {outcome.case.identifier()}")
                self._print_failure_details(outcome, indent="    ")

    def _label(self, status: str) -> str:
        label, color = STATUS_LABELS.get(status, (status.upper(), ""))
        if not self._use_color or not color:
            return f"{label:<5}"
        return f"{color}{label:<5}{Style.RESET_ALL}"

    def _styled(self, text: str, color: str) -> str:
        if not self._use_color:
            return text
        return click.style(text, fg=color)

    def _print_failure_details(self, outcome: CaseOutcome, *, indent: str = "    ") -> None:
        click.echo(f"{indent}operation: {outcome.case.operation.label()}")
        click.echo(f"{indent}expected: {outcome.expected}")
        click.echo(f"{indent}actual:   {outcome.actual}")
        if outcome.detail:
            click.echo(f"{indent}detail:   {outcome.detail}")

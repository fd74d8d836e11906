"""CLI entry point for cellextest."""
from __future__ import annotations

import logging
import sys
from typing import Optional, Tuple

import click

from cellextest import __version__, bootstrap
from cellextest.config import load_settings
from cellextest.suite import bundled_suites, load_suite, resolve_suite
from cellextest.suite.models import SuiteOptions
from cellextest.suite.runner import run_suite

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"cellextest {__version__}")
    raise click.exceptions.Exit()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format=LOG_FORMAT)
    if debug:
        logging.getLogger("cellextest").setLevel(logging.DEBUG)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the cellextest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Top level CLI group for cellextest."""

    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.option("--suite", "suite_name", type=str, required=True, help="Bundled table name or path to a YAML case table.")
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False), help="Read settings from this .env file.")
@click.option("--cases", "case_filters", type=str, help="Comma-separated case id filters (supports globs).")
@click.option("--groups", "group_filters", type=str, help="Comma-separated group names to include.")
@click.option("--tags", "tag_filters", type=str, help="Comma-separated tags to include.")
@click.option("--list", "list_only", is_flag=True, help="List matched cases without running.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    suite_name: str,
    env_file: Optional[str],
    case_filters: Optional[str],
    group_filters: Optional[str],
    tag_filters: Optional[str],
    list_only: bool,
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Run a case table against the configured backend."""

    options = SuiteOptions(
        cases=_split_csv(case_filters),
        groups=_split_csv(group_filters),
        tags=_split_csv(tag_filters),
        list_only=list_only,
    )
    try:
        settings = load_settings(env_file)
        _configure_logging(state.verbose or settings.debug)
        suite = load_suite(resolve_suite(suite_name))
        exit_code = run_suite(
            suite,
            options,
            settings=settings,
            report_format=report_format or "terminal",
            report_path=report_path,
            use_color=not no_color,
        )
    except Exception as exc:  # pragma: no cover - CLI error translation
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


@cli.command()
def suites() -> None:
    """List the bundled case tables."""

    for name in bundled_suites():
        suite = load_suite(resolve_suite(name))
        click.echo(f"{name}\t{len(suite.cases)} case(s)\t{suite.description}")


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="cellextest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

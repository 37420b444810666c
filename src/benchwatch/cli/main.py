"""Main CLI entry point for benchwatch.

This module defines the Typer application and all CLI commands.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError

from benchwatch import __version__
from benchwatch.benchmarks import CommitInfo, Run, append, load, persist, trim
from benchwatch.core.config import Settings
from benchwatch.core.exceptions import BenchwatchError, ConfigurationError
from benchwatch.parsing import Dialect, parse_file
from benchwatch.regression import Thresholds, classify, parse_threshold, should_fail
from benchwatch.reporters import ConsoleReporter, JSONReporter, MarkdownReporter, format_github_actions_alert
from benchwatch.vcs import GitHubActionsEnv, get_commit_info

if TYPE_CHECKING:
    from benchwatch.benchmarks import History, Measurement

logger = logging.getLogger(__name__)

# Create the main Typer app
app = typer.Typer(
    name="benchwatch",
    help="benchwatch: Track benchmark results across commits and alert on regressions.",
    add_completion=False,
    no_args_is_help=True,
)

# Global state for options
state: dict[str, bool] = {
    "json": False,
    "verbose": False,
}


class OutputFormat(str, Enum):
    """Output formats of the compare command."""

    MARKDOWN = "markdown"
    JSON = "json"
    TEXT = "text"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"benchwatch v{__version__}")
        raise typer.Exit()


def _settings() -> Settings:
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid BENCHWATCH_* setting: {e}") from e


def _exit_with_error(error: BenchwatchError) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


def _thresholds(
    settings: Settings,
    alert: str | None,
    fail: str | None,
    config: Path | None,
) -> Thresholds:
    """Thresholds from --config, overridden by explicit options, else from settings."""
    if config is not None:
        try:
            thresholds = Thresholds.from_yaml(config)
        except FileNotFoundError as e:
            raise ConfigurationError(str(e)) from e
        if alert is not None:
            thresholds = replace(thresholds, alert_threshold=parse_threshold(alert))
        if fail is not None:
            thresholds = replace(thresholds, fail_threshold=parse_threshold(fail))
        return thresholds

    return Thresholds.from_strings(
        alert=alert or settings.alert_threshold,
        fail=fail if fail is not None else settings.fail_threshold,
        noise=settings.noise,
    )


def _commit(
    gh_env: GitHubActionsEnv,
    commit_id: str | None,
    commit_message: str | None,
    git_ref: str | None,
) -> CommitInfo:
    """Commit of the run: explicit options win, then git at --git-ref, GITHUB_SHA or HEAD."""
    if commit_id is not None:
        return CommitInfo(
            id=commit_id,
            message=commit_message or "",
            timestamp=datetime.now(timezone.utc),
            url=gh_env.commit_url(commit_id),
        )

    commit = get_commit_info(Path.cwd(), git_ref or gh_env.sha)
    url = gh_env.commit_url(commit.id) or commit.url
    updates: dict[str, str | None] = {"url": url}
    if commit_message is not None:
        updates["message"] = commit_message
    return commit.model_copy(update=updates)


def _record(
    history: History,
    suite_name: str,
    measurements: list[Measurement],
    commit: CommitInfo,
    max_items: int | None,
) -> History:
    run = Run(commit=commit, date=datetime.now(timezone.utc), tool="cargo", benches=tuple(measurements))
    return trim(append(history, suite_name, run), suite_name, max_items)


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Enable debug logging.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results in JSON format.",
        ),
    ] = False,
) -> None:
    """benchwatch: Continuous benchmarking for cargo bench and Criterion output.

    Store benchmark runs per commit and compare each run with the previous one.
    """
    state["json"] = json_output
    state["verbose"] = verbose

    try:
        level = "DEBUG" if verbose else _settings().log_level.upper()
    except BenchwatchError as e:
        _exit_with_error(e)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Show the current version."""
    typer.echo(f"benchwatch v{__version__}")


@app.command()
def store(
    output_file: Annotated[
        Path,
        typer.Option("--output-file", "-o", help="File containing the benchmark output."),
    ],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Benchmark suite name. [default: cargo]"),
    ] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="JSON benchmark history. [default: benchmark-data.json]"),
    ] = None,
    git_ref: Annotated[
        str | None,
        typer.Option("--git-ref", help="Commit the benchmarks ran against. [default: HEAD]"),
    ] = None,
    commit_id: Annotated[
        str | None,
        typer.Option("--commit-id", help="Commit hash to record instead of reading it from git."),
    ] = None,
    commit_message: Annotated[
        str | None,
        typer.Option("--commit-message", help="Commit message to record."),
    ] = None,
    max_items: Annotated[
        int | None,
        typer.Option("--max-items", min=1, help="Maximum runs kept for the suite."),
    ] = None,
    dialect: Annotated[
        Dialect | None,
        typer.Option("--dialect", help="Benchmark output format. [default: auto-detect]"),
    ] = None,
) -> None:
    """Parse benchmark output and append it to the history, without comparing.

    Example:
        benchwatch store -o bench-output.txt --name cargo
    """
    try:
        settings = _settings()
        suite_name = name or settings.suite_name
        history_path = data_file or Path(settings.data_file)

        measurements = parse_file(output_file, dialect)
        logger.info(f"Parsed {len(measurements)} benchmark result(s)")
        commit = _commit(GitHubActionsEnv.from_env(), commit_id, commit_message, git_ref)

        history = _record(
            load(history_path),
            suite_name,
            measurements,
            commit,
            max_items if max_items is not None else settings.max_items,
        )
        persist(history, history_path)
    except BenchwatchError as e:
        _exit_with_error(e)

    if state["json"]:
        typer.echo(
            json.dumps(
                {
                    "suite": suite_name,
                    "commit": commit.id,
                    "benchmarks": len(measurements),
                    "runs": len(history.runs(suite_name)),
                    "data_file": str(history_path),
                },
                indent=2,
            )
        )
    else:
        typer.echo(f"Stored {len(measurements)} benchmark(s) for {commit.short_id} in {history_path}")


@app.command()
def compare(
    output_file: Annotated[
        Path,
        typer.Option("--output-file", "-o", help="File containing the benchmark output."),
    ],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Benchmark suite name. [default: cargo]"),
    ] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="JSON benchmark history. [default: benchmark-data.json]"),
    ] = None,
    alert_threshold: Annotated[
        str | None,
        typer.Option("--alert-threshold", help="Ratio that raises an alert, e.g. 200% or 1.5x. [default: 200%]"),
    ] = None,
    fail_threshold: Annotated[
        str | None,
        typer.Option("--fail-threshold", help="Ratio that fails. [default: alert threshold]"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="YAML file with thresholds."),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Report format."),
    ] = OutputFormat.MARKDOWN,
    dialect: Annotated[
        Dialect | None,
        typer.Option("--dialect", help="Benchmark output format. [default: auto-detect]"),
    ] = None,
) -> None:
    """Compare benchmark output with the last stored run, without saving it.

    Examples:
        benchwatch compare -o bench-output.txt
        benchwatch compare -o bench-output.txt --format json
    """
    try:
        settings = _settings()
        suite_name = name or settings.suite_name
        thresholds = _thresholds(settings, alert_threshold, fail_threshold, config)

        measurements = parse_file(output_file, dialect)
        history = load(data_file or Path(settings.data_file))
    except BenchwatchError as e:
        _exit_with_error(e)

    report = classify(measurements, history.runs(suite_name), thresholds)

    if state["json"] or output_format is OutputFormat.JSON:
        typer.echo(JSONReporter().report(report, suite_name))
    elif output_format is OutputFormat.MARKDOWN:
        typer.echo(MarkdownReporter().summary(report), nl=False)
    else:
        ConsoleReporter().report_comparison(report, MarkdownReporter().short_summary(report))


@app.command()
def run(
    output_file: Annotated[
        Path,
        typer.Option("--output-file", "-o", help="File containing the benchmark output."),
    ],
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Benchmark suite name. [default: cargo]"),
    ] = None,
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="JSON benchmark history. [default: benchmark-data.json]"),
    ] = None,
    alert_threshold: Annotated[
        str | None,
        typer.Option("--alert-threshold", help="Ratio that raises an alert, e.g. 200% or 1.5x. [default: 200%]"),
    ] = None,
    fail_threshold: Annotated[
        str | None,
        typer.Option("--fail-threshold", help="Ratio that fails. [default: alert threshold]"),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="YAML file with thresholds."),
    ] = None,
    fail_on_alert: Annotated[
        bool,
        typer.Option("--fail-on-alert", help="Exit 1 when a benchmark reaches the fail threshold."),
    ] = False,
    fail_on_any_alert: Annotated[
        bool,
        typer.Option("--fail-on-any-alert", help="Exit 1 when a benchmark reaches the alert threshold."),
    ] = False,
    max_items: Annotated[
        int | None,
        typer.Option("--max-items", min=1, help="Maximum runs kept for the suite."),
    ] = None,
    no_save: Annotated[
        bool,
        typer.Option("--no-save", help="Do not append the run to the history."),
    ] = False,
    cc: Annotated[
        str | None,
        typer.Option("--cc", help="Users to mention in the alert message, e.g. @alice,@bob."),
    ] = None,
    git_ref: Annotated[
        str | None,
        typer.Option("--git-ref", help="Commit the benchmarks ran against. [default: GITHUB_SHA or HEAD]"),
    ] = None,
    commit_id: Annotated[
        str | None,
        typer.Option("--commit-id", help="Commit hash to record instead of reading it from git."),
    ] = None,
    commit_message: Annotated[
        str | None,
        typer.Option("--commit-message", help="Commit message to record."),
    ] = None,
    dialect: Annotated[
        Dialect | None,
        typer.Option("--dialect", help="Benchmark output format. [default: auto-detect]"),
    ] = None,
) -> None:
    """Compare benchmark output with the last run, report, then store it.

    Exits 1 when --fail-on-alert or --fail-on-any-alert is set and the
    verdict reaches the corresponding level.

    Examples:
        benchwatch run -o bench-output.txt --fail-on-alert
        benchwatch run -o bench-output.txt --alert-threshold 150% --cc @alice
    """
    gh_env = GitHubActionsEnv.from_env()
    if gh_env.is_github_actions():
        logger.debug("Running in GitHub Actions environment")

    try:
        settings = _settings()
        suite_name = name or settings.suite_name
        history_path = data_file or Path(settings.data_file)
        thresholds = _thresholds(settings, alert_threshold, fail_threshold, config)

        measurements = parse_file(output_file, dialect)
        logger.info(f"Parsed {len(measurements)} benchmark result(s)")
        history = load(history_path)
        report = classify(measurements, history.runs(suite_name), thresholds)

        markdown = MarkdownReporter(cc_users=cc)
        if state["json"]:
            typer.echo(JSONReporter().report(report, suite_name))
        else:
            typer.echo(markdown.summary(report))
            alert_message = markdown.alert_message(report)
            if alert_message is not None:
                typer.echo(alert_message)

        if gh_env.is_github_actions():
            # Keep stdout a single JSON document
            typer.echo(format_github_actions_alert(report), nl=False, err=state["json"])

        if no_save:
            logger.info("Not saving benchmark data (--no-save)")
        else:
            commit = _commit(gh_env, commit_id, commit_message, git_ref)
            history = _record(
                history,
                suite_name,
                measurements,
                commit,
                max_items if max_items is not None else settings.max_items,
            )
            persist(history, history_path)
            logger.info(f"Saved benchmark data to {history_path}")
    except BenchwatchError as e:
        _exit_with_error(e)

    if should_fail(report, fail_on_alert=fail_on_alert, fail_on_any_alert=fail_on_any_alert):
        logger.error("Benchmark alert triggered - failing workflow")
        raise typer.Exit(1)


@app.command()
def history(
    data_file: Annotated[
        Path | None,
        typer.Option("--data-file", help="JSON benchmark history. [default: benchmark-data.json]"),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option("--name", "-n", help="Only show this suite. [default: all suites]"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", min=1, help="Runs shown per suite, newest first."),
    ] = 10,
) -> None:
    """Show the most recent stored runs.

    Example:
        benchwatch history --name cargo --limit 5
    """
    try:
        settings = _settings()
        data = load(data_file or Path(settings.data_file))
        if name is not None and name not in data.entries:
            raise ConfigurationError(f"Suite '{name}' not found")
    except BenchwatchError as e:
        _exit_with_error(e)

    suites = [name] if name is not None else sorted(data.entries)
    runs_by_suite = {suite: list(reversed(data.runs(suite)))[:limit] for suite in suites}

    if state["json"]:
        typer.echo(JSONReporter().report_history(runs_by_suite))
        return

    if not runs_by_suite:
        typer.echo("No benchmark history recorded yet.")
        return

    reporter = ConsoleReporter()
    for suite, runs in runs_by_suite.items():
        reporter.report_history(suite, runs)


if __name__ == "__main__":
    app()

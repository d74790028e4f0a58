"""nalagen run / run-and-fix / workflow — Execute generated tests."""

import asyncio
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from nalagen.cli.helpers import (
    CONFIG_OPTION_HELP,
    PROJECT_OPTION_HELP,
    default_component_config,
    fail,
    load_settings,
    open_registry,
    print_results,
    read_component_config,
)
from nalagen.config import config
from nalagen.exceptions import NalagenError
from nalagen.types import AutoFixResult, TestRunSummary

console = Console()


def default_tag(card_type: str, test_type: str) -> str:
    """Tag prefix shared by every feature of one card and test type."""
    return f"@studio-{card_type}-{test_type}"


def _timeout_seconds(timeout: Optional[int]) -> float:
    """--timeout (or the configured default) in seconds, checked in milliseconds."""
    from nalagen.inputs import validate_timeout

    seconds = config.test_timeout_seconds if timeout is None else timeout
    validate_timeout(int(seconds * 1000))
    return float(seconds)


def _test_command(settings, timeout: float):
    from nalagen.runner.command import TestCommand
    return TestCommand(command=config.test_command, cwd=settings.root, timeout=timeout)


def _warn_credentials() -> None:
    missing = config.missing_credentials()
    if missing:
        console.print(f"[yellow]![/yellow] {', '.join(missing)} not set; Studio sign-in may block the run")


def print_summary(summary: TestRunSummary) -> None:
    status = "[green]✓ Passed[/green]" if summary.success else "[red]✗ Failed[/red]"
    console.print(f"{status}  passed={summary.passed} failed={summary.failed} skipped={summary.skipped}")
    for error in summary.errors:
        detail = f" [dim]({error.detail})[/dim]" if error.detail else ""
        console.print(f"  [red]•[/red] {error.kind.value}: {error.message}{detail}")


def print_autofix(result: AutoFixResult) -> None:
    for attempt in result.history:
        kinds = ", ".join(e.kind.value for e in attempt.classified_errors) or "ok"
        patched = f" → patched {', '.join(attempt.patches_applied)}" if attempt.patches_applied else ""
        console.print(f"  attempt {attempt.attempt_number}: {kinds}{patched}")
    if result.success:
        console.print(f"[green]✓[/green] Tests passed after {result.attempts} attempt(s)")
    else:
        console.print(f"[red]✗[/red] Still failing after {result.attempts} attempt(s)")
        for error in result.last_errors:
            console.print(f"  [red]•[/red] {error.kind.value}: {error.message}")


# ─── run ─────────────────────────────────────────────────────────────────────


def run_tests(
    tag: str = typer.Argument(..., help="Test tag, e.g. @studio-fries-css"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to test against"),
    mode: Optional[str] = typer.Option(None, "--mode", help="headless or headed"),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Seconds before the run is killed"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Run tests by tag in the target project, once.

    Example:
        nalagen run @studio-fries-css --branch local
    """
    from nalagen.runner.signatures import summarize_run

    settings = load_settings(config_path, project)
    try:
        seconds = _timeout_seconds(timeout)
    except NalagenError as exc:
        fail(exc.message)
    _warn_credentials()

    async def _run():
        command = _test_command(settings, seconds)
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), transient=True) as progress:
            progress.add_task(f"Running {tag}...", total=None)
            return await command.run(
                tag,
                branch or config.default_branch,
                mode or config.default_mode,
                milolibs or config.default_milolibs,
            )

    try:
        output = asyncio.run(_run())
    except NalagenError as exc:
        fail(exc.message)

    summary = summarize_run(output.text, output.exit_code)
    print_summary(summary)
    if not summary.success:
        raise typer.Exit(1)


# ─── run-and-fix ─────────────────────────────────────────────────────────────


def run_and_fix(
    card_type: str = typer.Argument(..., help="Variant name"),
    card_id: str = typer.Argument(..., help="Card id (UUID) to extract live properties from"),
    test_type: str = typer.Option("css", "--type", "-t", help="Test type that was generated"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Test tag (default: @studio-<type>-<testType>)"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to test against"),
    mode: Optional[str] = typer.Option(None, "--mode", help="headless or headed"),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value"),
    attempts: Optional[int] = typer.Option(None, "--attempts", help="Maximum test runs"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Seconds before a run is killed"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Run tests and repair the page object from the live card between attempts.

    Example:
        nalagen run-and-fix fries 26f091c2-995d-4a96-a193-d62f6c73af2f
    """
    from nalagen.inputs import validate_component_id, validate_component_type, validate_test_type
    from nalagen.output import PathResolver
    from nalagen.runner.autofix import AutoFixRunner
    from nalagen.runner.extractor import PlaywrightExtractor

    settings = load_settings(config_path, project)
    try:
        validate_component_type(card_type)
        card_id = validate_component_id(card_id)
        tt = validate_test_type(test_type)
        seconds = _timeout_seconds(timeout)
    except NalagenError as exc:
        fail(exc.message)

    registry = open_registry(settings)
    registry.is_valid(card_type)
    paths = PathResolver(settings).card_paths(card_type, registry.surface_for(card_type), tt)
    if not paths.page_object.exists():
        fail(f"No page object at {paths.page_object}; run 'nalagen generate' first")
    _warn_credentials()

    runner = AutoFixRunner(
        _test_command(settings, seconds),
        PlaywrightExtractor(),
        paths.page_object,
        max_attempts=attempts or config.max_fix_attempts,
    )
    try:
        result = asyncio.run(runner.run_and_fix(
            tag or default_tag(card_type, tt.value),
            card_id,
            branch=branch or config.default_branch,
            mode=mode or config.default_mode,
            milolibs=milolibs or config.default_milolibs,
        ))
    except NalagenError as exc:
        fail(exc.message)

    print_autofix(result)
    if not result.success:
        raise typer.Exit(1)


# ─── workflow ────────────────────────────────────────────────────────────────


def workflow(
    card_type: str = typer.Argument(..., help="Variant name"),
    card_id: str = typer.Argument(..., help="Card id (UUID)"),
    test_type: str = typer.Option("css", "--type", "-t", help="Test type to generate and run"),
    from_config: Optional[Path] = typer.Option(None, "--from-config", help="Component config JSON to generate from"),
    fix: bool = typer.Option(False, "--fix", help="Use run-and-fix instead of a single run"),
    validate_only: bool = typer.Option(False, "--validate-only", help="Stop after validation"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to test against"),
    mode: Optional[str] = typer.Option(None, "--mode", help="headless or headed"),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value"),
    timeout: Optional[int] = typer.Option(None, "--timeout", help="Seconds before a run is killed"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a markdown report here"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Generate → validate → run for one card and test type.

    Example:
        nalagen workflow fries 26f091c2-995d-4a96-a193-d62f6c73af2f -t css --fix
    """
    from nalagen.inputs import validate_component_id, validate_component_type, validate_test_type
    from nalagen.output import FileOutput
    from nalagen.pipeline import SuiteBuilder
    from nalagen.runner.autofix import AutoFixRunner
    from nalagen.runner.extractor import PlaywrightExtractor
    from nalagen.runner.signatures import summarize_run
    from nalagen.runner.validator import validate_generated_files
    from nalagen.types import WorkflowResult

    started = time.monotonic()
    settings = load_settings(config_path, project)
    branch = branch or config.default_branch
    mode = mode or config.default_mode
    milolibs = milolibs or config.default_milolibs

    try:
        validate_component_type(card_type)
        card_id = validate_component_id(card_id)
        tt = validate_test_type(test_type)
        seconds = _timeout_seconds(timeout)
        if from_config:
            component = read_component_config(from_config).model_copy(
                update={"component_type": card_type, "component_id": card_id},
            )
        else:
            component = default_component_config(card_type, card_id, milolibs, [tt])
    except NalagenError as exc:
        fail(exc.message)

    # ── generate ──
    builder = SuiteBuilder(settings, open_registry(settings), output=FileOutput())
    written = builder.generate(component, tt)
    result = WorkflowResult(success=False, phase="generation", written=written)
    if not print_results(written, f"{card_type} · {tt.value}"):
        result.summary = "File generation failed"
        _finish(result, started, report)

    # ── validate ──
    paths = builder.resolve(card_type, tt)
    result.phase = "validation"
    result.validation = validate_generated_files(paths, settings.type)
    if not result.validation.valid:
        for error in result.validation.errors:
            console.print(f"  [red]•[/red] {error}")
        result.summary = "Validation failed"
        _finish(result, started, report)
    console.print("[green]✓[/green] Generated files are valid")
    if validate_only:
        result.success = True
        result.summary = "Files generated and validated"
        _finish(result, started, report)

    # ── run ──
    _warn_credentials()
    result.phase = "execution"
    command = _test_command(settings, seconds)
    tag = default_tag(card_type, tt.value)
    try:
        if fix:
            runner = AutoFixRunner(
                command, PlaywrightExtractor(), paths.page_object, max_attempts=config.max_fix_attempts,
            )
            result.autofix = asyncio.run(runner.run_and_fix(tag, card_id, branch, mode, milolibs))
            print_autofix(result.autofix)
            result.success = result.autofix.success
        else:
            output = asyncio.run(command.run(tag, branch, mode, milolibs))
            result.execution = summarize_run(output.text, output.exit_code)
            print_summary(result.execution)
            result.success = result.execution.success
    except NalagenError as exc:
        result.summary = exc.message
        console.print(f"[red]Error:[/red] {exc.message}")
        _finish(result, started, report)

    result.summary = "All tests passed" if result.success else "Tests failed"
    _finish(result, started, report)


def _finish(result, started: float, report: Optional[Path]) -> None:
    from nalagen.runner.report import generate_test_report

    result.duration_ms = int((time.monotonic() - started) * 1000)
    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(generate_test_report(result), encoding="utf-8")
        console.print(f"[dim]Report written to {report}[/dim]")
    raise typer.Exit(0 if result.success else 1)

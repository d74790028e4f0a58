"""nalagen validate — Structural checks on generated files."""

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from nalagen.cli.helpers import CONFIG_OPTION_HELP, PROJECT_OPTION_HELP, fail, load_settings, open_registry
from nalagen.types import ValidationReport

console = Console()


def print_report(report: ValidationReport) -> None:
    table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Validation[/bold]")
    table.add_column("", width=2)
    table.add_column("File", style="cyan")
    table.add_column("Errors")
    table.add_column("Warnings", style="yellow")
    for check in report.files:
        mark = "[green]✓[/green]" if check.valid else "[red]✗[/red]"
        table.add_row(mark, check.path, "\n".join(check.errors), "\n".join(check.warnings))
    console.print(table)


def validate_files(
    card_type: str = typer.Argument(..., help="Variant name (or Milo block with --milo)"),
    test_type: str = typer.Argument("css", help="Test type"),
    milo: bool = typer.Option(False, "--milo", help="Validate a Milo block instead of a card"),
    category: str = typer.Option("block", "--category", help="Milo category: block or feature"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Check the page object, spec, and test generated for a variant.

    Exits 1 if any file is missing or malformed.

    Example:
        nalagen validate fries css
    """
    from nalagen.exceptions import NalagenError
    from nalagen.inputs import validate_component_type, validate_run_argument, validate_test_type
    from nalagen.output import PathResolver
    from nalagen.runner.validator import validate_generated_files

    settings = load_settings(config_path, project)
    try:
        tt = validate_test_type(test_type)
        resolver = PathResolver(settings)
        if milo:
            validate_run_argument(card_type, field="block")
            paths = resolver.milo_paths(card_type, category)
        else:
            validate_component_type(card_type)
            registry = open_registry(settings)
            registry.is_valid(card_type)
            paths = resolver.card_paths(card_type, registry.surface_for(card_type), tt)
    except NalagenError as exc:
        fail(exc.message)

    report = validate_generated_files(paths, settings.type)
    print_report(report)
    if not report.valid:
        console.print(f"[red]✗ {len(report.errors)} error(s)[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Valid ({len(report.warnings)} warning(s))")

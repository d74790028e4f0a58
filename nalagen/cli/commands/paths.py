"""nalagen paths — Where a variant's files would be written."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nalagen.cli.helpers import CONFIG_OPTION_HELP, PROJECT_OPTION_HELP, fail, load_settings, open_registry

console = Console()


def paths_show(
    card_type: str = typer.Argument(..., help="Variant name"),
    test_type: str = typer.Argument("css", help="Test type"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Show the surface and output files for a variant and test type.

    Example:
        nalagen paths fries css
    """
    from nalagen.exceptions import NalagenError
    from nalagen.inputs import validate_component_type, validate_test_type
    from nalagen.output import PathResolver

    try:
        validate_component_type(card_type)
        tt = validate_test_type(test_type)
    except NalagenError as exc:
        fail(exc.message)

    settings = load_settings(config_path, project)
    registry = open_registry(settings)
    registry.is_valid(card_type)
    surface = registry.surface_for(card_type)
    paths = PathResolver(settings).card_paths(card_type, surface, tt)

    console.print(f"\n[bold]File paths for {card_type} {tt.value} tests[/bold]\n")
    console.print(f"  Surface:        [cyan]{surface}[/cyan]")
    console.print(f"  Base directory: {paths.directory}\n")
    console.print(f"  Page object:    {paths.page_object}")
    console.print(f"  Test spec:      {paths.spec}")
    console.print(f"  Test impl:      {paths.test}\n")
    console.print(f"[dim]Generate with: nalagen generate single {tt.value} <card-id> {card_type}[/dim]")

"""CLI commands for the variant registry.

Accessed via: ``nalagen variants <subcommand>``
"""

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from nalagen.cli.helpers import CONFIG_OPTION_HELP, PROJECT_OPTION_HELP, fail, load_settings, open_registry

console = Console()

_ORIGIN_STYLE = {
    "builtin": "dim",
    "custom": "green",
    "discovered": "cyan",
    "dynamic": "yellow",
}


def variants_list(
    origin: Optional[str] = typer.Option(None, "--origin", help="builtin, custom, discovered or dynamic"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """List every registered variant with its surface and origin.

    Example:
        nalagen variants list --origin discovered
    """
    from nalagen.types import VariantOrigin

    registry = open_registry(load_settings(config_path, project))
    if origin:
        try:
            variants = registry.by_origin(VariantOrigin(origin))
        except ValueError:
            fail(f"Unknown origin {origin!r}")
    else:
        variants = registry.all_variants()

    table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Registered Variants[/bold]")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("Surface")
    table.add_column("Test types", style="dim")
    table.add_column("Origin")
    for variant in sorted(variants, key=lambda v: v.name):
        style = _ORIGIN_STYLE.get(variant.origin.value, "")
        table.add_row(
            variant.name,
            variant.label,
            variant.surface,
            ", ".join(t.value for t in variant.test_types),
            f"[{style}]{variant.origin.value}[/{style}]",
        )
    console.print(table)
    console.print(f"[dim]Total: {len(variants)} variants[/dim]")


def variants_add(
    name: str = typer.Argument(..., help="Variant name, e.g. ccd-promo"),
    surface: Optional[str] = typer.Argument(None, help="Surface (default: inferred from the name)"),
    label: Optional[str] = typer.Option(None, "--label", help="Display label"),
    test_types: Optional[list[str]] = typer.Option(None, "--type", "-t", help="Supported test types"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Register a custom variant and save it to .nala-mcp.json.

    Example:
        nalagen variants add ccd-promo ccd
    """
    from nalagen.exceptions import NalagenError
    from nalagen.inputs import validate_component_type, validate_test_type

    try:
        validate_component_type(name)
        types = [validate_test_type(t) for t in test_types] if test_types else None
    except NalagenError as exc:
        fail(exc.message)

    registry = open_registry(load_settings(config_path, project))
    descriptor = registry.register(name, label=label, surface=surface, test_types=types)
    if not registry.save_to_config():
        fail("Could not save variants to the project config")
    console.print(f"[green]✓[/green] Variant '{descriptor.name}' added with surface '{descriptor.surface}'")


def variants_remove(
    name: str = typer.Argument(..., help="Variant name"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Remove a variant and save the remaining custom variants.

    Example:
        nalagen variants remove ccd-promo
    """
    registry = open_registry(load_settings(config_path, project))
    existed = registry.remove(name)
    if not registry.save_to_config():
        fail("Could not save variants to the project config")
    if existed:
        console.print(f"[green]✓[/green] Variant '{name}' removed")
    else:
        console.print(f"[yellow]![/yellow] Variant '{name}' was not registered")


def variants_discover(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Scan the project's variants directory for new variants.

    Example:
        nalagen variants discover
    """
    settings = load_settings(config_path, project)
    registry = open_registry(settings, discover=False)
    console.print(f"Discovering variants in [cyan]{settings.variants_dir}[/cyan]...")
    result = registry.discover(force=True)
    if result.error:
        fail(result.error)

    table = Table(box=box.ROUNDED, header_style="bold dim", title="[bold]Discovery[/bold]")
    table.add_column("Name", style="cyan")
    table.add_column("Surface")
    table.add_column("Result")
    for name in result.discovered:
        table.add_row(name, registry.surface_for(name), "[cyan]discovered[/cyan]")
    for name in result.skipped:
        table.add_row(name, registry.surface_for(name), "[dim]already registered[/dim]")
    console.print(table)
    console.print(
        f"[green]✓[/green] {len(result.discovered)} new, {len(result.skipped)} already registered"
    )

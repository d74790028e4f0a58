"""Shared plumbing for CLI commands: project loading, registry, output tables."""

import json
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.table import Table

from nalagen.config import ProjectSettings, config, load_project_settings_or_default
from nalagen.exceptions import InvalidInputError, NalagenError
from nalagen.types import ComponentConfig, ComponentMetadata, ElementConfig, TestType, WriteResult
from nalagen.variants import VariantRegistry

console = Console()

CONFIG_OPTION_HELP = "Path to .nala-mcp.json (default: ./ then ~/)"
PROJECT_OPTION_HELP = "Project name from the config's 'projects' map"

# Placeholder locators used when generating without an extracted config.
DEFAULT_ELEMENT_SELECTORS = {
    "title": ".card-title",
    "eyebrow": ".card-eyebrow",
    "description": ".card-description",
    "price": ".card-price",
    "cta": ".card-cta",
    "icon": ".card-icon",
    "backgroundImage": ".card-background",
}
LOCAL_STUDIO_PATH = "/studio.html?milolibs=local"
LOCAL_BROWSER_PARAMS = "#page=content&path=nala&query="


def fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(1)


def load_settings(config_path: Optional[Path], project: Optional[str]) -> ProjectSettings:
    try:
        return load_project_settings_or_default(config_path, project)
    except NalagenError as exc:
        fail(exc.message)


def open_registry(settings: ProjectSettings, discover: bool = True) -> VariantRegistry:
    registry = VariantRegistry(settings, ttl_seconds=config.discovery_ttl_seconds)
    registry.initialize(discover=discover)
    return registry


def default_component_config(
    component_type: str,
    component_id: Optional[str],
    milolibs: str,
    test_types: Optional[list[TestType]] = None,
) -> ComponentConfig:
    """Every standard element with placeholder locators."""
    metadata = ComponentMetadata(milolibs=milolibs)
    if milolibs == "local":
        metadata = ComponentMetadata(
            milolibs=milolibs, path=LOCAL_STUDIO_PATH, browser_params=LOCAL_BROWSER_PARAMS,
        )
    return ComponentConfig(
        component_type=component_type,
        component_id=component_id,
        elements={name: ElementConfig(selector=sel) for name, sel in DEFAULT_ELEMENT_SELECTORS.items()},
        test_types=test_types or [TestType.CSS],
        metadata=metadata,
    )


def read_component_config(path: Path) -> ComponentConfig:
    """Parse a hand-written or extracted JSON config.

    Raises:
        InvalidInputError: unreadable file, bad JSON, or wrong shape
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise InvalidInputError(f"Failed to read config file: {exc}", field="config", value=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"Failed to parse config file: {exc}", field="config", value=str(path)) from exc
    try:
        return ComponentConfig.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(
            f"Invalid component config: {exc.error_count()} problem(s)\n{exc}", field="config", value=str(path),
        ) from exc


def results_table(results: list[WriteResult], title: str) -> Table:
    table = Table(box=box.ROUNDED, header_style="bold dim", title=f"[bold]{title}[/bold]")
    table.add_column("", width=2)
    table.add_column("File", style="cyan")
    table.add_column("Result")
    for result in results:
        mark = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        table.add_row(mark, result.path, result.message if result.success else f"[red]{result.error}[/red]")
    return table


def print_results(results: list[WriteResult], title: str) -> bool:
    """Print the table and a one-line tally. Returns True when all succeeded."""
    console.print(results_table(results, title))
    failed = sum(not r.success for r in results)
    if failed:
        console.print(f"[red]{failed} of {len(results)} files failed[/red]")
    else:
        console.print(f"[green]✓[/green] {len(results)} files written")
    return not failed

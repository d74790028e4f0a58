"""CLI commands for multi-project configuration.

Accessed via: ``nalagen projects <subcommand>``
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nalagen.cli.helpers import CONFIG_OPTION_HELP, fail

console = Console()


def projects_add(
    name: str = typer.Argument(..., help="Project name"),
    path: Path = typer.Argument(..., help="Project root"),
    project_type: str = typer.Argument("mas", help="mas or milo"),
    default: bool = typer.Option(False, "--default", help="Make this the default project"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
):
    """Add or update a project in .nala-mcp.json.

    Examples:

        nalagen projects add mas ../mas mas

        nalagen projects add milo ../milo milo --default
    """
    from nalagen.config import add_project
    from nalagen.exceptions import ConfigError
    from nalagen.types import ProjectType

    try:
        ptype = ProjectType(project_type)
    except ValueError:
        fail(f"Project type must be either 'mas' or 'milo', got {project_type!r}")
    if not path.is_dir():
        fail(f"Project path does not exist: {path}")

    try:
        written = add_project(name, path, ptype, config_path=config_path, make_default=default)
    except ConfigError as exc:
        fail(exc.message)
    console.print(f"[green]✓[/green] Project '{name}' ({ptype.value}) saved to {written}")

"""nalagen init — Point nalagen at a test project."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

console = Console()

_ENV_TEMPLATE = """\
# nalagen settings (prefix NALAGEN_)
NALAGEN_LOG_LEVEL=WARNING
NALAGEN_TEST_COMMAND=npm run nala
NALAGEN_TEST_TIMEOUT_SECONDS=300
NALAGEN_MAX_FIX_ATTEMPTS=3
NALAGEN_DEFAULT_BRANCH=local
NALAGEN_DEFAULT_MILOLIBS=local

# ── Live runs only ──
IMS_EMAIL=
IMS_PASS=
"""


def init_project(
    target: Path = typer.Argument(..., help="Root of the project the tests are written into"),
    output: str = typer.Option("nala", "--output", "-o", help="Test directory under the project root"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Where to write .nala-mcp.json"),
    env: bool = typer.Option(False, "--env", help="Also write a .env.example next to the config"),
):
    """Write (or update) .nala-mcp.json for a target project.

    Existing keys in the file are kept.

    Example:
        nalagen init ../mas --output nala
    """
    from nalagen.config import init_project_file
    from nalagen.exceptions import ConfigError

    if not target.is_dir():
        console.print(f"[red]Error:[/red] Target project does not exist: {target}")
        raise typer.Exit(1)

    try:
        written = init_project_file(target, config_path, output_path=output)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Wrote {written}")
    console.print(f"  target: [cyan]{target.resolve()}[/cyan]")
    console.print(f"  tests:  [cyan]{target.resolve() / output}[/cyan]")

    if env:
        env_path = written.parent / ".env.example"
        if env_path.exists():
            console.print(f"[yellow]![/yellow] {env_path} exists, left unchanged")
        else:
            env_path.write_text(_ENV_TEMPLATE, encoding="utf-8")
            console.print(f"[green]✓[/green] Wrote {env_path}")

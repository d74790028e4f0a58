"""nalagen config — Show resolved settings and the active project."""

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from nalagen.cli.helpers import CONFIG_OPTION_HELP, PROJECT_OPTION_HELP, load_settings

console = Console()


def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
):
    """Show the resolved nalagen configuration.

    Ambient settings come from NALAGEN_* environment variables and .env;
    project settings from .nala-mcp.json. IMS_PASS is masked.

    Example:
        nalagen config --project milo
    """
    from nalagen.config import NalagenConfig
    cfg = NalagenConfig()
    settings = load_settings(config_path, project)

    table = Table(
        box=box.ROUNDED,
        header_style="bold dim",
        show_lines=False,
        title="[bold]nalagen Configuration[/bold]",
    )
    table.add_column("Key", style="cyan", width=26)
    table.add_column("Value", width=60)

    sections = [
        ("Project", [
            ("name", settings.name),
            ("type", settings.type.value),
            ("root", settings.root),
            ("test output", settings.output_root),
            ("config file", settings.config_path),
            ("custom variants", len(settings.variants)),
        ]),
        ("Test execution", [
            ("test_command", cfg.test_command),
            ("test_timeout_seconds", cfg.test_timeout_seconds),
            ("max_fix_attempts", cfg.max_fix_attempts),
            ("default_branch", cfg.default_branch),
            ("default_mode", cfg.default_mode),
            ("default_milolibs", cfg.default_milolibs),
        ]),
        ("Extraction", [
            ("studio_local_url", cfg.studio_local_url),
            ("studio_branch_url", cfg.studio_branch_url),
            ("browser_headless", cfg.browser_headless),
        ]),
        ("Credentials", [
            ("IMS_EMAIL", cfg.ims_email),
            ("IMS_PASS", "***" if cfg.ims_pass else None),
        ]),
    ]

    first = True
    for section_name, fields in sections:
        if not first:
            table.add_row("", "")
        first = False
        table.add_row(f"[bold dim]── {section_name} ──[/bold dim]", "")
        for key, value in fields:
            display = "[dim](not set)[/dim]" if value is None else str(value)
            table.add_row(f"  {key}", display)

    console.print()
    console.print(table)
    for name, path in settings.import_paths.items():
        console.print(f"  [dim]import[/dim] {name}: {path}")
    console.print()
    console.print("[dim]Source: .nala-mcp.json + environment variables + .env (prefix: NALAGEN_)[/dim]")

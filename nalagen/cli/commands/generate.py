"""nalagen generate — Write page objects, specs, and tests.

Accessed via: ``nalagen generate <subcommand>``
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

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

console = Console()


def _builder(config_path, project, dry_run: bool):
    from nalagen.output import FileOutput
    from nalagen.pipeline import SuiteBuilder

    settings = load_settings(config_path, project)
    return SuiteBuilder(settings, open_registry(settings), output=FileOutput(dry_run=dry_run))


# ─── single ──────────────────────────────────────────────────────────────────


def generate_single(
    test_type: str = typer.Argument(..., help="css, functional, edit, save, discard or interaction"),
    card_id: str = typer.Argument(..., help="Card id (UUID) the tests open"),
    card_type: str = typer.Argument(..., help="Variant name, e.g. fries or ccd-slice"),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value for the studio URL"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show paths without writing"),
):
    """Generate one test type for a card using placeholder locators.

    Example:
        nalagen generate single css 26f091c2-995d-4a96-a193-d62f6c73af2f fries
    """
    from nalagen.inputs import validate_component_id, validate_component_type, validate_test_type

    try:
        tt = validate_test_type(test_type)
        component = default_component_config(
            validate_component_type(card_type),
            validate_component_id(card_id),
            milolibs or config.default_milolibs,
            [tt],
        )
        results = _builder(config_path, project, dry_run).generate(component, tt)
    except NalagenError as exc:
        fail(exc.message)

    if not print_results(results, f"{card_type} · {tt.value}"):
        raise typer.Exit(1)


# ─── suite ───────────────────────────────────────────────────────────────────


def generate_suite(
    card_id: str = typer.Argument(..., help="Card id (UUID) the tests open"),
    card_type: str = typer.Argument(..., help="Variant name"),
    test_types: list[str] = typer.Option(
        ["css", "edit", "save", "discard"], "--type", "-t", help="Repeat for each test type",
    ),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value for the studio URL"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show paths without writing"),
):
    """Generate a complete suite: one page object plus a spec and test per type.

    Example:
        nalagen generate suite 26f091c2-995d-4a96-a193-d62f6c73af2f fries -t css -t edit
    """
    from nalagen.inputs import validate_component_id, validate_component_type, validate_test_type

    try:
        types = [validate_test_type(t) for t in test_types]
        component = default_component_config(
            validate_component_type(card_type),
            validate_component_id(card_id),
            milolibs or config.default_milolibs,
            types,
        )
        per_type = _builder(config_path, project, dry_run).generate_suite(component, types)
    except NalagenError as exc:
        fail(exc.message)

    results = [r for batch in per_type.values() for r in batch]
    if not print_results(results, f"{card_type} · {len(types)} test types"):
        raise typer.Exit(1)


# ─── from-config ─────────────────────────────────────────────────────────────


def generate_from_config(
    config_file: Path = typer.Argument(..., help="Component config JSON (hand-written or from 'extract')"),
    test_type: Optional[str] = typer.Argument(None, help="Test type; default: every type in the file"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show paths without writing"),
):
    """Generate from a component config file.

    Accepts the camelCase keys written by 'nalagen extract'
    (cardType, cardId, cssProperties, ...).

    Example:
        nalagen generate from-config fries.json css
    """
    from nalagen.inputs import validate_component_type, validate_test_type

    try:
        component = read_component_config(config_file)
        validate_component_type(component.component_type)
        types = [validate_test_type(test_type)] if test_type else None
        per_type = _builder(config_path, project, dry_run).generate_suite(component, types)
    except NalagenError as exc:
        fail(exc.message)

    results = [r for batch in per_type.values() for r in batch]
    if not print_results(results, f"{component.component_type} · {config_file.name}"):
        raise typer.Exit(1)


# ─── milo ────────────────────────────────────────────────────────────────────


def generate_milo(
    block: str = typer.Argument(..., help="Block name, or feature path such as feds/header"),
    test_type: str = typer.Argument("functional", help="functional, css or interaction"),
    category: str = typer.Option("block", "--category", help="block or feature"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    project: Optional[str] = typer.Option(None, "--project", "-p", help=PROJECT_OPTION_HELP),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show paths without writing"),
):
    """Generate tests for a Milo block or feature.

    The project must be configured with type 'milo'.

    Examples:

        nalagen generate milo accordion functional -p milo

        nalagen generate milo feds/header functional --category feature -p milo
    """
    from nalagen.generators.milo import milo_category
    from nalagen.inputs import validate_run_argument, validate_test_type

    try:
        validate_run_argument(block, field="block")
        tt = validate_test_type(test_type)
        cat = milo_category(category)
        results = _builder(config_path, project, dry_run).generate_milo(block, tt, cat)
    except NalagenError as exc:
        fail(exc.message)

    if not print_results(results, f"milo {category} · {block}"):
        raise typer.Exit(1)

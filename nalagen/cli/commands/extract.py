"""nalagen extract — Read a live card's properties into a component config."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from nalagen.cli.helpers import fail
from nalagen.config import config

console = Console()


def extract_card(
    card_id: str = typer.Argument(..., help="Card id (UUID)"),
    card_type: str = typer.Argument(..., help="Variant name to record in the config"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Branch to read from"),
    milolibs: Optional[str] = typer.Option(None, "--milolibs", help="milolibs value ('local' uses localhost)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the config JSON here"),
    headed: bool = typer.Option(False, "--headed", help="Show the browser (needed for manual sign-in)"),
):
    """Open the card in Studio and extract selectors, text, and CSS.

    The result is a component config usable with 'nalagen generate from-config'.

    Example:
        nalagen extract 26f091c2-995d-4a96-a193-d62f6c73af2f fries -o fries.json
    """
    from nalagen.exceptions import NalagenError
    from nalagen.inputs import validate_component_id, validate_component_type
    from nalagen.runner.extractor import PlaywrightExtractor, studio_url, to_component_config

    branch = branch or config.default_branch
    milolibs = milolibs or config.default_milolibs
    try:
        card_id = validate_component_id(card_id)
        validate_component_type(card_type)
        console.print(f"Navigating to [cyan]{studio_url(card_id, branch, milolibs)}[/cyan]")
        extractor = PlaywrightExtractor(headless=False if headed else None)
        extracted = asyncio.run(extractor.extract(card_id, branch, milolibs))
    except NalagenError as exc:
        fail(exc.message)

    table = Table(box=box.ROUNDED, header_style="bold dim", title=f"[bold]{card_type} · {card_id}[/bold]")
    table.add_column("Element", style="cyan")
    table.add_column("Selector")
    table.add_column("Text", style="dim", max_width=40)
    for name, element in extracted.items():
        selector = f'[slot="{element.slot}"]' if element.slot else element.selector
        table.add_row(name, selector, element.text or "")
    console.print(table)

    component = to_component_config(card_type, card_id, extracted, milolibs=milolibs)
    payload = json.dumps(component.model_dump(by_alias=True, exclude_none=True, mode="json"), indent=2)
    if output:
        output.write_text(payload + "\n", encoding="utf-8")
        console.print(f"[green]✓[/green] Config written to {output}")
    else:
        console.print_json(payload)

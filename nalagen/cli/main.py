"""nalagen CLI — Typer application."""

import logging

import typer
from rich.console import Console

from nalagen.config import config
from nalagen.version import __version__

app = typer.Typer(
    name="nalagen",
    help="nalagen — Generate, validate, and self-repair NALA Playwright tests for Studio cards and Milo blocks.",
    no_args_is_help=True,
    invoke_without_command=True,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-V", is_eager=True, help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """nalagen CLI."""
    if version:
        console.print(f"nalagen v{__version__}")
        raise typer.Exit()
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# ── Core commands ──────────────────────────────────────────────────────────────
from nalagen.cli.commands import config as config_cmd, init, paths, validate  # noqa: E402

app.command(name="init", help="Point nalagen at a test project")(init.init_project)
app.command(name="config", help="Show resolved configuration")(config_cmd.config_show)
app.command(name="paths", help="Show output paths for a variant")(paths.paths_show)
app.command(name="validate", help="Structural checks on generated files")(validate.validate_files)

# ── Generation ─────────────────────────────────────────────────────────────────
from nalagen.cli.commands import generate  # noqa: E402

generate_app = typer.Typer(name="generate", help="Generate page objects, specs, and tests.")
generate_app.command("single", help="One test type with placeholder locators")(generate.generate_single)
generate_app.command("suite", help="Page object plus spec and test per test type")(generate.generate_suite)
generate_app.command("from-config", help="Generate from a component config JSON")(generate.generate_from_config)
generate_app.command("milo", help="Milo block or feature tests")(generate.generate_milo)
app.add_typer(generate_app)

# ── Execution ──────────────────────────────────────────────────────────────────
from nalagen.cli.commands import extract, run  # noqa: E402

app.command(name="run", help="Run tests by tag, once")(run.run_tests)
app.command(name="run-and-fix", help="Run tests, repair the page object, retry")(run.run_and_fix)
app.command(name="workflow", help="Generate → validate → run")(run.workflow)
app.command(name="extract", help="Extract live card properties to a config")(extract.extract_card)

# ── Variants & projects ────────────────────────────────────────────────────────
from nalagen.cli.commands import projects, variants  # noqa: E402

variants_app = typer.Typer(name="variants", help="Variant registry commands.")
variants_app.command("list", help="List registered variants")(variants.variants_list)
variants_app.command("add", help="Register and save a custom variant")(variants.variants_add)
variants_app.command("remove", help="Remove a variant")(variants.variants_remove)
variants_app.command("discover", help="Scan the project for new variants")(variants.variants_discover)
app.add_typer(variants_app)

projects_app = typer.Typer(name="projects", help="Multi-project configuration.")
projects_app.command("add", help="Add or update a project")(projects.projects_add)
app.add_typer(projects_app)


if __name__ == "__main__":
    app()

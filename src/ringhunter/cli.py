"""Ring Hunter CLI - typer application entry point."""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ringhunter.observability import close_file_logging, configure_logging, get_logger

if TYPE_CHECKING:
    from ringhunter.config import HuntConfig

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="ringhunter",
    help="Ring Hunter: search a random Middle-earth tree for the One Ring.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

# Config file picked up from the working directory when --config is not given
DEFAULT_CONFIG_FILE = Path("ringhunter.yaml")


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Write every log event to {dir}/debug.jsonl.",
            envvar="RINGHUNTER_LOG_DIR",
        ),
    ] = None,
) -> None:
    """Ring Hunter: search a random Middle-earth tree for the One Ring."""
    configure_logging(verbosity=verbose, log_to_file=log_dir is not None, log_dir=log_dir)
    if log_dir is not None:
        atexit.register(close_file_logging)


def _resolve_config(
    config_path: Path | None,
    *,
    seed: int | None = None,
    catalog: Path | None = None,
    max_branching: int | None = None,
) -> HuntConfig:
    """Merge config file, environment and CLI flags; later sources win."""
    from dataclasses import replace

    from ringhunter.config import HuntConfig, load_config

    if config_path is not None:
        config = load_config(config_path)
    elif DEFAULT_CONFIG_FILE.exists():
        config = load_config(DEFAULT_CONFIG_FILE)
    else:
        config = HuntConfig()
    config = config.with_env_overrides()

    overrides = {
        key: value
        for key, value in (
            ("seed", seed),
            ("catalog_path", catalog),
            ("max_branching", max_branching),
        )
        if value is not None
    }
    return replace(config, **overrides) if overrides else config


@app.command()
def version() -> None:
    """Show version information."""
    from ringhunter import __version__

    console.print(f"Ring Hunter v{__version__}")


@app.command()
def hunt(
    seed: Annotated[
        int | None,
        typer.Option("--seed", "-s", help="Seed for a reproducible tree."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file (default: ./ringhunter.yaml)."),
    ] = None,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", help="Vocabulary YAML file (default: packaged catalog)."),
    ] = None,
    max_branching: Annotated[
        int | None,
        typer.Option("--max-branching", "-b", min=1, help="Largest child count per node."),
    ] = None,
    show_tree: Annotated[
        bool,
        typer.Option("--show-tree", help="Print an outline of the generated tree."),
    ] = False,
    plain: Annotated[
        bool,
        typer.Option("--plain", help="Print the report as plain text, without a panel."),
    ] = False,
) -> None:
    """Generate a random tree and hunt it for the One Ring."""
    from ringhunter.api import generate_tree
    from ringhunter.api import hunt as run_hunt
    from ringhunter.errors import RingHunterError

    try:
        config = _resolve_config(
            config_path, seed=seed, catalog=catalog, max_branching=max_branching
        )
        tree = generate_tree(config)
        report = run_hunt(tree)
    except RingHunterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    log.info("hunt_reported", nodes=len(tree), visited=report.visited)

    if plain:
        if show_tree:
            typer.echo(tree.outline())
            typer.echo()
        typer.echo(report.full_report())
        return

    if show_tree:
        console.print(Panel(Text(tree.outline()), title="Middle-earth", expand=False))
    console.print(Panel(Text(report.full_report()), title="The Hunt", expand=False))


@app.command("catalog")
def show_catalog(
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", help="Vocabulary YAML file (default: packaged catalog)."),
    ] = None,
) -> None:
    """List the records available for tree construction."""
    from ringhunter.catalog import Catalog
    from ringhunter.errors import RingHunterError

    try:
        loaded = Catalog.load(catalog) if catalog is not None else Catalog.default()
    except RingHunterError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    table = Table(title=f"Catalog: {loaded.record_count()} records")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Kind", style="bold")
    for record in loaded.records:
        table.add_row(record.name, record.description, record.kind)

    console.print()
    console.print(f"Root: [bold]{loaded.root.name}[/bold] ({loaded.root.description})")
    console.print(f"Target: [bold]{loaded.target.name}[/bold] ({loaded.target.description})")
    console.print(table)

    if loaded.warnings:
        console.print(f"[yellow]![/yellow] {len(loaded.warnings)} record(s) skipped:")
        for warning in loaded.warnings:
            console.print(f"  - {warning}", markup=False)
    console.print()


if __name__ == "__main__":
    app()

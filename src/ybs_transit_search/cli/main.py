"""CLI main entry point for YBS transit search."""

import logging
import os
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from ..core import (
    CatalogError,
    NetworkError,
    PathSearchConfig,
    StopNotFoundError,
    ValidationError,
    build_config,
    within_distance,
)
from ..catalog.loader import (
    DEFAULT_ROUTES_PATH,
    DEFAULT_SNAPSHOT_PATH,
    DEFAULT_STOPS_PATH,
)
from .common import catalog_options, load_planner, resolve_stop
from .formatters import format_paths_detailed, format_paths_json, format_paths_table
from .index_commands import index
from .stop_commands import stops

console = Console()
error_console = Console(stderr=True)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level for diagnostics on stderr",
)
def cli(log_level: str) -> None:
    """YBS Transit Search - Find bus journeys between Yangon bus stops."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


@cli.command()
@click.argument("from_stop")
@click.argument("to_stop")
@catalog_options
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "detailed"]),
    default="table",
    help="Output format",
)
@click.option("--max-transfers", type=int, help="Maximum number of transfers (default: 2)")
@click.option("--max-results", "-n", type=int, help="Maximum number of paths (default: 10)")
@click.option("--max-iterations", type=int, help="Search iteration cap (default: 10000)")
@click.option("--timeout-ms", type=float, help="Search time budget in milliseconds (default: 5000)")
@click.option("--max-distance", type=float, help="Drop paths longer than this many km")
@click.option("--by-id", is_flag=True, help="Treat FROM_STOP and TO_STOP as stop ids")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed information")
def route(
    from_stop: str,
    to_stop: str,
    stops: str,
    routes: str,
    timeout: int,
    output_format: str,
    max_transfers: int | None,
    max_results: int | None,
    max_iterations: int | None,
    timeout_ms: float | None,
    max_distance: float | None,
    by_id: bool,
    verbose: bool,
) -> None:
    """Find bus journeys between two stops.

    Stop names may be given in English or Myanmar and may be partial.

    Examples:
        ybs-transit route "Hledan" "Sule"
        ybs-transit route "Insein" "Sule" --max-transfers 1 --format json
        ybs-transit route 367 512 --by-id --format detailed
    """
    try:
        config = build_config(
            max_transfers=max_transfers,
            max_paths=max_results,
            max_iterations=max_iterations,
            timeout_ms=timeout_ms,
            max_distance_km=max_distance,
        )

        planner = load_planner(stops, routes, timeout=timeout)
        origin = resolve_stop(planner, from_stop, by_id=by_id)
        destination = resolve_stop(planner, to_stop, by_id=by_id)

        with console.status(
            f"[bold green]Searching journeys from {origin.name_en} to {destination.name_en}..."
        ):
            paths = planner.find_paths(origin.stop_id, destination.stop_id, config)

        if max_distance is not None:
            paths = within_distance(paths, config.max_distance_km)

        if len(paths) == 0:
            error_console.print(
                f"[yellow]No paths found from {origin.name_en} to {destination.name_en}[/yellow]"
            )
            return

        if output_format == "json":
            click.echo(format_paths_json(paths))
        elif output_format == "detailed":
            format_paths_detailed(paths)
        else:
            format_paths_table(paths, verbose=verbose)

    except ValidationError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except StopNotFoundError as e:
        error_console.print(f"[yellow]Stop not found:[/yellow] {e}")
        sys.exit(1)
    except (CatalogError, NetworkError) as e:
        error_console.print(f"[red]Catalog error:[/red] {e}")
        sys.exit(1)


cli.add_command(stops)
cli.add_command(index)


@cli.group()
def config() -> None:
    """Configuration management."""
    pass


@config.command("show")
def show_config() -> None:
    """Show current configuration."""
    defaults = PathSearchConfig()

    console.print("[bold]Current Configuration:[/bold]")
    console.print(f"• Stop catalog: {os.environ.get('YBS_STOPS', DEFAULT_STOPS_PATH)}")
    console.print(f"• Route catalog: {os.environ.get('YBS_ROUTES', DEFAULT_ROUTES_PATH)}")
    console.print(f"• Index snapshot: {os.environ.get('YBS_SNAPSHOT', DEFAULT_SNAPSHOT_PATH)}")
    console.print(f"• Max transfers: {defaults.max_transfers}")
    console.print(f"• Max results: {defaults.max_paths}")
    console.print(f"• Max iterations: {defaults.max_iterations}")
    console.print(f"• Search time budget: {defaults.timeout_ms:g} ms")
    console.print(f"• Distance filter: {defaults.max_distance_km:g} km (advisory)")


if __name__ == "__main__":
    cli()

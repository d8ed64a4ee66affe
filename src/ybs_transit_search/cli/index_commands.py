"""CLI commands for the route index."""

import pathlib

import click
from rich.console import Console
from rich.table import Table

from ..catalog import CatalogLoader
from ..core import CatalogError, NetworkError
from ..catalog.loader import DEFAULT_ROUTES_PATH
from .common import load_route_index

console = Console()

routes_option = click.option(
    "--routes",
    "-r",
    envvar="YBS_ROUTES",
    default=DEFAULT_ROUTES_PATH,
    show_default=True,
    help="Route catalog: JSON file, directory of route*.json files, or URL",
)
snapshot_option = click.option(
    "--snapshot",
    envvar="YBS_SNAPSHOT",
    type=click.Path(),
    help="Read the index from a snapshot instead of the route catalog",
)


@click.group()
def index() -> None:
    """Route index commands."""
    pass


@index.command("info")
@routes_option
@snapshot_option
@click.option("--top", default=10, help="Number of busiest transfer points to show")
def index_info(routes: str, snapshot: str | None, top: int) -> None:
    """Show route index statistics and the busiest transfer points.

    Examples:
        ybs-transit index info
        ybs-transit index info --snapshot data/route_index.json
    """
    try:
        route_index = load_route_index(routes, snapshot=snapshot)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error reading route index:[/red] {e}")
        return

    stats = route_index.stats()

    console.print("[bold]Route Index Information[/bold]")
    console.print(f"Source: {snapshot or routes}")
    console.print(f"Routes: {stats.total_routes}")
    console.print(f"Indexed stops: {stats.total_stops}")
    console.print(f"Transfer hubs: {stats.transfer_hubs}")
    console.print(f"Average routes per stop: {stats.avg_routes_per_stop}")

    points = route_index.top_transfer_points(limit=top)
    if points:
        console.print("\n[bold]Top Transfer Points:[/bold]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Stop ID", style="cyan")
        table.add_column("Routes", style="green", justify="right")
        table.add_column("Route Keys", style="blue")

        for point in points:
            table.add_row(point.stop_id, str(point.route_count), ", ".join(point.routes))

        console.print(table)


@index.command("hubs")
@routes_option
@snapshot_option
@click.option("--limit", "-l", default=50, help="Maximum number of hubs to list")
def list_hubs(routes: str, snapshot: str | None, limit: int) -> None:
    """List transfer hubs (stops served by three or more routes).

    Examples:
        ybs-transit index hubs --limit 20
    """
    try:
        route_index = load_route_index(routes, snapshot=snapshot)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error reading route index:[/red] {e}")
        return

    hubs = route_index.transfer_hubs()
    if not hubs:
        console.print("[yellow]No transfer hubs found[/yellow]")
        return

    table = Table(
        title=f"Transfer Hubs ({len(hubs)})",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Stop ID", style="cyan", no_wrap=True)
    table.add_column("Routes", style="green", justify="right")
    table.add_column("Route Keys", style="blue")

    for stop_id in hubs[:limit]:
        keys = sorted(route_index.routes_for(stop_id))
        table.add_row(stop_id, str(len(keys)), ", ".join(keys))

    console.print(table)


@index.command("export")
@click.argument("output", type=click.Path(), envvar="YBS_SNAPSHOT")
@routes_option
def export_index(output: str, routes: str) -> None:
    """Build the route index and save a snapshot of it to OUTPUT.

    Examples:
        ybs-transit index export data/route_index.json
    """
    try:
        route_index = load_route_index(routes)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error building route index:[/red] {e}")
        return

    output_path = pathlib.Path(output)
    CatalogLoader().save_snapshot(route_index.export_snapshot(), output_path)

    stats = route_index.stats()
    console.print(
        f"[green]✓ Exported {stats.total_stops} stops and "
        f"{stats.transfer_hubs} transfer hubs to:[/green] {output_path}"
    )

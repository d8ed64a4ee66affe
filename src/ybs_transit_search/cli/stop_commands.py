"""CLI commands for stop lookup."""

import click
from rich.console import Console

from ..core import CatalogError, NetworkError
from .common import catalog_options, load_planner
from .formatters import format_stop_table

console = Console()


@click.group()
def stops() -> None:
    """Stop lookup commands."""
    pass


@stops.command("search")
@click.argument("query")
@catalog_options
@click.option("--limit", "-l", default=10, help="Maximum number of results")
@click.option("--show-scores", is_flag=True, help="Show match scores")
def search_stops(
    query: str, stops: str, routes: str, timeout: int, limit: int, show_scores: bool
) -> None:
    """Search for stops by English or Myanmar name.

    Matches are ranked exact, then prefix, then substring.

    Examples:
        ybs-transit stops search "hledan"
        ybs-transit stops search "ဆူးလေ"
        ybs-transit stops search "pyay road" --limit 5 --show-scores
    """
    try:
        planner = load_planner(stops, routes, timeout=timeout)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error loading catalogs:[/red] {e}")
        return

    results = planner.stop_resolver.search_with_scores(query, limit=limit)

    if not results:
        console.print(f"[yellow]No stops found matching '{query}'[/yellow]")
        return

    format_stop_table(
        results, title=f"Stop Search Results: '{query}'", show_scores=show_scores
    )

    if not show_scores:
        console.print(
            f"[dim]Found {len(results)} stops. Use --show-scores to see match quality.[/dim]"
        )


@stops.command("info")
@click.argument("stop_id")
@catalog_options
def stop_info(stop_id: str, stops: str, routes: str, timeout: int) -> None:
    """Show a stop and the routes serving it.

    Examples:
        ybs-transit stops info 367
    """
    try:
        planner = load_planner(stops, routes, timeout=timeout)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error loading catalogs:[/red] {e}")
        return

    stop = planner.stop_resolver.get_by_id(stop_id)
    if stop is None:
        console.print(f"[yellow]Stop '{stop_id}' not found[/yellow]")
        return

    index = planner.route_index
    serving = sorted(index.routes_for(stop.stop_id))

    console.print(f"[bold]{stop.name_en}[/bold]")
    console.print(f"• Stop ID: {stop.stop_id}")
    if stop.name_mm:
        console.print(f"• Myanmar: {stop.name_mm}")
    if stop.road_en:
        console.print(f"• Road: {stop.road_en}")
    if stop.township_en:
        console.print(f"• Township: {stop.township_en}")
    console.print(f"• Coordinates: {stop.lat}, {stop.lng}")

    if serving:
        names = [
            route.display_name if (route := index.route_data(key)) else key
            for key in serving
        ]
        console.print(f"• Routes ({len(serving)}): {', '.join(names)}")
    else:
        console.print("• Routes: [dim]none[/dim]")

    if index.is_transfer_hub(stop.stop_id):
        console.print("[green]✓ Transfer hub[/green]")


@stops.command("similar")
@click.argument("name")
@catalog_options
def similar_stops(name: str, stops: str, routes: str, timeout: int) -> None:
    """List stops whose names overlap with NAME, to spot duplicates.

    Examples:
        ybs-transit stops similar "Insein Road"
    """
    try:
        planner = load_planner(stops, routes, timeout=timeout)
    except (CatalogError, NetworkError) as e:
        console.print(f"[red]Error loading catalogs:[/red] {e}")
        return

    similar = planner.stop_resolver.find_similar(name)
    if not similar:
        console.print(f"[yellow]No stops similar to '{name}'[/yellow]")
        return

    format_stop_table(similar, title=f"Stops similar to '{name}' ({len(similar)})")

"""Output formatters for CLI display."""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import Path, Stop

console = Console()


def format_paths_table(paths: Path | list[Path], verbose: bool = False) -> None:
    """Display path(s) as rich tables."""
    if isinstance(paths, Path):
        paths = [paths]

    if not paths:
        console.print("No paths found.")
        return

    direct = sum(1 for path in paths if path.transfer_count == 0)
    console.print(
        f"[bold]{len(paths)} route{'s' if len(paths) > 1 else ''} found[/bold] "
        f"[dim]({direct} direct, {len(paths) - direct} with transfers)[/dim]"
    )

    for idx, path in enumerate(paths, 1):
        if len(paths) > 1:
            console.print(f"\n[bold cyan]Option {idx}:[/bold cyan]")

        table = Table(
            title=f"Path: {path.origin.name_en} → {path.destination.name_en}",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value", style="green")

        table.add_row("Transfers", str(path.transfer_count))
        table.add_row("Stops", str(path.total_stops))
        table.add_row("Distance", f"{path.total_distance_km} km")
        table.add_row("Score", f"{path.score:.3f}")

        console.print(table)

        leg_table = Table(title="Legs", show_header=True, header_style="bold blue")
        leg_table.add_column("Route", style="yellow")
        leg_table.add_column("Board", style="cyan")
        leg_table.add_column("Alight", style="cyan")
        leg_table.add_column("Stops", style="green", justify="right")
        leg_table.add_column("Distance", style="green", justify="right")
        if verbose:
            leg_table.add_column("Via", style="dim blue")

        for leg in path.legs:
            row_data = [
                leg.route_name,
                leg.board_stop.name_en,
                leg.alight_stop.name_en,
                str(leg.stop_count),
                f"{leg.distance_km} km",
            ]
            if verbose:
                via = [stop.name_en for stop in leg.stops[1:-1]]
                row_data.append(", ".join(via) or "-")
            leg_table.add_row(*row_data)

        console.print(leg_table)


def format_paths_detailed(paths: Path | list[Path]) -> None:
    """Display path(s) with every stop of every leg."""
    if isinstance(paths, Path):
        paths = [paths]

    if not paths:
        console.print("No paths found.")
        return

    for idx, path in enumerate(paths, 1):
        if len(paths) > 1:
            console.print(f"\n[bold cyan]Option {idx}:[/bold cyan]")

        summary_text = f"""[bold]From:[/bold] {path.origin.name_en}
[bold]To:[/bold] {path.destination.name_en}
[bold]Transfers:[/bold] {path.transfer_count}
[bold]Stops:[/bold] {path.total_stops}
[bold]Distance:[/bold] {path.total_distance_km} km
[bold]Score:[/bold] {path.score:.3f}"""

        console.print(Panel(summary_text, title="Path Summary", border_style="blue"))

        for i, leg in enumerate(path.legs, 1):
            leg_text = f"""[cyan]{leg.board_stop.name_en}[/cyan] → [cyan]{leg.alight_stop.name_en}[/cyan]
[bold]Route:[/bold] {leg.route_name} ({leg.route_key})
[bold]Stops:[/bold] {leg.stop_count}
[bold]Distance:[/bold] {leg.distance_km} km"""

            if leg.board_stop.name_mm or leg.alight_stop.name_mm:
                leg_text += (
                    f"\n[bold]Myanmar:[/bold] {leg.board_stop.name_mm or '-'}"
                    f" → {leg.alight_stop.name_mm or '-'}"
                )

            if leg.stops:
                leg_text += "\n[bold]Stops on this leg:[/bold]"
                for stop in leg.stops:
                    stop_info = stop.name_en
                    if stop.road_en:
                        stop_info += f" ({stop.road_en})"
                    leg_text += f"\n  • {stop_info}"

            console.print(
                Panel(leg_text, title=f"Leg {i}", border_style="green")
            )


def format_paths_json(paths: Path | list[Path]) -> str:
    """Format path(s) as JSON."""
    if isinstance(paths, Path):
        paths = [paths]

    return json.dumps(
        [path.model_dump(mode="json") for path in paths],
        ensure_ascii=False,
        indent=2,
    )


def format_stop_table(
    stops: list[Stop] | list[tuple[Stop, int]],
    title: str = "Stops",
    show_scores: bool = False,
) -> None:
    """Display stops, optionally with match scores, as a table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="yellow", no_wrap=True)
    if show_scores:
        table.add_column("Score", style="magenta", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Myanmar", style="dim cyan")
    table.add_column("Road", style="blue")
    table.add_column("Township", style="green")

    for item in stops:
        if isinstance(item, tuple):
            stop, score = item
        else:
            stop, score = item, None

        row_data = [stop.stop_id]
        if show_scores:
            row_data.append(str(score) if score is not None else "-")
        row_data.extend(
            [
                stop.name_en,
                stop.name_mm or "",
                stop.road_en or "",
                stop.township_en or "",
            ]
        )
        table.add_row(*row_data)

    console.print(table)

"""Shared CLI options and catalog loading."""

import pathlib
from collections.abc import Callable
from typing import Any

import click

from ..catalog import CatalogLoader
from ..catalog.loader import DEFAULT_ROUTES_PATH, DEFAULT_STOPS_PATH
from ..core import JourneyPlanner, RouteIndex, StopNotFoundError
from ..core.models import Stop


def catalog_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the --stops/--routes/--timeout options to a command."""
    func = click.option(
        "--timeout", "-t", default=30, help="Request timeout in seconds for remote catalogs"
    )(func)
    func = click.option(
        "--routes",
        "-r",
        envvar="YBS_ROUTES",
        default=DEFAULT_ROUTES_PATH,
        show_default=True,
        help="Route catalog: JSON file, directory of route*.json files, or URL",
    )(func)
    func = click.option(
        "--stops",
        "-s",
        envvar="YBS_STOPS",
        default=DEFAULT_STOPS_PATH,
        show_default=True,
        help="Stop catalog: JSON file or URL",
    )(func)
    return func


def load_planner(stops: str, routes: str, timeout: int = 30) -> JourneyPlanner:
    """Load both catalogs and build a planner over them.

    Raises:
        CatalogError: If a catalog cannot be read
        NetworkError: If a remote catalog cannot be fetched
    """
    loader = CatalogLoader(timeout=timeout)
    return JourneyPlanner.from_catalogs(
        loader.load_stops(stops), loader.load_routes(routes)
    )


def load_route_index(
    routes: str, snapshot: str | None = None, timeout: int = 30
) -> RouteIndex:
    """Build a route index from the catalog, or restore one from a snapshot."""
    loader = CatalogLoader(timeout=timeout)
    index = RouteIndex()
    if snapshot:
        index.import_snapshot(loader.load_snapshot(pathlib.Path(snapshot)))
    else:
        index.build(loader.load_routes(routes))
    return index


def resolve_stop(planner: JourneyPlanner, text: str, by_id: bool = False) -> Stop:
    """Resolve a stop from a name, or from an id when ``by_id`` is set.

    Raises:
        StopNotFoundError: If nothing matches
    """
    if by_id:
        stop = planner.stop_resolver.get_by_id(text)
    else:
        stop = planner.resolve(text)

    if stop is None:
        raise StopNotFoundError(f"No stop matches '{text}'")
    return stop

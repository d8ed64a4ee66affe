"""Inverted index from stops to the routes serving them."""

import logging
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .models import IndexSnapshot, IndexStats, Route, TransferPoint

logger = logging.getLogger(__name__)

TRANSFER_HUB_MIN_ROUTES = 3


class RouteIndex:
    """Route catalog plus a stop id → route keys lookup.

    Example: stop "367" (Hledan) → {"1", "53", "92"}.
    """

    def __init__(self) -> None:
        self.stop_to_routes: dict[str, set[str]] = {}
        self.routes: dict[str, Route] = {}
        self.hubs: set[str] = set()
        self.is_initialized = False
        self._lock = threading.Lock()

    def build(self, routes: Iterable[Any]) -> int:
        """Build the index from route records, replacing any previous state.

        Args:
            routes: Route records, each with an ordered ``stops`` list

        Returns:
            Number of routes indexed
        """
        logger.info("Building route index")
        start = time.perf_counter()

        stop_to_routes: dict[str, set[str]] = {}
        route_data: dict[str, Route] = {}
        total_entries = 0

        for record in routes:
            route = self._parse_record(record)
            if route is None:
                continue

            if route.route_key in route_data:
                logger.debug(f"Route key {route.route_key} seen twice, keeping the last")
            route_data[route.route_key] = route

            for stop_id in route.stops:
                stop_to_routes.setdefault(stop_id, set()).add(route.route_key)
                total_entries += 1

        hubs = {
            stop_id
            for stop_id, keys in stop_to_routes.items()
            if len(keys) >= TRANSFER_HUB_MIN_ROUTES
        }

        with self._lock:
            self.stop_to_routes = stop_to_routes
            self.routes = route_data
            self.hubs = hubs
            self.is_initialized = True

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Indexed {len(route_data)} routes over {len(stop_to_routes)} stops "
            f"({total_entries} stop-route entries, {len(hubs)} transfer hubs) "
            f"in {elapsed_ms:.2f}ms"
        )
        return len(route_data)

    def _parse_record(self, record: Any) -> Route | None:
        """Build a Route from a catalog record, or None if it is unusable."""
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping invalid route: {record!r}")
            return None

        stops = record.get("stops")
        if not isinstance(stops, list | tuple) or not stops:
            logger.warning(f"Skipping route without a stop list: {dict(record)!r}")
            return None

        try:
            return Route.from_record(dict(record))
        except PydanticValidationError as e:
            logger.warning(f"Skipping route with {e.error_count()} invalid fields")
            return None

    def routes_for(self, stop_id: Any) -> frozenset[str]:
        """Get the keys of all routes serving a stop.

        Args:
            stop_id: Stop identifier, coerced to string

        Returns:
            Route keys, empty if the stop is not indexed
        """
        return frozenset(self.stop_to_routes.get(str(stop_id), ()))

    def route_data(self, route_key: str) -> Route | None:
        """Get the full route by key."""
        return self.routes.get(route_key)

    def is_transfer_hub(self, stop_id: Any) -> bool:
        """Check if a stop is served by three or more routes."""
        return str(stop_id) in self.hubs

    def transfer_hubs(self) -> list[str]:
        """Get all transfer hub stop ids, sorted."""
        return sorted(self.hubs)

    def common_stops(self, route_key_a: str, route_key_b: str) -> list[str]:
        """Find stops shared by two routes, i.e. where one can change between them.

        Args:
            route_key_a: First route key
            route_key_b: Second route key

        Returns:
            Shared stop ids in the order of the second route
        """
        route_a = self.route_data(route_key_a)
        route_b = self.route_data(route_key_b)
        if route_a is None or route_b is None:
            return []

        stops_a = set(route_a.stops)
        return [stop_id for stop_id in route_b.stops if stop_id in stops_a]

    def top_transfer_points(self, limit: int = 20) -> list[TransferPoint]:
        """Get stops served by more than one route, busiest first."""
        points = [
            TransferPoint(stop_id=stop_id, route_count=len(keys), routes=sorted(keys))
            for stop_id, keys in self.stop_to_routes.items()
            if len(keys) > 1
        ]
        points.sort(key=lambda p: -p.route_count)
        return points[:limit]

    def stats(self) -> IndexStats:
        """Get statistics about the index."""
        if self.stop_to_routes:
            total = sum(len(keys) for keys in self.stop_to_routes.values())
            avg = round(total / len(self.stop_to_routes), 2)
        else:
            avg = 0.0

        return IndexStats(
            total_stops=len(self.stop_to_routes),
            total_routes=len(self.routes),
            transfer_hubs=len(self.hubs),
            avg_routes_per_stop=avg,
            is_initialized=self.is_initialized,
        )

    def is_ready(self) -> bool:
        """Check if the index can answer queries."""
        return self.is_initialized and len(self.stop_to_routes) > 0

    def export_snapshot(self) -> IndexSnapshot:
        """Export the derived mappings for caching.

        The route catalog itself is not included.
        """
        return IndexSnapshot(
            stop_to_routes={
                stop_id: sorted(keys) for stop_id, keys in self.stop_to_routes.items()
            },
            transfer_hubs=sorted(self.hubs),
        )

    def import_snapshot(self, data: IndexSnapshot | Mapping[str, Any]) -> None:
        """Restore the derived mappings from a snapshot.

        Replaces the current stop → routes mapping and hub set. The route
        catalog is left as it is.

        Args:
            data: Snapshot or its dict form
        """
        snapshot = (
            data if isinstance(data, IndexSnapshot) else IndexSnapshot.model_validate(data)
        )
        logger.info(f"Importing route index snapshot from {snapshot.generated_at}")

        stop_to_routes = {
            str(stop_id): set(keys) for stop_id, keys in snapshot.stop_to_routes.items()
        }
        hubs = {str(stop_id) for stop_id in snapshot.transfer_hubs}

        with self._lock:
            self.stop_to_routes = stop_to_routes
            self.hubs = hubs
            self.is_initialized = True

        logger.info(f"Imported {len(stop_to_routes)} stops from snapshot")

    def __len__(self) -> int:
        return len(self.routes)

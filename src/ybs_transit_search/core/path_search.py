"""Multi-transfer path search over the bus network.

The search is a breadth-first exploration of (stop, route) states bounded by
a transfer budget, an iteration cap and a wall-clock budget. It collects every
itinerary reaching the destination and ranks them afterwards; it does not
guarantee the shortest path.
"""

import logging
import time
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, NamedTuple

from ..utils.geo import estimate_road_distance_km
from .models import Leg, Path, PathSearchConfig
from .route_index import RouteIndex
from .stop_resolver import StopResolver

logger = logging.getLogger(__name__)

TRANSFER_WEIGHT = 0.5
STOPS_WEIGHT = 0.3
DISTANCE_WEIGHT = 0.2


class _LegPlan(NamedTuple):
    """A ride before it is materialized: route plus board/alight positions."""

    route_key: str
    board_stop: str
    board_pos: int
    alight_stop: str
    alight_pos: int


@dataclass(frozen=True)
class _SearchState:
    stop_id: str
    route_key: str
    position: int
    board_stop: str
    board_pos: int
    legs: tuple[_LegPlan, ...]
    visited: frozenset[str]
    transfers: int


class PathFinder:
    """Finds and ranks itineraries between two stops."""

    def __init__(self, route_index: RouteIndex, stop_resolver: StopResolver):
        """Initialize the path finder.

        Args:
            route_index: Built route index
            stop_resolver: Loaded stop catalog
        """
        self.route_index = route_index
        self.stop_resolver = stop_resolver

    def find_paths(
        self,
        from_stop_id: Any,
        to_stop_id: Any,
        config: PathSearchConfig | None = None,
    ) -> list[Path]:
        """Find ranked paths from origin to destination.

        Invalid or unreachable input gives an empty list; running out of
        iterations or time gives whatever was found so far.

        Args:
            from_stop_id: Origin stop id
            to_stop_id: Destination stop id
            config: Search limits, defaults to PathSearchConfig()

        Returns:
            Paths ranked best first, at most config.max_paths
        """
        config = config or PathSearchConfig()

        if from_stop_id is None or to_stop_id is None:
            logger.warning("Path search needs both an origin and a destination")
            return []

        origin_id = str(from_stop_id)
        destination_id = str(to_stop_id)
        logger.info(f"Finding paths from {origin_id} to {destination_id}")

        if not origin_id or not destination_id:
            logger.warning("Path search needs both an origin and a destination")
            return []

        if origin_id == destination_id:
            logger.warning("Origin and destination are the same")
            return []

        if (
            self.stop_resolver.get_by_id(origin_id) is None
            or self.stop_resolver.get_by_id(destination_id) is None
        ):
            logger.warning(f"Unknown stop in query {origin_id} → {destination_id}")
            return []

        if not self.route_index.is_ready():
            logger.warning("Route index is not ready")
            return []

        start_routes = sorted(self.route_index.routes_for(origin_id))
        if not start_routes:
            logger.warning(f"No routes serve origin stop {origin_id}")
            return []

        candidates = self._explore(origin_id, destination_id, start_routes, config)
        ranked = rank_paths(candidates, config.max_paths)
        logger.info(f"Returning top {len(ranked)} of {len(candidates)} paths")
        return ranked

    def _explore(
        self,
        origin_id: str,
        destination_id: str,
        start_routes: list[str],
        config: PathSearchConfig,
    ) -> list[Path]:
        """Breadth-first exploration collecting every path that reaches the destination."""
        start = time.perf_counter()

        queue: deque[_SearchState] = deque()
        for route_key in start_routes:
            route = self.route_index.route_data(route_key)
            position = route.position_of(origin_id) if route else None
            if position is None:
                continue
            queue.append(
                _SearchState(
                    stop_id=origin_id,
                    route_key=route_key,
                    position=position,
                    board_stop=origin_id,
                    board_pos=position,
                    legs=(),
                    visited=frozenset({origin_id}),
                    transfers=0,
                )
            )

        logger.debug(f"Starting search with {len(queue)} routes from origin")

        # (stop, route) → fewest transfers seen
        best_transfers: dict[tuple[str, str], int] = {}
        found: dict[tuple[tuple[str, str, str], ...], Path] = {}
        iterations = 0

        while queue and iterations < config.max_iterations:
            iterations += 1

            elapsed_ms = (time.perf_counter() - start) * 1000
            if elapsed_ms > config.timeout_ms:
                logger.warning(f"Search timeout reached after {elapsed_ms:.0f}ms")
                break

            state = queue.popleft()

            for position, stop_id in self._reachable_stops(state):
                if stop_id == destination_id:
                    final_leg = _LegPlan(
                        state.route_key,
                        state.board_stop,
                        state.board_pos,
                        stop_id,
                        position,
                    )
                    path = self._build_path((*state.legs, final_leg))
                    if path is not None and path.signature() not in found:
                        found[path.signature()] = path
                    continue

                visit_key = (stop_id, state.route_key)
                seen = best_transfers.get(visit_key)
                if seen is not None and seen <= state.transfers:
                    continue
                best_transfers[visit_key] = state.transfers

                visited = state.visited | {stop_id}

                # Stay on the same bus
                if stop_id not in state.visited:
                    queue.append(
                        _SearchState(
                            stop_id=stop_id,
                            route_key=state.route_key,
                            position=position,
                            board_stop=state.board_stop,
                            board_pos=state.board_pos,
                            legs=state.legs,
                            visited=visited,
                            transfers=state.transfers,
                        )
                    )

                # Change to another route here
                if state.transfers < config.max_transfers:
                    closed = _LegPlan(
                        state.route_key,
                        state.board_stop,
                        state.board_pos,
                        stop_id,
                        position,
                    )
                    queue.extend(
                        self._transfer_states(state, stop_id, closed, visited)
                    )
        else:
            if queue:
                logger.warning(f"Search stopped at the {config.max_iterations} iteration cap")

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Search completed in {iterations} iterations, {elapsed_ms:.2f}ms, "
            f"{len(found)} raw paths"
        )
        return list(found.values())

    def _transfer_states(
        self,
        state: _SearchState,
        stop_id: str,
        closed: _LegPlan,
        visited: frozenset[str],
    ) -> Iterator[_SearchState]:
        for new_route_key in sorted(self.route_index.routes_for(stop_id)):
            if new_route_key == state.route_key:
                continue

            new_route = self.route_index.route_data(new_route_key)
            position = new_route.position_of(stop_id) if new_route else None
            if position is None:
                continue

            yield _SearchState(
                stop_id=stop_id,
                route_key=new_route_key,
                position=position,
                board_stop=stop_id,
                board_pos=position,
                legs=(*state.legs, closed),
                visited=visited,
                transfers=state.transfers + 1,
            )

    def _reachable_stops(self, state: _SearchState) -> Iterator[tuple[int, str]]:
        """Stops further along the current route, forward direction only."""
        route = self.route_index.route_data(state.route_key)
        if route is None:
            return

        for position in range(state.position + 1, len(route.stops)):
            stop_id = route.stops[position]
            if self.stop_resolver.get_by_id(stop_id) is not None:
                yield position, stop_id

    def _build_path(self, plans: tuple[_LegPlan, ...]) -> Path | None:
        """Materialize planned legs into a Path with totals."""
        legs = []
        for plan in plans:
            leg = self._build_leg(plan)
            if leg is None:
                return None
            legs.append(leg)

        total_stops = sum(leg.stop_count for leg in legs)
        total_distance = sum(leg.distance_km for leg in legs)

        return Path(
            legs=legs,
            transfer_count=len(legs) - 1,
            total_stops=total_stops,
            total_distance_km=round(total_distance, 2),
        )

    def _build_leg(self, plan: _LegPlan) -> Leg | None:
        route = self.route_index.route_data(plan.route_key)
        board_stop = self.stop_resolver.get_by_id(plan.board_stop)
        alight_stop = self.stop_resolver.get_by_id(plan.alight_stop)

        if route is None or board_stop is None or alight_stop is None:
            logger.error(f"Missing data for leg {plan}")
            return None

        ridden = [
            stop
            for stop_id in route.stops[plan.board_pos : plan.alight_pos + 1]
            if (stop := self.stop_resolver.get_by_id(stop_id)) is not None
        ]
        distance = estimate_road_distance_km(
            board_stop.lat, board_stop.lng, alight_stop.lat, alight_stop.lng
        )

        return Leg(
            route_key=route.route_key,
            route_name=route.display_name,
            route_color=route.display_color,
            board_stop=board_stop.detail(),
            alight_stop=alight_stop.detail(),
            stops=ridden,
            stop_count=plan.alight_pos - plan.board_pos,
            distance_km=round(distance, 2),
        )


def rank_paths(paths: list[Path], limit: int) -> list[Path]:
    """Score and sort paths by transfers, stops and distance.

    Each criterion is normalized against the worst value in this result set,
    so scores only compare paths from the same query.

    Args:
        paths: Candidate paths
        limit: Maximum number of paths to return

    Returns:
        Scored paths, best first
    """
    if not paths:
        return []

    max_transfers = max(max(p.transfer_count for p in paths), 1)
    max_stops = max(max(p.total_stops for p in paths), 1)
    max_distance = max(max(p.total_distance_km for p in paths), 1)

    scored = []
    for path in paths:
        transfer_score = 1 - path.transfer_count / max_transfers
        stop_score = 1 - path.total_stops / max_stops
        distance_score = 1 - path.total_distance_km / max_distance

        score = (
            transfer_score * TRANSFER_WEIGHT
            + stop_score * STOPS_WEIGHT
            + distance_score * DISTANCE_WEIGHT
        )
        scored.append(path.model_copy(update={"score": round(score, 3)}))

    scored.sort(key=lambda p: (-p.score, p.transfer_count, p.total_stops))
    return scored[:limit]


def within_distance(paths: Iterable[Path], max_distance_km: float | None) -> list[Path]:
    """Drop paths longer than a distance limit; no limit keeps everything."""
    if max_distance_km is None:
        return list(paths)
    return [path for path in paths if path.total_distance_km <= max_distance_km]

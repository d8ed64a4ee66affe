"""Core journey search functionality."""

from .exceptions import (
    CatalogError,
    NetworkError,
    StopNotFoundError,
    TransitSearchError,
    ValidationError,
)
from .models import (
    IndexSnapshot,
    Leg,
    Path,
    PathSearchConfig,
    Route,
    Stop,
    StopDetail,
    derive_route_key,
)
from .path_search import PathFinder, rank_paths, within_distance
from .planner import JourneyPlanner, build_config
from .route_index import RouteIndex
from .stop_resolver import StopResolver

__all__ = [
    "IndexSnapshot",
    "JourneyPlanner",
    "Leg",
    "Path",
    "PathFinder",
    "PathSearchConfig",
    "Route",
    "RouteIndex",
    "Stop",
    "StopDetail",
    "StopResolver",
    "build_config",
    "derive_route_key",
    "rank_paths",
    "within_distance",
    "TransitSearchError",
    "StopNotFoundError",
    "CatalogError",
    "NetworkError",
    "ValidationError",
]

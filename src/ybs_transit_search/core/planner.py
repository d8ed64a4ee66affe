"""Journey planner tying stop lookup, route index and path search together."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError
from .models import Path, PathSearchConfig, Stop
from .path_search import PathFinder
from .route_index import RouteIndex
from .stop_resolver import StopResolver

logger = logging.getLogger(__name__)


def build_config(**overrides: Any) -> PathSearchConfig:
    """Build a search config from optional overrides.

    Overrides that are None fall back to the defaults.

    Raises:
        ValidationError: If a value is out of range
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return PathSearchConfig(**values)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid search configuration: {e}") from e


class JourneyPlanner:
    """Query surface over one stop catalog and one route index."""

    def __init__(self, stop_resolver: StopResolver, route_index: RouteIndex):
        self.stop_resolver = stop_resolver
        self.route_index = route_index
        self.path_finder = PathFinder(route_index, stop_resolver)

    @classmethod
    def from_catalogs(
        cls,
        stops: Mapping[Any, Any] | Iterable[Mapping[str, Any]],
        routes: Iterable[Any],
    ) -> "JourneyPlanner":
        """Create a planner from raw stop and route catalogs."""
        resolver = StopResolver()
        resolver.load(stops)
        index = RouteIndex()
        index.build(routes)
        return cls(resolver, index)

    def resolve(self, text: str | None) -> Stop | None:
        """Resolve free text to the best matching stop."""
        stop_id = self.stop_resolver.find_best_id(text)
        if stop_id is None:
            logger.info(f"No stop matches '{text}'")
            return None
        return self.stop_resolver.get_by_id(stop_id)

    def search(self, text: str | None, limit: int = 10) -> list[Stop]:
        """Search stops by name."""
        return self.stop_resolver.search(text, limit)

    def find_paths(
        self,
        from_stop_id: Any,
        to_stop_id: Any,
        config: PathSearchConfig | None = None,
    ) -> list[Path]:
        """Find ranked paths between two stop ids."""
        return self.path_finder.find_paths(from_stop_id, to_stop_id, config)

    def plan(
        self,
        from_text: str,
        to_text: str,
        config: PathSearchConfig | None = None,
    ) -> list[Path]:
        """Resolve two stop names and find ranked paths between them.

        Returns an empty list when either name does not resolve.
        """
        origin = self.resolve(from_text)
        destination = self.resolve(to_text)
        if origin is None or destination is None:
            return []
        return self.find_paths(origin.stop_id, destination.stop_id, config)

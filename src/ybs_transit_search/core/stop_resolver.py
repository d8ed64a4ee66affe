"""Stop catalog with identifier lookup and bilingual name search."""

import logging
import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..utils.text import normalize_name
from .models import ResolverStats, Stop

logger = logging.getLogger(__name__)

EXACT_MATCH = 100
STARTS_WITH = 80
CONTAINS = 50
PARTIAL = 30

# Reverse matching only kicks in for queries and keys long enough to be meaningful
MIN_PARTIAL_QUERY_LENGTH = 5
MIN_PARTIAL_KEY_LENGTH = 3


class StopResolver:
    """Maps stop identifiers and free-text names to stops.

    Every stop is indexed under the normalized form of its English name,
    Myanmar name and road name. Lookups walk the name index in insertion
    order, so ties always resolve to the earliest loaded stop.
    """

    def __init__(self) -> None:
        self.id_to_stop: dict[str, Stop] = {}
        self.name_to_ids: dict[str, list[str]] = {}
        self.is_initialized = False
        self._lock = threading.Lock()

    def load(self, catalog: Mapping[Any, Any] | Iterable[Mapping[str, Any]]) -> int:
        """Load a stop catalog, replacing anything loaded before.

        Args:
            catalog: Mapping of stop id to stop record, or a list of records
                carrying an ``id`` field

        Returns:
            Number of stops loaded
        """
        logger.info("Loading stop catalog")
        start = time.perf_counter()

        if isinstance(catalog, Mapping):
            entries = list(catalog.items())
        else:
            entries = [
                (record.get("id"), record)
                for record in catalog
                if isinstance(record, Mapping)
            ]

        id_to_stop: dict[str, Stop] = {}
        name_to_ids: dict[str, list[str]] = {}

        for raw_id, record in entries:
            stop = self._parse_record(raw_id, record)
            if stop is None:
                continue

            id_to_stop[stop.stop_id] = stop
            for field_value in (stop.name_en, stop.name_mm, stop.road_en):
                key = normalize_name(field_value)
                if not key:
                    continue
                ids = name_to_ids.setdefault(key, [])
                if stop.stop_id not in ids:
                    ids.append(stop.stop_id)

        with self._lock:
            self.id_to_stop = id_to_stop
            self.name_to_ids = name_to_ids
            self.is_initialized = True

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Loaded {len(id_to_stop)} stops in {elapsed_ms:.2f}ms")
        return len(id_to_stop)

    def _parse_record(self, raw_id: Any, record: Any) -> Stop | None:
        """Build a Stop from a catalog record, or None if it is unusable."""
        if raw_id is None or not isinstance(record, Mapping):
            logger.warning(f"Skipping malformed stop record: {raw_id!r}")
            return None

        if not record.get("name_en"):
            logger.warning(f"Skipping stop {raw_id}: missing English name")
            return None

        try:
            return Stop(
                stop_id=str(raw_id),
                name_en=record["name_en"],
                name_mm=record.get("name_mm") or None,
                lat=record.get("lat"),
                lng=record.get("lng"),
                road_en=record.get("road_en") or None,
                township_en=record.get("township_en") or None,
            )
        except PydanticValidationError as e:
            logger.warning(f"Skipping stop {raw_id}: {e.error_count()} invalid fields")
            return None

    def get_by_id(self, stop_id: Any) -> Stop | None:
        """Get a stop by identifier.

        Args:
            stop_id: Stop identifier, coerced to string

        Returns:
            Stop object if found, None otherwise
        """
        if stop_id is None:
            return None
        return self.id_to_stop.get(str(stop_id))

    def find_best_id(self, query: str | None) -> str | None:
        """Find the single best stop id for a free-text query.

        Tiers are tried in order and the first hit wins: exact name, name
        starting with the query, name containing the query, and finally a
        name longer than three characters contained in the query.

        Args:
            query: User search query in English or Myanmar

        Returns:
            Stop id or None if nothing matches
        """
        norm = normalize_name(query)
        if not norm:
            return None

        if norm in self.name_to_ids:
            return self.name_to_ids[norm][0]

        for name, ids in self.name_to_ids.items():
            if name.startswith(norm):
                return ids[0]

        for name, ids in self.name_to_ids.items():
            if norm in name:
                return ids[0]

        for name, ids in self.name_to_ids.items():
            if len(name) > MIN_PARTIAL_KEY_LENGTH and name in norm:
                return ids[0]

        return None

    def search_with_scores(self, query: str | None, limit: int = 10) -> list[tuple[Stop, int]]:
        """Search stops and return them with their match scores.

        Args:
            query: Search query
            limit: Maximum number of results

        Returns:
            List of (Stop, score) tuples sorted by score, highest first
        """
        if not self.is_initialized or limit < 1:
            return []

        norm = normalize_name(query)
        if not norm:
            return []

        scores: dict[str, int] = {}

        def collect(ids: list[str], score: int) -> None:
            for stop_id in ids:
                if stop_id not in scores:
                    scores[stop_id] = score

        if norm in self.name_to_ids:
            collect(self.name_to_ids[norm], EXACT_MATCH)

        for name, ids in self.name_to_ids.items():
            if name.startswith(norm):
                collect(ids, STARTS_WITH)

        if len(scores) < limit:
            for name, ids in self.name_to_ids.items():
                if norm in name:
                    collect(ids, CONTAINS)

        if len(scores) < limit and len(norm) > MIN_PARTIAL_QUERY_LENGTH:
            for name, ids in self.name_to_ids.items():
                if len(name) > MIN_PARTIAL_KEY_LENGTH and name in norm:
                    collect(ids, PARTIAL)

        results = [
            (self.id_to_stop[stop_id], score)
            for stop_id, score in scores.items()
            if stop_id in self.id_to_stop
        ]
        results.sort(key=lambda item: -item[1])
        return results[:limit]

    def search(self, query: str | None, limit: int = 10) -> list[Stop]:
        """Search stops by name, best matches first."""
        return [stop for stop, _score in self.search_with_scores(query, limit)]

    def find_similar(self, name: str | None) -> list[Stop]:
        """Find all stops with the same or overlapping names.

        Used to spot duplicates and ambiguous names rather than to rank.

        Args:
            name: Stop name to compare against

        Returns:
            Matching stops in index order, without duplicates
        """
        norm = normalize_name(name)
        if not norm:
            return []

        similar: list[Stop] = []
        seen: set[str] = set()
        for indexed_name, ids in self.name_to_ids.items():
            if indexed_name == norm or norm in indexed_name or indexed_name in norm:
                for stop_id in ids:
                    stop = self.id_to_stop.get(stop_id)
                    if stop and stop_id not in seen:
                        similar.append(stop)
                        seen.add(stop_id)

        return similar

    def all_stops(self) -> list[Stop]:
        """Get all loaded stops in catalog order."""
        return list(self.id_to_stop.values())

    def stats(self) -> ResolverStats:
        """Get statistics about the loaded catalog."""
        return ResolverStats(
            total_stops=len(self.id_to_stop),
            unique_names=len(self.name_to_ids),
            is_initialized=self.is_initialized,
        )

    def __len__(self) -> int:
        return len(self.id_to_stop)

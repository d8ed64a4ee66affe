"""Data models for YBS transit search."""

import re
from datetime import datetime
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN_ROUTE_KEY = "unknown"
DEFAULT_ROUTE_COLOR = "#667eea"

_ROUTE_FILE_RE = re.compile(r"route([^.]+)\.json")


class Stop(BaseModel):
    """Represents a bus stop."""

    model_config = ConfigDict(frozen=True)

    stop_id: str = Field(..., description="Catalog identifier, compared as an opaque string")
    name_en: str = Field(..., min_length=1, description="Stop name in English")
    name_mm: str | None = Field(None, description="Stop name in Myanmar")
    lat: float = Field(..., description="Latitude in degrees")
    lng: float = Field(..., description="Longitude in degrees")
    road_en: str | None = Field(None, description="Road the stop is on")
    township_en: str | None = Field(None, description="Township name")

    def __str__(self) -> str:
        return self.name_en

    def detail(self) -> "StopDetail":
        """Copy of the fields a rendered leg needs."""
        return StopDetail(
            stop_id=self.stop_id,
            name_en=self.name_en,
            name_mm=self.name_mm,
            lat=self.lat,
            lng=self.lng,
            township=self.township_en,
            road=self.road_en,
        )


class StopDetail(BaseModel):
    """Borrowed copy of a stop's display fields, attached to a leg."""

    model_config = ConfigDict(frozen=True)

    stop_id: str
    name_en: str
    name_mm: str | None = None
    lat: float
    lng: float
    township: str | None = None
    road: str | None = None

    def __str__(self) -> str:
        return self.name_en


def derive_route_key(record: dict[str, Any]) -> str:
    """Derive the index key of a route record.

    Precedence: ``route_num``, then ``route_id``, then the key parsed from a
    ``route<KEY>.json`` file name, else ``"unknown"``.
    """
    if record.get("route_num"):
        return str(record["route_num"])
    if record.get("route_id"):
        return str(record["route_id"])
    if record.get("file"):
        match = _ROUTE_FILE_RE.search(PurePath(str(record["file"])).name)
        if match:
            return match.group(1)
    return UNKNOWN_ROUTE_KEY


class Route(BaseModel):
    """Represents one direction of a bus route."""

    model_config = ConfigDict(frozen=True)

    route_key: str = Field(..., description="Index key derived from route metadata")
    name: str | None = Field(None, description="Display name")
    color: str | None = Field(None, description="Display color, hex without '#'")
    stops: tuple[str, ...] = Field(..., description="Ordered stop identifiers")
    route_num: str | None = Field(None, description="Route number from the source")
    route_id: str | None = Field(None, description="Route identifier from the source")
    file: str | None = Field(None, description="Source file name")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Route":
        """Build a route from a raw catalog record."""
        return cls(
            route_key=derive_route_key(record),
            name=record.get("name") or None,
            color=str(record["color"]) if record.get("color") else None,
            stops=tuple(str(stop_id) for stop_id in record["stops"]),
            route_num=str(record["route_num"]) if record.get("route_num") else None,
            route_id=str(record["route_id"]) if record.get("route_id") else None,
            file=str(record["file"]) if record.get("file") else None,
        )

    @property
    def display_name(self) -> str:
        return self.name or f"Route {self.route_key}"

    @property
    def display_color(self) -> str:
        if not self.color:
            return DEFAULT_ROUTE_COLOR
        return self.color if self.color.startswith("#") else f"#{self.color}"

    def position_of(self, stop_id: str, start: int = 0) -> int | None:
        """Index of the first occurrence of a stop at or after ``start``."""
        try:
            return self.stops.index(stop_id, start)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.display_name} ({len(self.stops)} stops)"


class Leg(BaseModel):
    """One uninterrupted ride on a single route."""

    model_config = ConfigDict(frozen=True)

    route_key: str = Field(..., description="Route ridden on this leg")
    route_name: str = Field(..., description="Route display name")
    route_color: str = Field(..., description="Route display color")
    board_stop: StopDetail = Field(..., description="Stop where the leg starts")
    alight_stop: StopDetail = Field(..., description="Stop where the leg ends")
    stops: list[Stop] = Field(
        default_factory=list, description="Stops ridden, board and alight included"
    )
    stop_count: int = Field(..., ge=0, description="Number of stops travelled")
    distance_km: float = Field(..., ge=0, description="Estimated road distance")

    def __str__(self) -> str:
        return f"{self.board_stop} → {self.alight_stop} ({self.route_name})"


class Path(BaseModel):
    """An itinerary made of one or more legs."""

    model_config = ConfigDict(frozen=True)

    legs: list[Leg] = Field(..., min_length=1, description="Legs in travel order")
    transfer_count: int = Field(..., ge=0, description="Number of transfers")
    total_stops: int = Field(..., ge=0, description="Stops travelled over all legs")
    total_distance_km: float = Field(..., ge=0, description="Estimated road distance")
    score: float = Field(0.0, description="Rank score, relative to one result set")

    @property
    def origin(self) -> StopDetail:
        return self.legs[0].board_stop

    @property
    def destination(self) -> StopDetail:
        return self.legs[-1].alight_stop

    def signature(self) -> tuple[tuple[str, str, str], ...]:
        """Route, board and alight ids of every leg."""
        return tuple(
            (leg.route_key, leg.board_stop.stop_id, leg.alight_stop.stop_id)
            for leg in self.legs
        )

    def summary(self) -> str:
        """Get path summary."""
        route_names = " → ".join(f"Route {leg.route_key}" for leg in self.legs)
        if self.transfer_count == 0:
            head = f"Direct: {route_names}"
        else:
            plural = "s" if self.transfer_count > 1 else ""
            head = f"{route_names} ({self.transfer_count} transfer{plural})"
        return f"{head} | {self.total_stops} stops | {self.total_distance_km}km"

    def __str__(self) -> str:
        return f"{self.origin} → {self.destination} ({self.transfer_count} transfers)"


class PathSearchConfig(BaseModel):
    """Tuning knobs for a path search."""

    max_transfers: int = Field(2, ge=0, description="Maximum number of transfers")
    max_paths: int = Field(10, ge=1, description="Maximum number of paths returned")
    max_distance_km: float | None = Field(
        50.0,
        gt=0,
        description="Advisory distance limit, only applied as a post-filter",
    )
    max_iterations: int = Field(10000, ge=1, description="Hard cap on explored states")
    timeout_ms: float = Field(5000, gt=0, description="Soft wall-clock budget")


class IndexSnapshot(BaseModel):
    """Derived route index mappings exported for caching."""

    stop_to_routes: dict[str, list[str]] = Field(default_factory=dict)
    transfer_hubs: list[str] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)


class ResolverStats(BaseModel):
    """Statistics about a loaded stop catalog."""

    total_stops: int
    unique_names: int
    is_initialized: bool


class IndexStats(BaseModel):
    """Statistics about a built route index."""

    total_stops: int
    total_routes: int
    transfer_hubs: int
    avg_routes_per_stop: float
    is_initialized: bool


class TransferPoint(BaseModel):
    """A stop served by more than one route."""

    stop_id: str
    route_count: int
    routes: list[str]

"""Utility modules for ybs-transit-search."""

from .geo import estimate_road_distance_km, haversine_km
from .text import is_myanmar_text, normalize_name

__all__ = [
    "estimate_road_distance_km",
    "haversine_km",
    "is_myanmar_text",
    "normalize_name",
]

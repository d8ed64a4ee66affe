"""Test configuration and fixtures."""

import json

import pytest

from ybs_transit_search.core.planner import JourneyPlanner
from ybs_transit_search.core.route_index import RouteIndex
from ybs_transit_search.core.stop_resolver import StopResolver


@pytest.fixture
def sample_stop_catalog():
    """Small slice of the Yangon stop catalog, keyed by stop id."""
    return {
        "001": {
            "name_en": "Hledan",
            "name_mm": "လှည်းတန်း",
            "lat": 16.8290,
            "lng": 96.1340,
            "road_en": "Insein Road",
            "township_en": "Kamaryut",
        },
        "002": {
            "name_en": "Myaynigone",
            "name_mm": "မြေနီကုန်း",
            "lat": 16.8137,
            "lng": 96.1378,
            "road_en": "Pyay Road",
            "township_en": "Sanchaung",
        },
        "003": {
            "name_en": "Shwedagon Pagoda",
            "lat": 16.7984,
            "lng": 96.1497,
            "road_en": "U Wisara Road",
            "township_en": "Dagon",
        },
        "004": {
            "name_en": "Sule",
            "name_mm": "ဆူးလေ",
            "lat": 16.7743,
            "lng": 96.1588,
            "road_en": "Sule Pagoda Road",
            "township_en": "Kyauktada",
        },
        "005": {
            "name_en": "Insein",
            "lat": 16.8906,
            "lng": 96.1035,
            "road_en": "Insein Road",
            "township_en": "Insein",
        },
        "006": {
            "name_en": "Kamaryut",
            "lat": 16.8230,
            "lng": 96.1300,
            "road_en": "Baho Road",
            "township_en": "Kamaryut",
        },
        "007": {
            "name_en": "Latha",
            "lat": 16.7760,
            "lng": 96.1520,
            "road_en": "Maha Bandula Road",
            "township_en": "Latha",
        },
        "008": {
            "name_en": "Bogyoke Market",
            "lat": 16.7800,
            "lng": 96.1550,
            "road_en": "Latha Street",
            "township_en": "Pabedan",
        },
        "009": {
            "name_mm": "အမည်မသိ",
            "lat": 16.8000,
            "lng": 96.1400,
        },
        "010": {
            "name_en": "Dala Jetty",
            "lat": 16.7680,
            "lng": 96.1600,
            "road_en": "Strand Road",
            "township_en": "Botahtaung",
        },
    }


@pytest.fixture
def sample_route_catalog():
    """Routes covering every route key source, plus two unusable records."""
    return [
        {
            "route_num": "1",
            "name": "YBS 1",
            "color": "e53935",
            "stops": ["001", "002", "003", "004"],
        },
        {"route_id": "53", "stops": ["005", "001", "006"]},
        {"file": "route92.json", "stops": ["006", "002", "008", "004"]},
        {"route_num": 36, "stops": ["003", "007", "008"]},
        {"name": "Shuttle", "stops": ["007", "003"]},
        {"route_num": "99", "stops": None},
        {"stops": "001,002"},
    ]


@pytest.fixture
def stop_resolver(sample_stop_catalog):
    """Stop resolver loaded with the sample catalog."""
    resolver = StopResolver()
    resolver.load(sample_stop_catalog)
    return resolver


@pytest.fixture
def route_index(sample_route_catalog):
    """Route index built from the sample catalog."""
    index = RouteIndex()
    index.build(sample_route_catalog)
    return index


@pytest.fixture
def planner(stop_resolver, route_index):
    """Journey planner over the sample catalogs."""
    return JourneyPlanner(stop_resolver, route_index)


@pytest.fixture
def catalog_files(tmp_path, sample_stop_catalog, sample_route_catalog):
    """Sample catalogs written to disk, returned as (stops_path, routes_path)."""
    stops_path = tmp_path / "stops.json"
    routes_path = tmp_path / "routes.json"
    stops_path.write_text(json.dumps(sample_stop_catalog, ensure_ascii=False), encoding="utf-8")
    routes_path.write_text(json.dumps(sample_route_catalog), encoding="utf-8")
    return str(stops_path), str(routes_path)

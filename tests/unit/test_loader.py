"""Unit tests for catalog loading."""

import json

import pytest
import responses

from ybs_transit_search.catalog.loader import CatalogLoader
from ybs_transit_search.core.exceptions import CatalogError
from ybs_transit_search.core.models import IndexSnapshot

STOPS_URL = "https://example.org/ybs/stops.json"
ROUTES_URL = "https://example.org/ybs/routes.json"


class TestLoadStops:
    """Test stop catalog loading."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = CatalogLoader()

    def test_load_object_file(self, catalog_files):
        stops_path, _ = catalog_files
        stops = self.loader.load_stops(stops_path)

        assert len(stops) == 10
        assert stops["004"]["name_en"] == "Sule"

    def test_load_list_file(self, tmp_path):
        path = tmp_path / "stops.json"
        path.write_text(
            json.dumps([{"id": 367, "name_en": "Hledan"}, {"name_en": "No id"}]),
            encoding="utf-8",
        )

        stops = self.loader.load_stops(path)
        assert list(stops) == ["367"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="Failed to read"):
            self.loader.load_stops(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "stops.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogError, match="Invalid JSON"):
            self.loader.load_stops(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "stops.json"
        path.write_text('"just a string"', encoding="utf-8")

        with pytest.raises(CatalogError):
            self.loader.load_stops(path)

    @responses.activate
    def test_load_from_url(self):
        responses.add(
            responses.GET,
            STOPS_URL,
            json={"001": {"name_en": "Hledan", "lat": 16.829, "lng": 96.134}},
            status=200,
        )

        stops = self.loader.load_stops(STOPS_URL)

        assert stops["001"]["name_en"] == "Hledan"
        assert len(responses.calls) == 1

    @responses.activate
    def test_url_not_found(self):
        responses.add(responses.GET, STOPS_URL, status=404)

        with pytest.raises(CatalogError, match="404"):
            self.loader.load_stops(STOPS_URL)
        assert len(responses.calls) == 1

    @responses.activate
    def test_url_invalid_body(self):
        responses.add(responses.GET, STOPS_URL, body="<html>", status=200)

        with pytest.raises(CatalogError, match="Invalid JSON"):
            self.loader.load_stops(STOPS_URL)


class TestLoadRoutes:
    """Test route catalog loading."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = CatalogLoader()

    def test_load_list_file(self, catalog_files):
        _, routes_path = catalog_files
        routes = self.loader.load_routes(routes_path)
        assert len(routes) == 7

    def test_load_wrapped_list(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text(json.dumps({"routes": [{"route_num": "1", "stops": ["1"]}]}))

        assert self.loader.load_routes(path) == [{"route_num": "1", "stops": ["1"]}]

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "routes.json"
        path.write_text(json.dumps({"route_num": "1"}))

        with pytest.raises(CatalogError):
            self.loader.load_routes(path)

    def test_load_directory(self, tmp_path):
        routes_dir = tmp_path / "routes"
        routes_dir.mkdir()
        (routes_dir / "route1.json").write_text(json.dumps({"route_num": "1", "stops": ["1", "2"]}))
        (routes_dir / "route92.json").write_text(json.dumps({"stops": ["2", "3"]}))
        (routes_dir / "route7.json").write_text("{broken")
        (routes_dir / "notes.json").write_text(json.dumps({"stops": ["9"]}))

        routes = self.loader.load_routes(routes_dir)

        assert [route["file"] for route in routes] == ["route1.json", "route92.json"]

    @responses.activate
    def test_load_from_url(self):
        responses.add(
            responses.GET,
            ROUTES_URL,
            json=[{"route_num": "1", "stops": ["001", "004"]}],
            status=200,
        )

        routes = self.loader.load_routes(ROUTES_URL)
        assert routes[0]["route_num"] == "1"


class TestSnapshots:
    """Test index snapshot persistence."""

    def test_save_and_load(self, tmp_path, route_index):
        loader = CatalogLoader()
        path = tmp_path / "cache" / "route_index.json"

        loader.save_snapshot(route_index.export_snapshot(), path)
        snapshot = loader.load_snapshot(path)

        assert path.exists()
        assert snapshot.transfer_hubs == ["003"]
        assert snapshot.stop_to_routes["001"] == ["1", "53"]

    def test_invalid_snapshot(self, tmp_path):
        path = tmp_path / "route_index.json"
        path.write_text(json.dumps({"stop_to_routes": ["not", "a", "mapping"]}))

        with pytest.raises(CatalogError, match="Invalid index snapshot"):
            CatalogLoader().load_snapshot(path)

    def test_snapshot_file_is_json(self, tmp_path):
        path = tmp_path / "route_index.json"
        CatalogLoader().save_snapshot(IndexSnapshot(transfer_hubs=["5"]), path)

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["transfer_hubs"] == ["5"]
        assert "generated_at" in data

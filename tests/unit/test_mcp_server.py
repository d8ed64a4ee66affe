"""Tests for MCP server functionality."""

import json

import pytest

from ybs_transit_search.mcp.server import TransitMCPServer


def _json_data(content):
    text = content.text
    return json.loads(text.split("```json\n", 1)[1].rsplit("\n```", 1)[0])


class TestTransitMCPServer:
    """Test cases for TransitMCPServer."""

    @pytest.fixture
    def server(self, planner):
        """Create a TransitMCPServer over the sample catalogs."""
        return TransitMCPServer(planner=planner)

    def test_server_initialization(self, server, planner):
        """Test server initialization."""
        assert server.server is not None
        assert server.server.name == "ybs-transit-search"
        assert server.planner is planner

    def test_load_planner_falls_back_to_empty_catalogs(self, monkeypatch, tmp_path):
        """Test that missing catalogs give an empty planner."""
        monkeypatch.setenv("YBS_STOPS", str(tmp_path / "missing.json"))
        monkeypatch.setenv("YBS_ROUTES", str(tmp_path / "routes"))

        server = TransitMCPServer()

        assert len(server.planner.stop_resolver) == 0
        assert not server.planner.route_index.is_ready()

    def test_load_planner_from_environment(self, monkeypatch, catalog_files):
        """Test loading catalogs named by environment variables."""
        stops, routes = catalog_files
        monkeypatch.setenv("YBS_STOPS", stops)
        monkeypatch.setenv("YBS_ROUTES", routes)

        server = TransitMCPServer()

        assert len(server.planner.stop_resolver) == 9
        assert len(server.planner.route_index) == 5

    @pytest.mark.asyncio
    async def test_list_tools(self, server):
        """Test that server has registered handlers."""
        assert hasattr(server.server, "list_tools")
        assert callable(server.server.list_tools)

    @pytest.mark.asyncio
    async def test_find_paths_success(self, server):
        """Test journey search by name."""
        result = await server._find_paths({"from_stop": "Hledan", "to_stop": "Sule"})

        assert len(result) == 2
        text = result[0].text
        assert "journeys from Hledan to Sule" in text
        assert "Direct: Route 1" in text
        assert "YBS 1: Hledan → Sule" in text

        assert "JSON Data:" in result[1].text
        paths = _json_data(result[1])
        assert paths[0]["transfer_count"] == 0
        assert paths[0]["legs"][0]["route_key"] == "1"

    @pytest.mark.asyncio
    async def test_find_paths_by_id_with_limits(self, server):
        """Test journey search by id with result limits."""
        result = await server._find_paths(
            {"from_stop": "005", "to_stop": "004", "by_id": True, "max_results": 1}
        )

        paths = _json_data(result[1])
        assert len(paths) == 1
        assert paths[0]["transfer_count"] == 1

    @pytest.mark.asyncio
    async def test_find_paths_no_journeys(self, server):
        """Test a trip with no journeys under the transfer limit."""
        result = await server._find_paths(
            {"from_stop": "Insein", "to_stop": "Sule", "max_transfers": 0}
        )

        assert len(result) == 1
        assert "No journeys found from Insein to Sule" in result[0].text

    @pytest.mark.asyncio
    async def test_find_paths_unknown_stop(self, server):
        """Test an unresolvable stop name."""
        result = await server._find_paths({"from_stop": "Thamaing", "to_stop": "Sule"})

        assert len(result) == 1
        assert "Stop 'Thamaing' not found" in result[0].text

    @pytest.mark.asyncio
    async def test_find_paths_invalid_limits(self, server):
        """Test out of range search options."""
        result = await server._find_paths(
            {"from_stop": "Hledan", "to_stop": "Sule", "max_transfers": -1}
        )

        assert "Journey search failed" in result[0].text

    @pytest.mark.asyncio
    async def test_search_stops(self, server):
        """Test stop search."""
        result = await server._search_stops({"query": "latha", "show_scores": True})

        assert len(result) == 2
        text = result[0].text
        assert "Found 2 stops matching 'latha' (English name search)" in text
        assert "(Score: 100)" in text

        stops = _json_data(result[1])
        assert [stop["stop_id"] for stop in stops] == ["007", "008"]
        assert stops[1]["search_score"] == 80

    @pytest.mark.asyncio
    async def test_search_stops_myanmar(self, server):
        """Test stop search in Myanmar script."""
        result = await server._search_stops({"query": "ဆူးလေ"})

        assert "Myanmar name search" in result[0].text
        assert "**Sule**" in result[0].text
        assert "search_score" not in result[1].text

    @pytest.mark.asyncio
    async def test_search_stops_negative_limit(self, server):
        """Test that a negative limit returns no stops."""
        result = await server._search_stops({"query": "road", "limit": -1})

        assert len(result) == 1
        assert "No stops found matching 'road'" in result[0].text

    @pytest.mark.asyncio
    async def test_search_stops_no_results(self, server):
        """Test stop search without matches."""
        result = await server._search_stops({"query": "thamaing"})

        assert len(result) == 1
        assert "No stops found matching 'thamaing'" in result[0].text

    @pytest.mark.asyncio
    async def test_get_stop_info(self, server):
        """Test stop details."""
        result = await server._get_stop_info({"stop_id": "003"})

        text = result[0].text
        assert "**Shwedagon Pagoda**" in text
        assert "1, 36, unknown" in text
        assert "Transfer hub" in text

        data = _json_data(result[1])
        assert data["routes"] == ["1", "36", "unknown"]
        assert data["is_transfer_hub"] is True

    @pytest.mark.asyncio
    async def test_get_stop_info_not_found(self, server):
        """Test details of an unknown stop."""
        result = await server._get_stop_info({"stop_id": "999"})
        assert "Stop '999' not found" in result[0].text

    @pytest.mark.asyncio
    async def test_list_transfer_hubs(self, server):
        """Test listing transfer hubs."""
        result = await server._list_transfer_hubs({})

        assert "Transfer Hubs (1 stops)" in result[0].text
        hubs = _json_data(result[1])
        assert hubs == [
            {"stop_id": "003", "name_en": "Shwedagon Pagoda", "routes": ["1", "36", "unknown"]}
        ]

    @pytest.mark.asyncio
    async def test_list_transfer_hubs_empty(self, server):
        """Test listing transfer hubs when there are none."""
        server.planner.route_index.build([{"route_num": "1", "stops": ["001", "004"]}])

        result = await server._list_transfer_hubs({"limit": 5})
        assert result[0].text == "No transfer hubs found"

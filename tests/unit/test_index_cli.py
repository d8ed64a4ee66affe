"""Tests for route index CLI commands."""

import json

from click.testing import CliRunner

from ybs_transit_search.cli.main import cli


class TestIndexCLI:
    """Test route index commands."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_info(self, catalog_files):
        _, routes = catalog_files
        result = self.runner.invoke(cli, ["index", "info", "--routes", routes])

        assert result.exit_code == 0
        assert "Routes: 5" in result.output
        assert "Indexed stops: 8" in result.output
        assert "Transfer hubs: 1" in result.output
        assert "Top Transfer Points" in result.output
        assert "003" in result.output

    def test_hubs(self, catalog_files):
        _, routes = catalog_files
        result = self.runner.invoke(cli, ["index", "hubs", "-r", routes])

        assert result.exit_code == 0
        assert "Transfer Hubs (1)" in result.output
        assert "003" in result.output
        assert "unknown" in result.output

    def test_hubs_none(self, tmp_path):
        routes = tmp_path / "routes.json"
        routes.write_text(json.dumps([{"route_num": "1", "stops": ["a", "b"]}]))

        result = self.runner.invoke(cli, ["index", "hubs", "-r", str(routes)])

        assert result.exit_code == 0
        assert "No transfer hubs found" in result.output

    def test_export_and_info_from_snapshot(self, catalog_files, tmp_path):
        _, routes = catalog_files
        output = tmp_path / "route_index.json"

        result = self.runner.invoke(cli, ["index", "export", str(output), "-r", routes])

        assert result.exit_code == 0
        assert "Exported 8 stops and 1 transfer hubs" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["transfer_hubs"] == ["003"]
        assert data["stop_to_routes"]["001"] == ["1", "53"]

        result = self.runner.invoke(cli, ["index", "info", "--snapshot", str(output)])

        assert result.exit_code == 0
        assert "Indexed stops: 8" in result.output
        assert "Transfer hubs: 1" in result.output

    def test_snapshot_from_environment(self, catalog_files, tmp_path):
        _, routes = catalog_files
        output = tmp_path / "route_index.json"
        self.runner.invoke(cli, ["index", "export", str(output), "-r", routes])

        result = self.runner.invoke(
            cli,
            ["index", "hubs", "-r", str(tmp_path / "missing.json")],
            env={"YBS_SNAPSHOT": str(output)},
        )

        assert result.exit_code == 0
        assert "Transfer Hubs (1)" in result.output
        assert "003" in result.output

    def test_missing_routes(self, tmp_path):
        result = self.runner.invoke(
            cli, ["index", "info", "-r", str(tmp_path / "missing.json")]
        )

        assert result.exit_code == 0
        assert "Error reading route index" in result.output

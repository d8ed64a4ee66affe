"""Unit tests for the journey planner."""

import pytest

from ybs_transit_search.core.exceptions import ValidationError
from ybs_transit_search.core.planner import JourneyPlanner, build_config


class TestBuildConfig:
    """Test search config construction."""

    def test_none_values_use_defaults(self):
        config = build_config(max_transfers=None, max_paths=3)
        assert config.max_transfers == 2
        assert config.max_paths == 3

    def test_invalid_value(self):
        with pytest.raises(ValidationError):
            build_config(max_transfers=-1)


class TestJourneyPlanner:
    """Test the planner surface."""

    def test_from_catalogs(self, sample_stop_catalog, sample_route_catalog):
        planner = JourneyPlanner.from_catalogs(sample_stop_catalog, sample_route_catalog)

        assert len(planner.stop_resolver) == 9
        assert len(planner.route_index) == 5
        assert planner.route_index.is_ready()

    def test_resolve(self, planner):
        assert planner.resolve("Hledan").stop_id == "001"
        assert planner.resolve("လှည်းတန်း").stop_id == "001"
        assert planner.resolve("thamaing") is None

    def test_search(self, planner):
        assert [stop.stop_id for stop in planner.search("latha")] == ["007", "008"]

    def test_plan_by_name(self, planner):
        paths = planner.plan("Hledan", "Sule")

        assert paths
        assert paths[0].origin.name_en == "Hledan"
        assert paths[0].destination.name_en == "Sule"
        assert paths[0].transfer_count == 0

    def test_plan_with_config(self, planner):
        paths = planner.plan("Insein", "Sule", build_config(max_transfers=0))
        assert paths == []

    def test_plan_unresolved_name(self, planner):
        assert planner.plan("Thamaing", "Sule") == []

    def test_find_paths_by_id(self, planner):
        paths = planner.find_paths("001", "004", build_config(max_paths=1))
        assert len(paths) == 1

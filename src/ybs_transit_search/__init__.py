"""YBS Transit Search Package

A Python package for finding bus journeys, with transfers, between stops of
the Yangon Bus Service network, with CLI and MCP server front ends.
"""

__version__ = "0.1.0"
__author__ = "anhlt"
__email__ = "tuananh.kirimaru@gmail.com"

from .core.models import Leg, Path, Route, Stop
from .core.planner import JourneyPlanner

__all__ = ["JourneyPlanner", "Leg", "Path", "Route", "Stop"]

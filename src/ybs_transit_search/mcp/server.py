"""MCP Server for YBS Transit Search.

This module implements a Model Context Protocol (MCP) server that exposes
Yangon bus journey search and stop lookup functionality.
"""

import asyncio
import json
import logging
import os
from typing import Any

from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import (
    TextContent,
    Tool,
)

from ..catalog import CatalogLoader
from ..catalog.loader import DEFAULT_ROUTES_PATH, DEFAULT_STOPS_PATH
from ..core.exceptions import CatalogError, NetworkError, ValidationError
from ..core.planner import JourneyPlanner, build_config
from ..core.route_index import RouteIndex
from ..core.stop_resolver import StopResolver
from ..utils.text import is_myanmar_text

logger = logging.getLogger(__name__)


def _json_block(data: Any) -> str:
    return f"JSON Data:\n```json\n{json.dumps(data, indent=2, ensure_ascii=False)}\n```"


class TransitMCPServer:
    """MCP Server for YBS journey search functionality."""

    def __init__(self, planner: JourneyPlanner | None = None) -> None:
        """Initialize the Transit MCP Server.

        Args:
            planner: Planner to serve; loaded from the catalogs named by
                YBS_STOPS and YBS_ROUTES when omitted
        """
        self.server = Server("ybs-transit-search")
        self.planner = planner if planner is not None else self._load_planner()

        self._register_handlers()

    def _load_planner(self) -> JourneyPlanner:
        """Load the stop and route catalogs (read-only)."""
        stops_source = os.environ.get("YBS_STOPS", DEFAULT_STOPS_PATH)
        routes_source = os.environ.get("YBS_ROUTES", DEFAULT_ROUTES_PATH)

        try:
            loader = CatalogLoader()
            planner = JourneyPlanner.from_catalogs(
                loader.load_stops(stops_source), loader.load_routes(routes_source)
            )
            logger.info(
                f"Loaded {len(planner.stop_resolver)} stops and "
                f"{len(planner.route_index.routes)} routes"
            )
            return planner
        except (CatalogError, NetworkError) as e:
            logger.warning(f"Failed to load catalogs: {e}. Starting with empty catalogs.")
            return JourneyPlanner(StopResolver(), RouteIndex())

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List available tools."""
            return [
                Tool(
                    name="find_paths",
                    description="Find bus journeys between two Yangon bus stops, ranked by transfers, stops and distance",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "from_stop": {
                                "type": "string",
                                "description": "Origin stop name (English or Myanmar) or id",
                            },
                            "to_stop": {
                                "type": "string",
                                "description": "Destination stop name (English or Myanmar) or id",
                            },
                            "by_id": {
                                "type": "boolean",
                                "description": "If true, treat from_stop and to_stop as stop ids",
                                "default": False,
                            },
                            "max_transfers": {
                                "type": "integer",
                                "description": "Maximum number of transfers",
                                "default": 2,
                                "minimum": 0,
                                "maximum": 5,
                            },
                            "max_results": {
                                "type": "integer",
                                "description": "Maximum number of journeys to return",
                                "default": 10,
                                "minimum": 1,
                                "maximum": 50,
                            },
                        },
                        "required": ["from_stop", "to_stop"],
                    },
                ),
                Tool(
                    name="search_stops",
                    description="Search Yangon bus stops by English or Myanmar name",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "query": {
                                "type": "string",
                                "description": "Stop name, road name or part of one",
                            },
                            "limit": {
                                "type": "integer",
                                "description": "Maximum number of results to return",
                                "default": 10,
                                "minimum": 1,
                                "maximum": 100,
                            },
                            "show_scores": {
                                "type": "boolean",
                                "description": "If true, include match scores in results",
                                "default": False,
                            },
                        },
                        "required": ["query"],
                    },
                ),
                Tool(
                    name="get_stop_info",
                    description="Get details of a bus stop and the routes serving it",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "stop_id": {
                                "type": "string",
                                "description": "Stop id from the catalog",
                            }
                        },
                        "required": ["stop_id"],
                    },
                ),
                Tool(
                    name="list_transfer_hubs",
                    description="List stops served by three or more routes",
                    inputSchema={
                        "type": "object",
                        "properties": {
                            "limit": {
                                "type": "integer",
                                "description": "Maximum number of results",
                                "default": 20,
                                "minimum": 1,
                                "maximum": 500,
                            },
                        },
                    },
                ),
            ]

        @self.server.call_tool()
        async def handle_call_tool(
            name: str, arguments: dict[str, Any]
        ) -> list[TextContent]:
            """Handle tool calls."""
            try:
                if name == "find_paths":
                    return await self._find_paths(arguments)
                elif name == "search_stops":
                    return await self._search_stops(arguments)
                elif name == "get_stop_info":
                    return await self._get_stop_info(arguments)
                elif name == "list_transfer_hubs":
                    return await self._list_transfer_hubs(arguments)
                else:
                    return [TextContent(type="text", text=f"Unknown tool: {name}")]

            except Exception as e:
                logger.error(f"Error in tool {name}: {e}")
                return [TextContent(type="text", text=f"Error: {str(e)}")]

    async def _find_paths(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Find ranked journeys between two stops."""
        from_text = str(arguments["from_stop"])
        to_text = str(arguments["to_stop"])
        by_id = arguments.get("by_id", False)

        try:
            config = build_config(
                max_transfers=arguments.get("max_transfers"),
                max_paths=arguments.get("max_results"),
            )
        except ValidationError as e:
            return [TextContent(type="text", text=f"Journey search failed: {str(e)}")]

        resolver = self.planner.stop_resolver
        if by_id:
            origin = resolver.get_by_id(from_text)
            destination = resolver.get_by_id(to_text)
        else:
            origin = self.planner.resolve(from_text)
            destination = self.planner.resolve(to_text)

        if origin is None:
            return [TextContent(type="text", text=f"Stop '{from_text}' not found")]
        if destination is None:
            return [TextContent(type="text", text=f"Stop '{to_text}' not found")]

        paths = self.planner.find_paths(origin.stop_id, destination.stop_id, config)
        if not paths:
            return [
                TextContent(
                    type="text",
                    text=f"No journeys found from {origin.name_en} to {destination.name_en}",
                )
            ]

        result_text = (
            f"**Found {len(paths)} journeys from {origin.name_en} "
            f"to {destination.name_en}:**\n\n"
        )
        for idx, path in enumerate(paths, 1):
            result_text += f"{idx}. **{path.summary()}** (score {path.score:.3f})\n"
            for leg in path.legs:
                result_text += (
                    f"   • {leg.route_name}: {leg.board_stop.name_en} → "
                    f"{leg.alight_stop.name_en} ({leg.stop_count} stops, {leg.distance_km} km)\n"
                )
            result_text += "\n"

        return [
            TextContent(type="text", text=result_text),
            TextContent(
                type="text",
                text=_json_block([path.model_dump(mode="json") for path in paths]),
            ),
        ]

    async def _search_stops(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Search stops by name."""
        query = arguments["query"]
        limit = arguments.get("limit", 10)
        show_scores = arguments.get("show_scores", False)

        results = self.planner.stop_resolver.search_with_scores(query, limit=limit)
        if not results:
            return [TextContent(type="text", text=f"No stops found matching '{query}'")]

        script = "Myanmar" if is_myanmar_text(query) else "English"
        result_text = f"**Found {len(results)} stops matching '{query}' ({script} name search):**\n\n"

        stops_data = []
        for i, (stop, score) in enumerate(results, 1):
            result_text += f"{i}. **{stop.name_en}** (ID: {stop.stop_id})"
            if show_scores:
                result_text += f" (Score: {score})"
            if stop.name_mm:
                result_text += f"\n   Myanmar: {stop.name_mm}"
            if stop.road_en:
                result_text += f"\n   Road: {stop.road_en}"
            if stop.township_en:
                result_text += f"\n   Township: {stop.township_en}"
            result_text += "\n\n"

            stop_data = stop.model_dump(mode="json")
            if show_scores:
                stop_data["search_score"] = score
            stops_data.append(stop_data)

        return [
            TextContent(type="text", text=result_text),
            TextContent(type="text", text=_json_block(stops_data)),
        ]

    async def _get_stop_info(self, arguments: dict[str, Any]) -> list[TextContent]:
        """Get details of a stop and the routes serving it."""
        stop_id = str(arguments["stop_id"])

        stop = self.planner.stop_resolver.get_by_id(stop_id)
        if stop is None:
            return [TextContent(type="text", text=f"Stop '{stop_id}' not found")]

        index = self.planner.route_index
        route_keys = sorted(index.routes_for(stop.stop_id))
        hub = index.is_transfer_hub(stop.stop_id)

        result_text = f"**{stop.name_en}**\n\n"
        result_text += f"• **Stop ID:** {stop.stop_id}\n"
        if stop.name_mm:
            result_text += f"• **Myanmar:** {stop.name_mm}\n"
        if stop.road_en:
            result_text += f"• **Road:** {stop.road_en}\n"
        if stop.township_en:
            result_text += f"• **Township:** {stop.township_en}\n"
        result_text += f"• **Coordinates:** {stop.lat}, {stop.lng}\n"
        if route_keys:
            result_text += f"• **Routes:** {', '.join(route_keys)}\n"
        if hub:
            result_text += "• **Transfer hub:** yes\n"

        stop_data = stop.model_dump(mode="json")
        stop_data["routes"] = route_keys
        stop_data["is_transfer_hub"] = hub

        return [
            TextContent(type="text", text=result_text),
            TextContent(type="text", text=f"\n{_json_block(stop_data)}"),
        ]

    async def _list_transfer_hubs(self, arguments: dict[str, Any]) -> list[TextContent]:
        """List transfer hubs with the routes serving them."""
        limit = arguments.get("limit", 20)

        hubs = self.planner.route_index.transfer_hubs()
        if not hubs:
            return [TextContent(type="text", text="No transfer hubs found")]

        result_text = f"**Transfer Hubs ({len(hubs)} stops):**\n\n"
        hubs_data = []
        for i, stop_id in enumerate(hubs[:limit], 1):
            stop = self.planner.stop_resolver.get_by_id(stop_id)
            route_keys = sorted(self.planner.route_index.routes_for(stop_id))
            name = stop.name_en if stop else stop_id
            result_text += f"{i}. **{name}** (ID: {stop_id}) - {len(route_keys)} routes\n"
            hubs_data.append({"stop_id": stop_id, "name_en": name, "routes": route_keys})

        return [
            TextContent(type="text", text=result_text),
            TextContent(type="text", text=_json_block(hubs_data)),
        ]


async def main() -> None:
    """Main entry point for the MCP server."""
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting YBS Transit Search MCP Server")

    server_instance = TransitMCPServer()

    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        logger.info("MCP Server running with stdio transport")
        await server_instance.server.run(
            read_stream,
            write_stream,
            InitializationOptions(
                server_name="ybs-transit-search",
                server_version="0.1.0",
                capabilities=server_instance.server.get_capabilities(
                    notification_options=NotificationOptions(),
                    experimental_capabilities={},
                ),
            ),
        )


def main_sync() -> None:
    """Synchronous wrapper for the async main function - used as entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    main_sync()

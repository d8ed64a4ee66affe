"""MCP (Model Context Protocol) server module for YBS transit search.

This module provides MCP server implementation that exposes journey search
and stop lookup functionality through the Model Context Protocol.
"""

from .server import TransitMCPServer, main

__all__ = ["TransitMCPServer", "main"]

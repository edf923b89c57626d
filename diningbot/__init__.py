"""Dining hall menu fetching, parsing and caching, with an MCP tool server."""

__version__ = "1.0.0"
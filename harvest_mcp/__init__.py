"""Harvest time tracking API exposed as MCP tools."""

__version__ = "0.2.0"

"""MCP-KB: searchable knowledge base of MCP documentation synced from GitHub."""

__version__ = "0.1.0"

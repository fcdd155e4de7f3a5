"""HTTP API for MCP-KB."""

"""Configuration module for MCP-KB."""

from mcp_kb.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]

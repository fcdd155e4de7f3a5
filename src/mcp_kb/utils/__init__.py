"""Utility helpers for MCP-KB."""

"""Cached MCP protocol specification."""

from pathlib import Path
from typing import Any

import structlog

from mcp_kb.core.exceptions import ConfigError
from mcp_kb.core.models.blocklist import utc_timestamp
from mcp_kb.repositories.jsonfile import read_json, write_json

logger = structlog.get_logger(__name__)


def default_specification() -> dict[str, Any]:
    """Protocol metadata written on first start."""
    return {
        "version": "2025-03-26",
        "lastUpdated": utc_timestamp(),
        "capabilities": {
            "tools": {"description": "Functions that can be called by the LLM", "schema": {}},
            "resources": {"description": "Data structures for context", "schema": {}},
            "prompts": {"description": "Templated message patterns", "schema": {}},
        },
        "transports": [
            {
                "name": "stdio",
                "status": "current",
                "useCases": ["Local execution", "Single-user tools"],
            },
            {
                "name": "http",
                "status": "current",
                "useCases": ["Remote servers", "Multi-user applications"],
            },
        ],
        "lifecycle": {
            "initialization": (
                "Three-way handshake: initialize request, response, initialized notification"
            ),
            "shutdown": "Graceful termination with cleanup",
        },
        "bestPractices": [
            "Validate all inputs before processing",
            "Return structured error objects with isError flag",
            "Log to stderr, never stdout (reserved for JSON-RPC)",
            "Implement retry logic with exponential backoff",
        ],
        "commonPatterns": [
            {
                "name": "Tool Implementation",
                "description": "Standard pattern for implementing MCP tools",
                "example": "See templates/tool-template.ts",
            },
            {
                "name": "Resource Exposure",
                "description": "Expose data via URI-based resources",
                "example": "See templates/resource-template.ts",
            },
        ],
    }


class SpecificationStore:
    """Stores the specification blob and returns it verbatim."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> None:
        if not self._path.exists():
            self.save(default_specification())
            logger.info("Created default specification", path=str(self._path))

    def load(self) -> dict[str, Any]:
        data = read_json(self._path)
        if not isinstance(data, dict):
            raise ConfigError(
                f"Specification in {self._path} is not a JSON object",
                details={"path": str(self._path)},
            )
        return data

    def save(self, specification: dict[str, Any]) -> None:
        write_json(self._path, specification)

"""JSON file helpers shared by the persisted stores."""

import json
from pathlib import Path
from typing import Any

from mcp_kb.core.exceptions import ConfigError


def read_json(path: Path) -> Any:
    """Read and parse a JSON file, raising ConfigError on any failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", details={"path": str(path)}) from e
    try:
        return json.loads(text)
    except ValueError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}", details={"path": str(path)}) from e


def write_json(path: Path, data: Any) -> None:
    """Write JSON to a temporary sibling, then replace the target.

    The target is either the old or the new content, never a partial
    write.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f".{path.name}.tmp")
    temp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    temp_path.replace(path)

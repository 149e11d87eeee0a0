"""Tool catalog loading.

Reads tool profiles from a JSON file holding an array of records, or from
a directory of such files (one per category, concatenated in file-name
order). Records are validated into ``ToolProfile`` and ids must be unique
across the whole catalog.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import CatalogError
from app.logging_config import get_logger
from app.metrics import CATALOG_TOOLS
from services.models import ToolProfile

logger = get_logger(__name__)


def _read_records(path: Path) -> list[dict[str, Any]]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(
            f"Catalog file is not valid JSON: {path.name}",
            details={"file": path.name, "line": e.lineno},
        ) from e

    if not isinstance(raw, list):
        raise CatalogError(
            f"Catalog file must contain a JSON array, got {type(raw).__name__}",
            details={"file": path.name},
        )
    return raw


def parse_catalog(records: list[dict[str, Any]], source: str = "<memory>") -> list[ToolProfile]:
    """Validate raw records into tool profiles, rejecting duplicate ids."""
    tools: list[ToolProfile] = []
    seen: set[str] = set()

    for index, record in enumerate(records):
        try:
            tool = ToolProfile.model_validate(record)
        except PydanticValidationError as e:
            raise CatalogError(
                f"Invalid tool record at index {index} in {source}",
                details={
                    "source": source,
                    "index": index,
                    "errors": e.errors(include_url=False, include_context=False, include_input=False),
                },
            ) from e

        if tool.id in seen:
            raise CatalogError(
                f"Duplicate tool id: {tool.id}",
                details={"source": source, "tool_id": tool.id},
            )
        seen.add(tool.id)
        tools.append(tool)

    return tools


def load_catalog(path: str | Path) -> list[ToolProfile]:
    """Load and validate a tool catalog.

    Raises ``CatalogError`` if the path doesn't exist, a file is not a
    JSON array, a record is invalid, or an id appears twice.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Catalog not found: {path}")

    if path.is_dir():
        files = sorted(path.glob("*.json"))
        if not files:
            raise CatalogError(f"No JSON files in catalog directory: {path}")
    else:
        files = [path]

    records: list[dict[str, Any]] = []
    for file in files:
        records.extend(_read_records(file))

    tools = parse_catalog(records, source=str(path))
    CATALOG_TOOLS.set(len(tools))
    logger.info("catalog_loaded", tools=len(tools), files=len(files))
    return tools

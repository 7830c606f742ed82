"""Loading of the tool catalog in structured or source-text form."""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from tulz_content.exceptions import CatalogError
from tulz_content.models import DEFAULT_TOOL_CATEGORY, ToolEntry

logger = logging.getLogger(__name__)

STRUCTURED_SUFFIXES = (".json", ".yaml", ".yml")
REQUIRED_FIELDS = ("name", "description", "href")


def load_catalog(path: Path) -> list[ToolEntry]:
    """Load the tool catalog from a file.

    JSON and YAML files are read as structured data. Anything else is
    treated as catalog source text and goes through
    ``extract_tools_from_source``.

    Args:
        path: Path to the catalog file.

    Returns:
        List of tool entries in catalog order.

    Raises:
        CatalogError: If a structured catalog cannot be decoded.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() not in STRUCTURED_SUFFIXES:
        logger.info("Extracting tools from catalog source %s", path)
        return extract_tools_from_source(text)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = f"Cannot decode tool catalog {path}: {exc}"
        raise CatalogError(msg) from exc

    if isinstance(data, dict):
        data = data.get("tools")
    if data is None:
        data = []
    if not isinstance(data, list):
        msg = f"Tool catalog {path} must be a list of tools"
        raise CatalogError(msg)

    return tools_from_records(data)


def tools_from_records(records: list[Any]) -> list[ToolEntry]:
    """Convert raw catalog mappings to tool entries, skipping incomplete ones."""
    tools = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping catalog entry %d: not a mapping", position)
            continue
        missing = [name for name in REQUIRED_FIELDS if not record.get(name)]
        if missing:
            logger.warning("Skipping catalog entry %d: missing %s", position, ", ".join(missing))
            continue

        features = record.get("features") or []
        tools.append(
            ToolEntry(
                name=str(record["name"]),
                description=str(record["description"]),
                href=str(record["href"]),
                category=str(record.get("category") or DEFAULT_TOOL_CATEGORY),
                popular=bool(record.get("popular", False)),
                features=tuple(str(feature) for feature in features) if isinstance(features, list) else (),
            )
        )
    return tools


def _collection_pattern(collection: str) -> re.Pattern[str]:
    """Compile the pattern locating an exported array in catalog source.

    Args:
        collection: Name of the exported array.

    Returns:
        Pattern whose first group is the array body.
    """
    # Everything between "export const tools: Tool[] = [" and the closing "]" at column 0
    return re.compile(
        rf"export\s+const\s+{re.escape(collection)}(?:\s*:\s*[\w\[\]<>]+)?\s*=\s*\[(.*?)\n\]",
        re.DOTALL,
    )


_RECORD_PATTERN = re.compile(r"\{.*?\n  \}", re.DOTALL)
_FIELD_PATTERNS = {
    name: re.compile(rf"""\b{name}:\s*(["'])(.*?)(?<!\\)\1""", re.DOTALL)
    for name in ("name", "description", "href", "category")
}


def extract_tools_from_source(text: str, collection: str = "tools") -> list[ToolEntry]:
    """Extract tool entries from the catalog's TypeScript source.

    Records are found by position: each ``{ ... }`` block closed by a brace
    indented two spaces is one record, and only ``name``, ``description``,
    ``href`` and ``category`` string fields are recovered. Formatting changes
    in the source can silently reduce the number of records found.

    Args:
        text: Catalog source text.
        collection: Name of the exported array.

    Returns:
        List of tool entries in source order.
    """
    match = _collection_pattern(collection).search(text)
    if not match:
        logger.warning("Collection %r not found in catalog source", collection)
        return []

    records = []
    for block in _RECORD_PATTERN.findall(match.group(1)):
        record = {}
        for name, pattern in _FIELD_PATTERNS.items():
            field_match = pattern.search(block)
            if field_match:
                record[name] = field_match.group(2)
        records.append(record)

    logger.debug("Found %d record blocks in catalog source", len(records))
    return tools_from_records(records)

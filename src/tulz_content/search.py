"""Keyword lookup over a built search index."""

import json
import logging
from pathlib import Path

from tulz_content.exceptions import IndexBuildError
from tulz_content.models import IndexRecord, RecordKind

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 2


def load_index(path: Path) -> list[IndexRecord]:
    """Read a search index artifact.

    Args:
        path: Path to the JSON index.

    Returns:
        List of records in artifact order.

    Raises:
        IndexBuildError: If the artifact is missing or not a valid index.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return [IndexRecord.from_dict(item) for item in data]
    except (OSError, ValueError, KeyError, TypeError) as exc:
        msg = f"Cannot load search index {path}: {exc}"
        raise IndexBuildError(msg) from exc


def _query_terms(query: str) -> list[str]:
    """Split a query into lowercase search terms.

    Args:
        query: Free-text query.

    Returns:
        Terms of at least ``MIN_TERM_LENGTH`` characters.
    """
    return [term for term in query.lower().split() if len(term) >= MIN_TERM_LENGTH]


def _haystack(record: IndexRecord) -> str:
    """Join the searchable fields of a record.

    Args:
        record: Index record.

    Returns:
        Lowercase text matched against query terms.
    """
    parts = [record.title, record.description, record.category, record.content_excerpt, *record.tags]
    return " ".join(parts).lower()


def search_index(
    records: list[IndexRecord],
    query: str,
    kind: RecordKind | None = None,
    category: str | None = None,
    limit: int = 10,
) -> list[IndexRecord]:
    """Return records containing every term of the query.

    Matching is case-insensitive substring matching with no scoring; the
    result keeps index order.

    Args:
        records: Loaded index records.
        query: Free-text query.
        kind: Optional record kind filter.
        category: Optional category filter.
        limit: Maximum number of results.

    Returns:
        Matching records.
    """
    terms = _query_terms(query)
    if not terms or limit <= 0:
        return []

    results = []
    for record in records:
        if kind is not None and record.kind is not kind:
            continue
        if category is not None and record.category != category:
            continue
        haystack = _haystack(record)
        if all(term in haystack for term in terms):
            results.append(record)
            if len(results) >= limit:
                break

    logger.debug("Query %r matched %d records", query, len(results))
    return results

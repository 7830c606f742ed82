"""Builder for the site's client-side search index."""

import json
import logging
import os
import tempfile
from pathlib import Path

from tulz_content.catalog import load_catalog
from tulz_content.exceptions import CatalogError, FrontMatterError, IndexBuildError
from tulz_content.models import IndexRecord, RecordKind, ToolEntry
from tulz_content.parser import POST_EXTENSION, PostParser

logger = logging.getLogger(__name__)

CONTENT_EXCERPT_LENGTH = 500
ROOT_CATEGORY = "root"


def _default_file_mode() -> int:
    """Return the mode a plain ``open`` would give a new file.

    Returns:
        0o666 with the process umask applied.
    """
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class SearchIndexBuilder:
    """Builds the search index from the blog post tree and the tool catalog."""

    BLOG_URL_PREFIX = "/blog"

    def __init__(
        self,
        content_root: Path,
        catalog_path: Path | None = None,
        parser: PostParser | None = None,
        content_excerpt_length: int = CONTENT_EXCERPT_LENGTH,
    ) -> None:
        """Initialise builder.

        Args:
            content_root: Root of the blog post tree.
            catalog_path: Tool catalog file; no tool records are built without it.
            parser: Parser used for post front matter.
            content_excerpt_length: Number of body characters kept per post.
        """
        self.content_root = Path(content_root)
        self.catalog_path = Path(catalog_path) if catalog_path else None
        self.parser = parser or PostParser()
        self.content_excerpt_length = content_excerpt_length

    def rebuild(self, output_path: Path) -> int:
        """Build the whole index in memory, then replace the artifact.

        Args:
            output_path: Destination of the JSON index.

        Returns:
            Number of records written.

        Raises:
            IndexBuildError: If a source cannot be read or the artifact cannot be written.
        """
        records = self.build()
        self.write(records, output_path)
        return len(records)

    def build(self) -> list[IndexRecord]:
        """Collect content records followed by tool records.

        Returns:
            List of index records with unique ids.

        Raises:
            IndexBuildError: If the content tree or the catalog cannot be read.
        """
        records = self.collect_content_records()

        if self.catalog_path is not None:
            try:
                tools = load_catalog(self.catalog_path)
            except (OSError, CatalogError) as exc:
                msg = f"Cannot read tool catalog {self.catalog_path}: {exc}"
                raise IndexBuildError(msg) from exc
            records.extend(self.collect_tool_records(tools))
        else:
            logger.info("No tool catalog configured; indexing content only")

        unique: list[IndexRecord] = []
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                logger.warning("Skipping duplicate index id %s", record.id)
                continue
            seen.add(record.id)
            unique.append(record)

        logger.info("Built search index with %d records", len(unique))
        return unique

    def collect_content_records(self) -> list[IndexRecord]:
        """Index every post below the content root, at any depth.

        Returns:
            List of content records in directory traversal order.

        Raises:
            IndexBuildError: If the content root does not exist or cannot be read.
        """
        if not self.content_root.is_dir():
            msg = f"Content path does not exist: {self.content_root}"
            raise IndexBuildError(msg)

        try:
            post_files = sorted(p for p in self.content_root.rglob(f"*{POST_EXTENSION}") if p.is_file())
        except OSError as exc:
            msg = f"Cannot walk content path {self.content_root}: {exc}"
            raise IndexBuildError(msg) from exc

        logger.info("Found %d post files to index", len(post_files))

        records = []
        for file_path in post_files:
            try:
                record = self._content_record(file_path)
            except FrontMatterError as exc:
                logger.warning("Failed to parse: %s (%s)", file_path, exc)
                continue
            except OSError as exc:
                msg = f"Cannot read {file_path}: {exc}"
                raise IndexBuildError(msg) from exc
            records.append(record)
            logger.debug("Indexed: %s", record.id)

        return records

    def collect_tool_records(self, tools: list[ToolEntry]) -> list[IndexRecord]:
        """Turn catalog entries into tool records numbered by position."""
        return [
            IndexRecord(
                id=f"{RecordKind.TOOL.value}-{ordinal}",
                kind=RecordKind.TOOL,
                title=tool.name,
                description=tool.description,
                category=tool.category,
                url=tool.href,
                content_excerpt=tool.description,
                tags=[],
            )
            for ordinal, tool in enumerate(tools)
        ]

    def write(self, records: list[IndexRecord], output_path: Path) -> None:
        """Write the index, replacing any previous artifact in one step.

        Args:
            records: Records to serialise.
            output_path: Destination of the JSON index.

        Raises:
            IndexBuildError: If the artifact cannot be written.
        """
        output_path = Path(output_path)
        payload = json.dumps([record.to_dict() for record in records], indent=2, ensure_ascii=False)

        temp_name = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(payload)
                handle.write("\n")
            os.chmod(temp_name, _default_file_mode())
            os.replace(temp_name, output_path)
        except OSError as exc:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            msg = f"Cannot write search index {output_path}: {exc}"
            raise IndexBuildError(msg) from exc

        logger.info("Wrote %d records to %s", len(records), output_path)

    def _content_record(self, file_path: Path) -> IndexRecord:
        """Build the index record of one post file."""
        try:
            text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"{file_path} is not valid UTF-8"
            raise FrontMatterError(msg) from exc
        meta, body = self.parser.parse(text, str(file_path))

        relative_dir = file_path.parent.relative_to(self.content_root)
        category = relative_dir.as_posix() if relative_dir.parts else ROOT_CATEGORY
        slug = file_path.stem

        return IndexRecord(
            id=f"{RecordKind.CONTENT.value}-{category}-{slug}",
            kind=RecordKind.CONTENT,
            title=meta.title,
            description=meta.description,
            category=meta.category or category,
            url=f"{self.BLOG_URL_PREFIX}/{category}/{slug}",
            content_excerpt=body[: self.content_excerpt_length],
            tags=list(meta.keywords),
            author=meta.author,
            date=meta.date,
        )

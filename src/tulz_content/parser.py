"""Parser for Tulz blog posts written as front-matter annotated MDX files."""

import logging
import math
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import frontmatter  # type: ignore[import-untyped]
import yaml

from tulz_content.exceptions import FrontMatterError
from tulz_content.models import (
    DEFAULT_AUTHOR,
    DEFAULT_AUTHOR_AVATAR,
    ContentDocument,
    FrontMatter,
)

logger = logging.getLogger(__name__)

POST_EXTENSION = ".mdx"
WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160

# Front-matter key -> FrontMatter attribute
KNOWN_KEYS = {
    "title": "title",
    "description": "description",
    "date": "date",
    "author": "author",
    "authorAvatar": "author_avatar",
    "category": "category",
    "coverImage": "cover_image",
    "featured": "featured",
    "keywords": "keywords",
}
REQUIRED_KEYS = ("title", "description", "date")

_WORD_PATTERN = re.compile(r"\S+")


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Estimate how long a text takes to read.

    Args:
        text: Body text of the post.
        words_per_minute: Assumed reading speed.

    Returns:
        Human readable estimate such as ``"4 min read"``.
    """
    words = len(_WORD_PATTERN.findall(text))
    minutes = max(1, math.ceil(words / words_per_minute))
    return f"{minutes} min read"


def make_excerpt(description: str | None, body: str, length: int = EXCERPT_LENGTH) -> str:
    """Return the explicit description, or the start of the body."""
    if description:
        return description
    return body[:length]


class PostParser:
    """Parses MDX posts into validated front matter and enriched documents."""

    def __init__(self, words_per_minute: int = WORDS_PER_MINUTE, excerpt_length: int = EXCERPT_LENGTH) -> None:
        """Initialise parser.

        Args:
            words_per_minute: Reading speed used for ``read_time``.
            excerpt_length: Number of body characters used when a post has no description.
        """
        self.words_per_minute = words_per_minute
        self.excerpt_length = excerpt_length

    def parse(self, text: str, source: str = "<string>") -> tuple[FrontMatter, str]:
        """Split a post into its front matter and body.

        Args:
            text: Full file contents.
            source: Name used in log and error messages.

        Returns:
            Tuple of validated front matter and the raw body.

        Raises:
            FrontMatterError: If the block is unparseable or fails validation.
        """
        try:
            post = frontmatter.loads(text)
        except (yaml.YAMLError, ValueError, TypeError, AttributeError) as exc:
            msg = f"Invalid front matter in {source}: {exc}"
            raise FrontMatterError(msg) from exc

        return self._validate(dict(post.metadata), source), post.content

    def parse_file(self, file_path: Path, category: str) -> ContentDocument:
        """Parse one post file and derive its computed fields.

        Args:
            file_path: Path to the ``.mdx`` file.
            category: Category directory the file belongs to.

        Returns:
            ContentDocument instance.

        Raises:
            FrontMatterError: If the file is not valid UTF-8 or its front matter is invalid.
            OSError: If the file cannot be read.
        """
        try:
            text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"{file_path} is not valid UTF-8"
            raise FrontMatterError(msg) from exc

        meta, body = self.parse(text, str(file_path))
        if meta.category and meta.category != category:
            logger.warning(
                "%s declares category %r but lives in %r; using the directory",
                file_path,
                meta.category,
                category,
            )

        return ContentDocument(
            slug=file_path.stem,
            category=category,
            title=meta.title,
            description=meta.description,
            date=meta.date,
            content=body,
            read_time=reading_time(body, self.words_per_minute),
            excerpt=make_excerpt(meta.description, body, self.excerpt_length),
            author=meta.author,
            author_avatar=meta.author_avatar,
            cover_image=meta.cover_image,
            featured=meta.featured,
            keywords=meta.keywords,
        )

    def _validate(self, metadata: dict[str, Any], source: str) -> FrontMatter:
        """Apply the front-matter schema and its defaults.

        Args:
            metadata: Raw front matter mapping.
            source: Name used in log and error messages.

        Returns:
            Validated FrontMatter instance.

        Raises:
            FrontMatterError: If a required key is missing or a value has the wrong type.
        """
        unknown = sorted(set(metadata) - set(KNOWN_KEYS))
        if unknown:
            logger.warning("Ignoring unrecognised front matter keys in %s: %s", source, ", ".join(unknown))

        for key in REQUIRED_KEYS:
            if metadata.get(key) in (None, ""):
                msg = f"Missing required front matter key {key!r} in {source}"
                raise FrontMatterError(msg)

        return FrontMatter(
            title=str(metadata["title"]),
            description=str(metadata["description"]),
            date=self._parse_date(metadata["date"], source),
            author=self._optional_str(metadata.get("author")) or DEFAULT_AUTHOR,
            author_avatar=self._optional_str(metadata.get("authorAvatar")) or DEFAULT_AUTHOR_AVATAR,
            category=self._optional_str(metadata.get("category")),
            cover_image=self._optional_str(metadata.get("coverImage")) or "",
            featured=self._parse_bool(metadata.get("featured", False), source),
            keywords=self._parse_keywords(metadata.get("keywords"), source),
        )

    @staticmethod
    def _optional_str(value: Any) -> str | None:
        """Convert an optional front matter value to a string.

        Args:
            value: Raw value.

        Returns:
            String value, or None for missing and empty values.
        """
        if value is None or value == "":
            return None
        return str(value)

    @staticmethod
    def _parse_date(value: Any, source: str) -> date:
        """Convert a front matter date to a calendar date.

        Args:
            value: YAML date, datetime or ISO string.
            source: Name used in error messages.

        Returns:
            Calendar date.

        Raises:
            FrontMatterError: If the value is not a date.
        """
        # YAML turns unquoted dates into date/datetime objects
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
            except ValueError:
                pass
        msg = f"Invalid date {value!r} in {source}"
        raise FrontMatterError(msg)

    @staticmethod
    def _parse_bool(value: Any, source: str) -> bool:
        """Convert the featured flag to a boolean.

        Args:
            value: YAML boolean or "true"/"false" string.
            source: Name used in error messages.

        Returns:
            Flag value; False when missing.

        Raises:
            FrontMatterError: If the value is not boolean-like.
        """
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        msg = f"Invalid featured flag {value!r} in {source}"
        raise FrontMatterError(msg)

    @staticmethod
    def _parse_keywords(value: Any, source: str) -> tuple[str, ...]:
        """Convert keywords to a tuple of strings.

        Args:
            value: List of strings or a comma-separated string.
            source: Name used in error messages.

        Returns:
            Keywords in order; empty when missing.

        Raises:
            FrontMatterError: If the value is neither form.
        """
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return tuple(value)
        msg = f"Invalid keywords {value!r} in {source}"
        raise FrontMatterError(msg)

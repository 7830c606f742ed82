"""Query surface over the blog post tree used at page-render time."""

import logging
from pathlib import Path

from tulz_content.exceptions import FrontMatterError
from tulz_content.models import ContentDocument
from tulz_content.parser import POST_EXTENSION, PostParser

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = ("tutorials", "tips", "news", "guides")


def is_plain_name(name: str) -> bool:
    """Check that a category or slug names a single entry inside its directory.

    Args:
        name: Category or slug taken from a request.

    Returns:
        False for empty names, "." and "..", and names containing path separators.
    """
    return name not in ("", ".", "..") and not any(sep in name for sep in ("/", "\\"))


def sort_by_date(posts: list[ContentDocument]) -> list[ContentDocument]:
    """Sort posts newest first, keeping ties in their current order."""
    return sorted(posts, key=lambda post: post.date, reverse=True)


class ContentLoader:
    """Loads blog posts from ``<content_root>/<category>/<slug>.mdx``.

    Nothing is cached: every query walks and parses the tree again.
    """

    def __init__(
        self,
        content_root: Path,
        categories: tuple[str, ...] | list[str] = DEFAULT_CATEGORIES,
        parser: PostParser | None = None,
    ) -> None:
        """Initialise loader.

        Args:
            content_root: Directory holding one subdirectory per category.
            categories: Category whitelist returned by ``list_categories``.
            parser: Parser used for post files.
        """
        self.content_root = Path(content_root)
        self.categories = tuple(categories)
        self.parser = parser or PostParser()

    def list_categories(self) -> list[str]:
        """Return the category whitelist without touching the filesystem."""
        return list(self.categories)

    def posts_in_category(self, category: str) -> list[ContentDocument]:
        """Return the posts of one category, newest first.

        Args:
            category: Category directory name.

        Returns:
            List of posts; empty when the category directory does not exist.

        Raises:
            OSError: If the directory or a post cannot be read.
        """
        if not is_plain_name(category):
            return []

        category_path = self.content_root / category
        if not category_path.is_dir():
            return []

        posts = []
        for file_path in sorted(category_path.iterdir()):
            if file_path.suffix != POST_EXTENSION or not file_path.is_file():
                continue
            try:
                posts.append(self.parser.parse_file(file_path, category))
            except FrontMatterError as exc:
                logger.warning("Skipping malformed post %s: %s", file_path, exc)

        logger.debug("Loaded %d posts from %s", len(posts), category_path)
        return sort_by_date(posts)

    def all_posts(self) -> list[ContentDocument]:
        """Return every post of every whitelisted category, newest first."""
        posts: list[ContentDocument] = []
        for category in self.list_categories():
            posts.extend(self.posts_in_category(category))
        return sort_by_date(posts)

    def post_by_slug(self, category: str, slug: str) -> ContentDocument | None:
        """Look up a single post.

        A missing file, malformed front matter and unreadable files all
        return ``None``; callers cannot tell them apart.

        Args:
            category: Category directory name.
            slug: File name without extension.

        Returns:
            ContentDocument instance or None if not found.
        """
        if not (is_plain_name(category) and is_plain_name(slug)):
            return None

        file_path = self.content_root / category / f"{slug}{POST_EXTENSION}"
        if not file_path.is_file():
            return None

        try:
            return self.parser.parse_file(file_path, category)
        except (FrontMatterError, OSError) as exc:
            logger.warning("Could not load post %s: %s", file_path, exc)
            return None

    def featured_posts(self, limit: int = 3) -> list[ContentDocument]:
        """Return up to ``limit`` featured posts, newest first."""
        return [post for post in self.all_posts() if post.featured][: max(limit, 0)]

    def related_posts(self, category: str, exclude_slug: str, limit: int = 3) -> list[ContentDocument]:
        """Return other posts from the same category.

        There is no fallback to other categories, so fewer than ``limit``
        posts come back when the category runs out.

        Args:
            category: Category of the current post.
            exclude_slug: Slug of the current post.
            limit: Maximum number of posts.

        Returns:
            List of posts, newest first.
        """
        return [post for post in self.posts_in_category(category) if post.slug != exclude_slug][: max(limit, 0)]

    def recent_posts(self, limit: int = 5) -> list[ContentDocument]:
        """Return the ``limit`` most recent posts."""
        return self.all_posts()[: max(limit, 0)]

    def popular_posts(self, limit: int = 5) -> list[ContentDocument]:
        """Return the posts shown in the "popular" widgets.

        No view counts exist, so this is the same as ``recent_posts``.
        """
        return self.recent_posts(limit)

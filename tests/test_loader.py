"""Tests for the blog content loader."""

from datetime import date
from pathlib import Path

import pytest

from tulz_content.loader import DEFAULT_CATEGORIES, ContentLoader


def write_post(root: Path, category: str, slug: str, post_date: str, featured: bool = False, **extra: str) -> Path:
    """Write a minimal post file.

    Args:
        root: Content root.
        category: Category directory.
        slug: File name without extension.
        post_date: ISO date for the front matter.
        featured: Value of the ``featured`` flag.
        **extra: Additional front matter keys.

    Returns:
        Path to the written file.
    """
    directory = root / category
    directory.mkdir(parents=True, exist_ok=True)
    lines = [
        "---",
        f"title: {slug.replace('-', ' ').title()}",
        f"description: About {slug}.",
        f"date: {post_date}",
        f"featured: {'true' if featured else 'false'}",
        *(f"{key}: {value}" for key, value in extra.items()),
        "---",
        "",
        f"Body of {slug}.",
    ]
    file_path = directory / f"{slug}.mdx"
    file_path.write_text("\n".join(lines) + "\n")
    return file_path


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Create a content tree with tutorials and an empty guides category.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        Path to the content root.
    """
    root = tmp_path / "posts"
    write_post(root, "tutorials", "json-basics", "2024-01-01")
    write_post(root, "tutorials", "regex-cheatsheet", "2024-03-01")
    (root / "guides").mkdir()
    return root


@pytest.fixture
def loader(content_root: Path) -> ContentLoader:
    """Create a loader over the sample tree.

    Args:
        content_root: Content root fixture.

    Returns:
        ContentLoader instance.
    """
    return ContentLoader(content_root)


def test_list_categories(tmp_path: Path) -> None:
    """Test that categories come from the whitelist, not the filesystem."""
    loader = ContentLoader(tmp_path / "does-not-exist")

    assert loader.list_categories() == list(DEFAULT_CATEGORIES)
    assert ContentLoader(tmp_path, categories=["a", "b"]).list_categories() == ["a", "b"]


def test_example_tree(loader: ContentLoader) -> None:
    """Test the two-post tutorials tree with an empty guides category."""
    posts = loader.all_posts()

    assert [post.slug for post in posts] == ["regex-cheatsheet", "json-basics"]
    assert posts[0].date == date(2024, 3, 1)
    assert loader.posts_in_category("guides") == []
    assert loader.post_by_slug("tutorials", "missing") is None


@pytest.mark.parametrize("category", ["news", "tips", "not-a-category"])
def test_missing_category_is_empty(loader: ContentLoader, category: str) -> None:
    """Test that absent category directories give an empty list."""
    assert loader.posts_in_category(category) == []


def test_posts_in_category_sorted(content_root: Path) -> None:
    """Test newest-first ordering within a category, ties in file order."""
    write_post(content_root, "news", "a-launch", "2024-05-01")
    write_post(content_root, "news", "b-update", "2024-05-01")
    write_post(content_root, "news", "c-older", "2023-12-31")

    posts = ContentLoader(content_root).posts_in_category("news")

    assert [post.slug for post in posts] == ["a-launch", "b-update", "c-older"]


def test_ignores_other_extensions(content_root: Path) -> None:
    """Test that only .mdx files are loaded."""
    (content_root / "tutorials" / "notes.md").write_text("---\ntitle: x\n---\n")
    (content_root / "tutorials" / "drafts.mdx").mkdir()

    posts = ContentLoader(content_root).posts_in_category("tutorials")

    assert len(posts) == 2


def test_malformed_post_skipped(content_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    """Test that a post with broken front matter is skipped with a warning."""
    (content_root / "tutorials" / "broken.mdx").write_text("---\ntitle: [oops\n---\nBody\n")

    posts = ContentLoader(content_root).posts_in_category("tutorials")

    assert len(posts) == 2
    assert "broken.mdx" in caplog.text


def test_all_posts_sorted_globally(content_root: Path) -> None:
    """Test that all_posts is ordered by non-increasing date across categories."""
    write_post(content_root, "news", "launch", "2024-02-01")
    write_post(content_root, "tips", "shortcut", "2024-04-01")
    write_post(content_root, "unlisted", "hidden", "2025-01-01")

    posts = ContentLoader(content_root).all_posts()

    dates = [post.date for post in posts]
    assert dates == sorted(dates, reverse=True)
    assert [post.slug for post in posts] == ["shortcut", "regex-cheatsheet", "launch", "json-basics"]


def test_category_slug_unique(content_root: Path) -> None:
    """Test that (category, slug) identifies each post."""
    write_post(content_root, "news", "json-basics", "2024-02-01")

    posts = ContentLoader(content_root).all_posts()
    keys = [(post.category, post.slug) for post in posts]

    assert len(keys) == len(set(keys)) == 3


def test_post_by_slug(loader: ContentLoader) -> None:
    """Test looking up a single post."""
    post = loader.post_by_slug("tutorials", "json-basics")

    assert post is not None
    assert post.title == "Json Basics"
    assert post.category == "tutorials"
    assert post.read_time == "1 min read"


def test_post_by_slug_not_found(loader: ContentLoader) -> None:
    """Test the not-found cases of post_by_slug."""
    assert loader.post_by_slug("guides", "anything") is None
    assert loader.post_by_slug("nowhere", "json-basics") is None
    assert loader.post_by_slug("tutorials", "../tutorials/json-basics") is None
    assert loader.post_by_slug("tutorials", "") is None
    assert loader.post_by_slug("..", "json-basics") is None


def test_post_by_slug_malformed(content_root: Path) -> None:
    """Test that a parse failure looks exactly like absence."""
    (content_root / "tutorials" / "broken.mdx").write_text("no front matter here\n")

    assert ContentLoader(content_root).post_by_slug("tutorials", "broken") is None


def test_featured_posts(content_root: Path) -> None:
    """Test featured filtering, ordering and limit."""
    write_post(content_root, "news", "f1", "2024-01-10", featured=True)
    write_post(content_root, "news", "f2", "2024-06-10", featured=True)
    write_post(content_root, "tips", "f3", "2024-04-10", featured=True)
    write_post(content_root, "tips", "f4", "2023-04-10", featured=True)
    loader = ContentLoader(content_root)

    featured = loader.featured_posts()

    assert [post.slug for post in featured] == ["f2", "f3", "f1"]
    assert all(post.featured for post in featured)
    assert [post.slug for post in loader.featured_posts(limit=10)] == ["f2", "f3", "f1", "f4"]
    assert loader.featured_posts(limit=0) == []


def test_related_posts(content_root: Path) -> None:
    """Test same-category related posts excluding the current one."""
    write_post(content_root, "tutorials", "css-grid", "2024-02-01")
    write_post(content_root, "tutorials", "base64", "2024-04-01")
    write_post(content_root, "news", "launch", "2024-05-01")
    loader = ContentLoader(content_root)

    related = loader.related_posts("tutorials", "regex-cheatsheet")

    assert [post.slug for post in related] == ["base64", "css-grid", "json-basics"]
    assert all(post.category == "tutorials" for post in related)
    assert len(loader.related_posts("tutorials", "regex-cheatsheet", limit=2)) == 2


def test_related_posts_no_fallback(loader: ContentLoader) -> None:
    """Test that running out of posts returns fewer results."""
    related = loader.related_posts("tutorials", "json-basics", limit=3)

    assert [post.slug for post in related] == ["regex-cheatsheet"]
    assert loader.related_posts("guides", "anything") == []


def test_popular_posts_is_recency(content_root: Path) -> None:
    """Test that popular_posts returns the most recent posts."""
    write_post(content_root, "news", "launch", "2024-05-01")
    loader = ContentLoader(content_root)

    assert [post.slug for post in loader.popular_posts(limit=2)] == ["launch", "regex-cheatsheet"]
    assert loader.popular_posts() == loader.recent_posts()
    assert len(loader.popular_posts()) == 3


def test_reads_fresh_on_every_call(content_root: Path) -> None:
    """Test that new files are picked up without any cache reset."""
    loader = ContentLoader(content_root)
    assert len(loader.all_posts()) == 2

    write_post(content_root, "guides", "new-guide", "2024-07-01")

    assert loader.all_posts()[0].slug == "new-guide"


def test_lookups_stay_inside_content_root(content_root: Path) -> None:
    """Test that category and slug values cannot reach files outside the tree."""
    write_post(content_root.parent, "outside", "secret", "2024-01-01")
    (content_root.parent / "secret.mdx").write_text(
        "---\ntitle: S\ndescription: Outside the tree\ndate: 2024-01-01\n---\nBody.\n"
    )
    loader = ContentLoader(content_root)

    assert loader.post_by_slug("..", "secret") is None
    assert loader.post_by_slug(".", "secret") is None
    assert loader.post_by_slug("../outside", "secret") is None
    assert loader.post_by_slug("tutorials", "..") is None
    assert loader.posts_in_category("..") == []
    assert loader.posts_in_category("../outside") == []
    assert loader.posts_in_category(".") == []
    assert loader.related_posts("..", "anything") == []


def test_negative_limits_return_nothing(content_root: Path) -> None:
    """Test that limits below one never return posts."""
    write_post(content_root, "news", "launch", "2024-05-01", featured=True)
    loader = ContentLoader(content_root)

    assert loader.featured_posts(limit=-1) == []
    assert loader.related_posts("tutorials", "json-basics", limit=-1) == []
    assert loader.popular_posts(limit=0) == []
    assert loader.recent_posts(limit=-2) == []

"""Command line interface for the Tulz content pipeline.

Usage::

    python -m tulz_content build-index --content-root content/posts \\
        --catalog data/tools.yaml --output public/search-index.json

    python -m tulz_content search "json formatter" --kind tool

    python -m tulz_content posts --category tutorials --limit 5
"""

import argparse
import logging
from pathlib import Path

from tulz_content.config import Settings, get_settings
from tulz_content.exceptions import IndexBuildError
from tulz_content.indexer import SearchIndexBuilder
from tulz_content.loader import ContentLoader
from tulz_content.models import RecordKind
from tulz_content.parser import PostParser
from tulz_content.search import load_index, search_index

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with its subcommands.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(prog="tulz-content", description="Tulz blog content and search index tools.")
    parser.add_argument("--log-level", help="Logging level (default from TULZ_LOG_LEVEL or INFO).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build-index", help="Regenerate the search index artifact.")
    build.add_argument("--content-root", type=Path, help="Root of the blog post tree.")
    build.add_argument("--catalog", type=Path, help="Tool catalog file (.yaml, .json or catalog source).")
    build.add_argument("--no-catalog", action="store_true", help="Index blog posts only.")
    build.add_argument("--output", type=Path, help="Destination of the JSON index.")

    search = subparsers.add_parser("search", help="Look up records in a built index.")
    search.add_argument("query", help="Keywords to look for.")
    search.add_argument("--index", type=Path, help="Path to the JSON index.")
    search.add_argument("--kind", choices=[kind.value for kind in RecordKind], help="Only this record kind.")
    search.add_argument("--category", help="Only this category.")
    search.add_argument("--limit", type=int, default=10, help="Maximum number of results.")

    posts = subparsers.add_parser("posts", help="List blog posts.")
    posts.add_argument("--content-root", type=Path, help="Root of the blog post tree.")
    posts.add_argument("--category", help="Only this category.")
    posts.add_argument("--featured", action="store_true", help="Only featured posts.")
    posts.add_argument("--limit", type=int, help="Maximum number of posts.")

    return parser


def _post_parser(settings: Settings) -> PostParser:
    """Create a post parser from settings.

    Args:
        settings: Pipeline settings.

    Returns:
        PostParser instance.
    """
    return PostParser(words_per_minute=settings.words_per_minute, excerpt_length=settings.excerpt_length)


def _run_build_index(args: argparse.Namespace, settings: Settings) -> int:
    """Run the ``build-index`` command.

    Args:
        args: Parsed command line arguments.
        settings: Pipeline settings.

    Returns:
        Exit status; 1 when the build is aborted.
    """
    catalog_path = None if args.no_catalog else (args.catalog or settings.catalog_path)
    builder = SearchIndexBuilder(
        content_root=args.content_root or settings.content_root,
        catalog_path=catalog_path,
        parser=_post_parser(settings),
        content_excerpt_length=settings.content_excerpt_length,
    )
    output_path = args.output or settings.output_path

    try:
        count = builder.rebuild(output_path)
    except IndexBuildError:
        logger.exception("Search index build failed")
        return 1

    print(f"Search index generated with {count} items: {output_path}")
    return 0


def _run_search(args: argparse.Namespace, settings: Settings) -> int:
    """Run the ``search`` command.

    Args:
        args: Parsed command line arguments.
        settings: Pipeline settings.

    Returns:
        Exit status; 1 when the index cannot be loaded.
    """
    try:
        records = load_index(args.index or settings.output_path)
    except IndexBuildError:
        logger.exception("Cannot search")
        return 1

    kind = RecordKind(args.kind) if args.kind else None
    for record in search_index(records, args.query, kind=kind, category=args.category, limit=args.limit):
        print(f"{record.id}\t{record.title}\t{record.url}")
    return 0


def _run_posts(args: argparse.Namespace, settings: Settings) -> int:
    """Run the ``posts`` command.

    Args:
        args: Parsed command line arguments.
        settings: Pipeline settings.

    Returns:
        Exit status.
    """
    loader = ContentLoader(
        args.content_root or settings.content_root,
        categories=settings.categories,
        parser=_post_parser(settings),
    )
    posts = loader.posts_in_category(args.category) if args.category else loader.all_posts()
    if args.featured:
        posts = [post for post in posts if post.featured]
    if args.limit is not None:
        posts = posts[: max(args.limit, 0)]

    for post in posts:
        print(f"{post.date.isoformat()}\t{post.category}/{post.slug}\t{post.title}\t{post.read_time}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface.

    Args:
        argv: Arguments without the program name; defaults to ``sys.argv``.

    Returns:
        Process exit status.
    """
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "build-index":
        return _run_build_index(args, settings)
    if args.command == "search":
        return _run_search(args, settings)
    return _run_posts(args, settings)

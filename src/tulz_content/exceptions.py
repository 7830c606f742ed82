"""Exceptions raised by the Tulz content pipeline."""


class ContentError(Exception):
    """Base class for content pipeline errors."""


class FrontMatterError(ContentError):
    """Raised when a post's front matter cannot be parsed or validated."""


class CatalogError(ContentError):
    """Raised when the tool catalog cannot be decoded."""


class IndexBuildError(ContentError):
    """Raised when the search index build has to be aborted."""

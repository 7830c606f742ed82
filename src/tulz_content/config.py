"""Settings for the Tulz content pipeline."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from tulz_content.indexer import CONTENT_EXCERPT_LENGTH
from tulz_content.loader import DEFAULT_CATEGORIES
from tulz_content.parser import EXCERPT_LENGTH, WORDS_PER_MINUTE


class Settings(BaseSettings):
    """Pipeline settings.

    Environment variables prefixed with ``TULZ_`` override defaults. Loaded
    from a ``.env`` file when present.
    """

    model_config = SettingsConfigDict(env_prefix="TULZ_", env_file=".env", env_file_encoding="utf-8")

    content_root: Path = Path("content/posts")
    catalog_path: Path | None = Path("data/tools.yaml")
    output_path: Path = Path("public/search-index.json")
    categories: list[str] = list(DEFAULT_CATEGORIES)

    words_per_minute: int = WORDS_PER_MINUTE
    excerpt_length: int = EXCERPT_LENGTH
    content_excerpt_length: int = CONTENT_EXCERPT_LENGTH

    log_level: str = "INFO"


def get_settings() -> Settings:
    """Return settings read from the current environment."""
    return Settings()

"""Values passed into and returned from the wiki store."""

from dataclasses import dataclass

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

__all__ = [
    "Page",
    "SearchResult",
]


@dataclass
class Page(DataClassDictMixin):
    """A page to write into the wiki."""

    prefix: str
    """Path of the page relative to the repository, with or without `.md`."""

    body: str
    """Full text content of the page."""

    message: str | None = None
    """Commit message, or a generated one when empty."""

    class Config(BaseConfig):
        omit_none = True


@dataclass(frozen=True)
class SearchResult(DataClassDictMixin):
    """A single line matched by a search."""

    page: str
    """Path of the matching file relative to the repository."""

    line_number: str
    """Line number of the match, starting at 1."""

    content: str
    """Full text of the matching line."""

"""Feed document parsing."""

from .base import FeedParser, RegexFeedParser  # noqa: F401
from .extractor import ExtractedFields, clean_text, extract_fields, parse_published_at  # noqa: F401
from .splitter import split_items  # noqa: F401

__all__ = [
    "ExtractedFields",
    "FeedParser",
    "RegexFeedParser",
    "clean_text",
    "extract_fields",
    "parse_published_at",
    "split_items",
]

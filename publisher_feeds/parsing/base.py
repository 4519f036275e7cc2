"""Document → items → fields parsing interface."""

from __future__ import annotations

from typing import List, Protocol

from .extractor import ExtractedFields, extract_fields
from .splitter import split_items


class FeedParser(Protocol):
    """Turns a raw feed document into per-item extracted fields.

    Implementations must keep the layered fallback behaviour (CDATA first,
    tag alias order, image source priority) so the normalizer and sink never
    depend on how the XML was scanned.
    """

    def split(self, document: str) -> List[str]: ...  # noqa: D401
    def extract(self, fragment: str) -> ExtractedFields: ...  # noqa: D401


class RegexFeedParser:
    """Regex-based scanner tolerant of malformed and namespace-less feeds."""

    def split(self, document: str) -> List[str]:
        return split_items(document)

    def extract(self, fragment: str) -> ExtractedFields:
        return extract_fields(fragment)

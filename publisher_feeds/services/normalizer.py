"""Assemble extracted fields into canonical article records."""

from __future__ import annotations

from typing import Optional

from publisher_feeds.models.domain import SUMMARY_MAX_LENGTH, ArticleRecord, is_absolute_http_url
from publisher_feeds.parsing.extractor import ExtractedFields, clean_text
from publisher_feeds.registry import FeedConfig


class MalformedItemError(ValueError):
    """Item lacks a required field (title or absolute link)."""


def normalize_summary(raw: Optional[str]) -> Optional[str]:
    # The extractor decoded the XML layer; what remains is HTML (raw from CDATA,
    # or unescaped from an escaped description). Render it to text once.
    if not raw:
        return None
    summary = clean_text(raw)[:SUMMARY_MAX_LENGTH].rstrip()
    return summary or None


def normalize_item(fields: ExtractedFields, config: FeedConfig, feed_url: str) -> ArticleRecord:
    title = clean_text(fields.title or "")
    if not title:
        raise MalformedItemError("title 누락")
    link = (fields.link or "").strip()
    if not is_absolute_http_url(link):
        raise MalformedItemError(f"사용할 수 없는 link: {fields.link!r}")

    image_url = fields.image_url if is_absolute_http_url(fields.image_url) else None
    return ArticleRecord(
        publisher=config.publisher_name,
        publisher_slug=config.publisher_slug,
        source_feed_url=feed_url,
        title=title,
        summary=normalize_summary(fields.summary),
        link=link,
        image_url=image_url,
        published_at=fields.published_at,
    )

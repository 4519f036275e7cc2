"""Tolerant field extraction from a single RSS item / Atom entry fragment.

Every lookup degrades to ``None`` instead of raising: feeds in the wild mix
dialects, wrap text in CDATA inconsistently and omit tags, and one missing
field must never cost the whole item.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterable, Iterator, Optional, Pattern, Tuple

from dateutil import parser as date_parser

TITLE_TAGS: Tuple[str, ...] = ("title",)
SUMMARY_TAGS: Tuple[str, ...] = ("description", "content:encoded", "summary", "content")
DATE_TAGS: Tuple[str, ...] = ("pubDate", "published", "updated", "dc:date")
TRACKING_MARKERS: Tuple[str, ...] = ("pixel", "tracking")

_TAG_RE = re.compile(r"<[^>]*>")
_WS_RE = re.compile(r"\s+")
_ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|#0?39|nbsp);", re.IGNORECASE)
_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#039": "'",
    "#39": "'",
    "nbsp": " ",
}
_IMG_SRC_RE = re.compile(r"<img\b[^>]*?\ssrc\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractedFields:
    """Raw best-effort fields pulled out of one item fragment."""

    title: Optional[str] = None
    link: Optional[str] = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None


def unescape_entities(text: str) -> str:
    """Decode the handful of entities feeds actually use, in a single pass."""
    return _ENTITY_RE.sub(lambda m: _ENTITIES[m.group(1).lower()], text)


def clean_text(html: str) -> str:
    """Strip markup, decode entities and collapse whitespace."""
    text = _TAG_RE.sub(" ", html)
    text = unescape_entities(text).replace("\xa0", " ")
    return _WS_RE.sub(" ", text).strip()


@lru_cache(maxsize=64)
def _element_patterns(tag: str) -> Tuple[Pattern[str], Pattern[str]]:
    name = re.escape(tag)
    opening = rf"<{name}(?:\s[^>]*)?(?<!/)>"
    closing = rf"</{name}\s*>"
    cdata = re.compile(rf"{opening}\s*<!\[CDATA\[(.*?)\]\]>\s*{closing}", re.IGNORECASE | re.DOTALL)
    plain = re.compile(rf"{opening}(.*?){closing}", re.IGNORECASE | re.DOTALL)
    return cdata, plain


@lru_cache(maxsize=64)
def _start_tag_pattern(tag: str) -> Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>", re.IGNORECASE)


@lru_cache(maxsize=64)
def _attr_pattern(attr: str) -> Pattern[str]:
    return re.compile(rf"\s{re.escape(attr)}\s*=\s*[\"']([^\"']*)[\"']", re.IGNORECASE)


def extract_tag(fragment: str, tag: str) -> Optional[str]:
    """Text content of the first ``tag`` element, CDATA first, then inline text."""
    cdata_re, plain_re = _element_patterns(tag)
    match = cdata_re.search(fragment)
    if match:
        value = match.group(1).strip()
        return value or None
    match = plain_re.search(fragment)
    if match:
        value = clean_text(match.group(1))
        return value or None
    return None


def _iter_attrs(fragment: str, tag: str, attr: str) -> Iterator[Tuple[str, str]]:
    """Yield ``(start_tag, value)`` for every ``tag`` carrying ``attr``."""
    attr_re = _attr_pattern(attr)
    for start in _start_tag_pattern(tag).finditer(fragment):
        found = attr_re.search(start.group(0))
        if found and found.group(1).strip():
            yield start.group(0), unescape_entities(found.group(1).strip())


def extract_attr(fragment: str, tag: str, attr: str) -> Optional[str]:
    """Value of ``attr`` on the first ``tag`` that carries it."""
    for _start, value in _iter_attrs(fragment, tag, attr):
        return value
    return None


def first_of(fragment: str, tags: Iterable[str]) -> Optional[str]:
    for tag in tags:
        value = extract_tag(fragment, tag)
        if value:
            return value
    return None


def _is_http(value: Optional[str]) -> bool:
    if not value:
        return False
    return value.lower().startswith(("http://", "https://"))


def _atom_link_href(fragment: str) -> Optional[str]:
    fallback: Optional[str] = None
    rel_re = _attr_pattern("rel")
    for start, href in _iter_attrs(fragment, "link", "href"):
        rel = rel_re.search(start)
        if rel is None or rel.group(1).strip().lower() == "alternate":
            return href
        if fallback is None:
            fallback = href
    return fallback


def extract_link(fragment: str) -> Optional[str]:
    """``<link>`` text, then Atom ``<link href>``, then ``<guid>``; first http(s) value wins."""
    for candidate in (
        extract_tag(fragment, "link"),
        _atom_link_href(fragment),
        extract_tag(fragment, "guid"),
    ):
        if candidate and _is_http(candidate.strip()):
            return candidate.strip()
    return None


def _looks_like_tracker(url: str) -> bool:
    lowered = url.lower()
    return any(marker in lowered for marker in TRACKING_MARKERS)


def _inline_image(fragment: str) -> Optional[str]:
    # descriptions are often entity-escaped HTML, so look at both renditions
    for text in (fragment, unescape_entities(fragment)):
        for match in _IMG_SRC_RE.finditer(text):
            src = unescape_entities(match.group(1).strip())
            if src and not _looks_like_tracker(src):
                return src
    return None


def extract_image(fragment: str) -> Optional[str]:
    """Media RSS content, media thumbnail, image enclosure, then first inline ``<img>``."""
    for tag in ("media:content", "media:thumbnail"):
        url = extract_attr(fragment, tag, "url")
        if url:
            return url

    type_re = _attr_pattern("type")
    for start, url in _iter_attrs(fragment, "enclosure", "url"):
        kind = type_re.search(start)
        if kind and kind.group(1).strip().lower().startswith("image"):
            return url

    return _inline_image(fragment)


def parse_published_at(raw: Optional[str]) -> Optional[datetime]:
    """Parse RFC 822 / ISO 8601 dates into an aware UTC datetime, or ``None``."""
    if not raw:
        return None
    try:
        parsed = date_parser.parse(raw.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # offsets near datetime.min/max can overflow during conversion
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


def extract_published_at(fragment: str) -> Optional[datetime]:
    for tag in DATE_TAGS:
        parsed = parse_published_at(extract_tag(fragment, tag))
        if parsed is not None:
            return parsed
    return None


def extract_fields(fragment: str) -> ExtractedFields:
    return ExtractedFields(
        title=first_of(fragment, TITLE_TAGS),
        link=extract_link(fragment),
        summary=first_of(fragment, SUMMARY_TAGS),
        image_url=extract_image(fragment),
        published_at=extract_published_at(fragment),
    )

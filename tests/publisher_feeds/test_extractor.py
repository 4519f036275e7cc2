from __future__ import annotations

from datetime import datetime, timezone

import pytest

from conftest import load_fixture

from publisher_feeds.parsing.extractor import (
    clean_text,
    extract_attr,
    extract_fields,
    extract_image,
    extract_link,
    extract_published_at,
    extract_tag,
    first_of,
    parse_published_at,
    SUMMARY_TAGS,
)
from publisher_feeds.parsing.splitter import split_items


def test_cdata_content_is_returned_verbatim():
    fragment = "<title> <![CDATA[Dune <em>Messiah</em>]]> </title>"

    assert extract_tag(fragment, "title") == "Dune <em>Messiah</em>"


def test_plain_content_is_stripped_and_unescaped():
    fragment = "<title>Tom &amp; Jerry&#039;s &quot;Big&quot;&nbsp;&lt;Day&gt;\n  <b>Out</b></title>"

    assert extract_tag(fragment, "title") == "Tom & Jerry's \"Big\" <Day> Out"


def test_entities_are_decoded_once():
    assert clean_text("AT&amp;amp;T") == "AT&amp;T"


def test_missing_or_empty_tag_is_none():
    assert extract_tag("<link>https://x.test/a</link>", "title") is None
    assert extract_tag("<title>   </title>", "title") is None
    assert extract_tag("<title/>", "title") is None


def test_tag_name_must_match_exactly():
    fragment = "<content:encoded>long form</content:encoded><titleLine>nope</titleLine>"

    assert extract_tag(fragment, "content") is None
    assert extract_tag(fragment, "title") is None
    assert extract_tag(fragment, "content:encoded") == "long form"


def test_summary_aliases_probe_in_order():
    fragment = "<summary>atom summary</summary><description>rss description</description>"

    assert first_of(fragment, SUMMARY_TAGS) == "rss description"
    assert first_of("<content>only content</content>", SUMMARY_TAGS) == "only content"


def test_link_prefers_plain_text_link():
    fragment = "<link>https://pub.test/a</link><guid>https://pub.test/guid</guid>"

    assert extract_link(fragment) == "https://pub.test/a"


def test_link_uses_atom_alternate_href():
    fragment = (
        '<link rel="self" href="https://pub.test/self.atom"/>'
        '<link rel="alternate" href="https://pub.test/post?a=1&amp;b=2"/>'
    )

    assert extract_link(fragment) == "https://pub.test/post?a=1&b=2"


def test_link_falls_back_to_guid_when_link_is_not_http():
    fragment = '<link>/relative/path</link><guid isPermaLink="true">https://pub.test/guid-link</guid>'

    assert extract_link(fragment) == "https://pub.test/guid-link"


def test_link_without_http_scheme_is_rejected():
    fragment = '<guid isPermaLink="false">urn:uuid:1234</guid>'

    assert extract_link(fragment) is None


def test_extract_attr_is_order_independent():
    fragment = '<media:content medium="image" url="https://img.test/a.jpg" />'

    assert extract_attr(fragment, "media:content", "url") == "https://img.test/a.jpg"
    assert extract_attr(fragment, "media:content", "width") is None


@pytest.mark.parametrize(
    ("fragment", "expected"),
    [
        (
            '<media:thumbnail url="https://img.test/thumb.jpg"/>'
            '<media:content url="https://img.test/content.jpg"/>',
            "https://img.test/content.jpg",
        ),
        (
            '<enclosure url="https://img.test/enc.jpg" type="image/jpeg"/>'
            '<media:thumbnail url="https://img.test/thumb.jpg"/>',
            "https://img.test/thumb.jpg",
        ),
        ('<enclosure type="image/png" length="10" url="https://img.test/enc.png"/>', "https://img.test/enc.png"),
        ('<enclosure url="https://img.test/enc.jpg" type="image/jpeg"/>', "https://img.test/enc.jpg"),
        ('<enclosure url="https://audio.test/ep.mp3" type="audio/mpeg"/>', None),
    ],
)
def test_image_source_priority(fragment, expected):
    assert extract_image(fragment) == expected


def test_thumbnail_beats_inline_image():
    fragment = (
        '<description><![CDATA[<img src="https://img.test/inline.jpg">]]></description>'
        '<media:thumbnail url="https://img.test/thumb.jpg"/>'
    )

    assert extract_image(fragment) == "https://img.test/thumb.jpg"


def test_inline_image_skips_tracking_pixels():
    fragment = (
        '<content:encoded><![CDATA[<img src="https://feeds.test/pixel.gif">'
        '<img src="https://cdn.test/tracking/1x1.png"><img src="https://cdn.test/cover.jpg">]]></content:encoded>'
    )

    assert extract_image(fragment) == "https://cdn.test/cover.jpg"


def test_inline_image_inside_escaped_html():
    fragment = "<description>&lt;img src=&quot;https://cdn.test/cover.jpg&quot;&gt; text</description>"

    assert extract_image(fragment) == "https://cdn.test/cover.jpg"


def test_no_image_is_none():
    assert extract_image("<title>no pictures</title>") is None


def test_parse_rfc822_and_iso_dates_to_utc():
    assert parse_published_at("Fri, 10 Oct 2026 14:30:00 +0000") == datetime(2026, 10, 10, 14, 30, tzinfo=timezone.utc)
    assert parse_published_at("2026-10-15T08:00:00-04:00") == datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)
    assert parse_published_at("2026-10-12T09:00:00Z") == datetime(2026, 10, 12, 9, 0, tzinfo=timezone.utc)


def test_naive_dates_are_read_as_utc():
    parsed = parse_published_at("2026-10-12 09:00:00")

    assert parsed == datetime(2026, 10, 12, 9, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "raw", [None, "", "not a date", "32/13/2026 99:99", "0001-01-01T00:00:00+05:00"]
)
def test_unparsable_dates_become_none(raw):
    assert parse_published_at(raw) is None


def test_first_parsable_date_alias_wins():
    fragment = "<pubDate>someday soon</pubDate><updated>2026-10-01T00:00:00Z</updated>"

    assert extract_published_at(fragment) == datetime(2026, 10, 1, tzinfo=timezone.utc)


def test_extract_fields_from_rss_fixture():
    first, second, third = split_items(load_fixture("rss_three_items.xml"))

    fields = extract_fields(first)
    assert fields.title == "Cover Reveal: The Long Winter & Other Stories"
    assert fields.link == "https://www.tor.com/2026/10/10/cover-reveal-long-winter/"
    assert fields.image_url == "https://www.tor.com/thumbs/long-winter.jpg"
    assert fields.published_at == datetime(2026, 10, 10, 14, 30, tzinfo=timezone.utc)

    fields = extract_fields(second)
    assert fields.title == "Read an Excerpt: <em>Starfall</em>"
    assert fields.summary == "<p>Chapter one opens on a <strong>burning</strong> sky.</p>"
    assert fields.image_url is None
    assert fields.published_at == datetime(2026, 10, 12, 9, 0, tzinfo=timezone.utc)

    assert extract_fields(third).title is None


def test_extract_fields_from_atom_fixture():
    first, second = split_items(load_fixture("atom_feed.xml"))

    fields = extract_fields(first)
    assert fields.title == "Fall Reading List"
    assert fields.link == "https://www.harpercollins.com/blogs/news/fall-reading-list"
    assert fields.published_at == datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)

    fields = extract_fields(second)
    assert fields.link == "https://www.harpercollins.com/blogs/news/tour-dates"
    assert fields.published_at is None
    assert fields.image_url is None

from __future__ import annotations

import pytest
from pydantic import ValidationError

from publisher_feeds.registry import FeedConfig, FeedRegistry, default_registry


def test_default_registry_covers_publishers_in_order():
    registry = default_registry()
    slugs = [c.publisher_slug for c in registry.feeds]

    assert slugs[0] == "penguin"
    assert "publishersweekly" in slugs
    assert len(set(slugs)) == len(slugs)
    pairs = list(registry.iter_feeds())
    assert pairs[0][1] == "https://www.penguinrandomhouse.com/the-read-down/feed/"
    assert pairs[1][1] == "https://www.penguinrandomhouse.com/news/feed/"
    assert len(pairs) == sum(len(c.feed_urls) for c in registry.feeds)


def test_feed_config_normalizes_and_is_frozen():
    config = FeedConfig(publisher=" Tor Books ", slug=" TOR ", feeds=["https://www.tor.com/feed/", " "])

    assert config.publisher_name == "Tor Books"
    assert config.publisher_slug == "tor"
    assert config.feed_urls == ("https://www.tor.com/feed/",)
    with pytest.raises(ValidationError):
        config.publisher_slug = "other"  # type: ignore[misc]


def test_feed_config_requires_a_url():
    with pytest.raises(ValidationError):
        FeedConfig(publisher="Tor", slug="tor", feeds=[])


def test_registry_rejects_duplicate_slugs():
    a = FeedConfig(publisher="A", slug="dup", feeds=["https://a.test/feed"])
    b = FeedConfig(publisher="B", slug="dup", feeds=["https://b.test/feed"])

    with pytest.raises(ValidationError):
        FeedRegistry(feeds=(a, b))

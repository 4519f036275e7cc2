"""Static registry of publisher feeds polled by the ingestion job."""

from __future__ import annotations

from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedConfig(BaseModel):
    """A publisher and the feed URLs it publishes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    publisher_name: str = Field(..., alias="publisher", description="출판사 표시 이름.")
    publisher_slug: str = Field(..., alias="slug", description="출판사 식별자 (소문자).")
    feed_urls: Tuple[str, ...] = Field(..., alias="feeds", description="RSS/Atom 피드 URL 목록 (순서 유지).")

    @field_validator("publisher_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        name = value.strip()
        if not name:
            raise ValueError("publisher는 공백일 수 없습니다.")
        return name

    @field_validator("publisher_slug")
    @classmethod
    def _normalize_slug(cls, value: str) -> str:
        slug = value.strip().lower()
        if not slug:
            raise ValueError("slug는 공백일 수 없습니다.")
        return slug

    @field_validator("feed_urls")
    @classmethod
    def _validate_feed_urls(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        urls = tuple(url.strip() for url in value if url and url.strip())
        if not urls:
            raise ValueError("feeds에는 최소 1개의 URL이 필요합니다.")
        return urls


class FeedRegistry(BaseModel):
    """Ordered, immutable collection of publisher feed configurations."""

    model_config = ConfigDict(frozen=True)

    feeds: Tuple[FeedConfig, ...] = ()

    @field_validator("feeds")
    @classmethod
    def _validate_unique_slugs(cls, value: Tuple[FeedConfig, ...]) -> Tuple[FeedConfig, ...]:
        seen = set()
        for config in value:
            if config.publisher_slug in seen:
                raise ValueError(f"중복된 출판사 slug가 존재합니다: {config.publisher_slug}")
            seen.add(config.publisher_slug)
        return value

    def iter_feeds(self) -> Iterator[Tuple[FeedConfig, str]]:
        """Yield ``(config, feed_url)`` pairs in declaration order."""
        for config in self.feeds:
            for url in config.feed_urls:
                yield config, url

    def __len__(self) -> int:
        return len(self.feeds)


def default_registry() -> FeedRegistry:
    return FeedRegistry(
        feeds=(
            FeedConfig(
                publisher="Penguin Random House",
                slug="penguin",
                feeds=(
                    "https://www.penguinrandomhouse.com/the-read-down/feed/",
                    "https://www.penguinrandomhouse.com/news/feed/",
                ),
            ),
            FeedConfig(
                publisher="HarperCollins",
                slug="harpercollins",
                feeds=(
                    "https://www.harpercollins.com/blogs/news.atom",
                    "https://harpercollinspublishers.tumblr.com/rss",
                ),
            ),
            FeedConfig(
                publisher="Hachette Book Group",
                slug="hachette",
                feeds=("https://www.hachettebookgroup.com/feed/",),
            ),
            FeedConfig(
                publisher="Simon & Schuster",
                slug="simonschuster",
                feeds=("https://www.simonandschuster.com/p/blog?format=rss",),
            ),
            FeedConfig(
                publisher="Macmillan Publishers",
                slug="macmillan",
                feeds=("https://us.macmillan.com/rss/news",),
            ),
            FeedConfig(publisher="Tor Books", slug="tor", feeds=("https://www.tor.com/feed/",)),
            FeedConfig(publisher="BookPage", slug="bookpage", feeds=("https://bookpage.com/feed",)),
            FeedConfig(
                publisher="Publishers Weekly",
                slug="publishersweekly",
                feeds=("https://www.publishersweekly.com/pw/feeds/home.xml",),
            ),
        )
    )

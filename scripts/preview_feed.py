"""Quick publisher feed smoke test.

Usage:
  uv run -- python scripts/preview_feed.py -s tor -n 5
  uv run -- python scripts/preview_feed.py -u https://bookpage.com/feed

Fetches and parses without touching the database; prints the parsed count
and the first few articles (title, link, date, image).
"""

from __future__ import annotations

import argparse
import os
from typing import List

from publisher_feeds.connectors.http import HttpFeedFetcher
from publisher_feeds.pipeline import FeedIngestionPipeline
from publisher_feeds.registry import FeedConfig
from publisher_feeds.settings import get_settings


class _NoStore:
    def upsert(self, records) -> int:  # noqa: ANN001
        return 0

    def delete_older_than(self, cutoff) -> int:  # noqa: ANN001
        return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Publisher feed preview")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("-s", "--slug", help="Registered publisher slug (all of its feeds)")
    target.add_argument("-u", "--url", help="Arbitrary feed URL")
    parser.add_argument("-n", "--top", type=int, default=5, help="Print top N items per feed (default: 5)")
    args = parser.parse_args(argv)

    # Ensure minimal required envs for settings to load
    os.environ.setdefault("POSTGRES_DSN", "sqlite:///./var/dev.db")

    cfg = get_settings()
    registry = cfg.build_registry()
    if args.slug:
        matches = [c for c in registry.feeds if c.publisher_slug == args.slug.lower()]
        if not matches:
            print(f"Unknown slug: {args.slug} (known: {', '.join(c.publisher_slug for c in registry.feeds)})")
            return 2
        targets = [(matches[0], url) for url in matches[0].feed_urls]
    else:
        adhoc = FeedConfig(publisher="Ad hoc", slug="adhoc", feeds=(args.url,))
        targets = [(adhoc, args.url)]

    fetcher = HttpFeedFetcher(user_agent=cfg.feed_user_agent, timeout_seconds=cfg.feed_fetch_timeout_seconds)
    pipeline = FeedIngestionPipeline(registry, fetcher, _NoStore())

    for config, url in targets:
        document = fetcher.fetch(url)
        if document is None:
            print(f"[{config.publisher_slug}] fetch failed: {url}")
            continue
        records = pipeline.parse_feed(config, url, document)
        print(f"[{config.publisher_slug}] parsed {len(records)} items from {url}")
        for idx, rec in enumerate(records[: args.top], start=1):
            published = rec.published_at.isoformat() if rec.published_at else "-"
            print(f"{idx}. {rec.title[:120]}\n   {rec.link}\n   {published}  {rec.image_url or ''}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

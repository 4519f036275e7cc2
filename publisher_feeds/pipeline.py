"""Feed ingestion orchestrator: registry → fetch → parse → normalize → upsert → purge."""

from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from publisher_feeds.connectors.base import FeedFetcher
from publisher_feeds.connectors.http import HttpFeedFetcher
from publisher_feeds.db.session import get_sessionmaker
from publisher_feeds.models.domain import ArticleRecord, RunStats, StatsAccumulator
from publisher_feeds.parsing.base import FeedParser, RegexFeedParser
from publisher_feeds.registry import FeedConfig, FeedRegistry
from publisher_feeds.repositories.articles import ArticleSink, PersistenceError, SqlArticleRepository
from publisher_feeds.services.normalizer import MalformedItemError, normalize_item
from publisher_feeds.settings import Settings, get_settings
from publisher_feeds.utils.logging import get_logger

Clock = Callable[[], datetime]

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedIngestionPipeline:
    """One ingestion run over every feed URL of every registered publisher.

    Failures are contained at the smallest scope: a failed fetch yields no
    articles, a malformed item is dropped, a failed upsert counts its whole
    batch as errors, any other error ends only that feed, and a failed purge
    is only logged. Purge always runs after every feed has finished.
    """

    def __init__(
        self,
        registry: FeedRegistry,
        fetcher: FeedFetcher,
        sink: ArticleSink,
        *,
        parser: Optional[FeedParser] = None,
        retention_days: int = 90,
        max_workers: int = 1,
        clock: Optional[Clock] = None,
    ) -> None:
        self._registry = registry
        self._fetcher = fetcher
        self._sink = sink
        self._parser = parser or RegexFeedParser()
        self._retention = timedelta(days=retention_days)
        self._max_workers = max(1, int(max_workers))
        self._clock = clock or utcnow

    def parse_feed(self, config: FeedConfig, feed_url: str, document: str) -> List[ArticleRecord]:
        records: List[ArticleRecord] = []
        rejected = 0
        for fragment in self._parser.split(document):
            try:
                records.append(normalize_item(self._parser.extract(fragment), config, feed_url))
            except MalformedItemError as exc:
                rejected += 1
                logger.debug("feeds.item.rejected", extra={"slug": config.publisher_slug, "reason": str(exc)})
        logger.info(
            "feeds.feed.parsed",
            extra={"slug": config.publisher_slug, "url": feed_url, "parsed": len(records), "rejected": rejected},
        )
        return records

    def process_feed(self, config: FeedConfig, feed_url: str, stats: StatsAccumulator) -> None:
        document = self._fetcher.fetch(feed_url)
        if not document:
            return
        records = self.parse_feed(config, feed_url, document)
        if not records:
            return
        try:
            inserted = self._sink.upsert(records)
        except PersistenceError as exc:
            logger.error(
                "feeds.upsert.failed",
                extra={"slug": config.publisher_slug, "url": feed_url, "batch": len(records), "reason": str(exc)},
            )
            stats.add_errors(len(records))
            return
        stats.add_batch(len(records), inserted)
        logger.info(
            "feeds.upsert.done",
            extra={
                "slug": config.publisher_slug,
                "url": feed_url,
                "inserted": inserted,
                "skipped": len(records) - inserted,
            },
        )

    def purge(self) -> Optional[int]:
        cutoff = self._clock() - self._retention
        try:
            deleted = self._sink.delete_older_than(cutoff)
        except PersistenceError as exc:
            logger.warning("feeds.purge.failed", extra={"cutoff": cutoff.isoformat(), "reason": str(exc)})
            return None
        logger.info("feeds.purge.done", extra={"cutoff": cutoff.isoformat(), "deleted": deleted})
        return deleted

    def run(self) -> RunStats:
        trace_id = str(uuid.uuid4())
        stats = StatsAccumulator()
        logger.info(
            "feeds.run.start",
            extra={"trace_id": trace_id, "publishers": len(self._registry), "workers": self._max_workers},
        )
        if self._max_workers == 1:
            for config, url in self._registry.iter_feeds():
                self._run_feed(config, url, stats)
        else:
            self._run_concurrently(stats)
        self.purge()
        snapshot = stats.snapshot()
        logger.info("feeds.run.done", extra={"trace_id": trace_id, **snapshot.model_dump()})
        return snapshot

    def _run_feed(self, config: FeedConfig, feed_url: str, stats: StatsAccumulator) -> None:
        # one broken feed must not cost the remaining feeds or the purge
        try:
            self.process_feed(config, feed_url, stats)
        except Exception:
            logger.exception("feeds.feed.failed", extra={"slug": config.publisher_slug, "url": feed_url})

    def _run_concurrently(self, stats: StatsAccumulator) -> None:
        # leaving the executor context joins every worker, so purge never races an upsert
        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="feed") as executor:
            futures = [
                executor.submit(self._run_feed, config, url, stats)
                for config, url in self._registry.iter_feeds()
            ]
            for future in as_completed(futures):
                future.result()


def render_summary(stats: RunStats) -> Dict[str, Any]:
    return {"ok": True, "stats": stats.model_dump()}


def build_pipeline(settings: Settings | None = None) -> FeedIngestionPipeline:
    """Wire the production pipeline from settings."""
    config = settings or get_settings()
    return FeedIngestionPipeline(
        registry=config.build_registry(),
        fetcher=HttpFeedFetcher(
            user_agent=config.feed_user_agent,
            timeout_seconds=config.feed_fetch_timeout_seconds,
        ),
        sink=SqlArticleRepository(get_sessionmaker(config)),
        retention_days=config.purge_retention_days,
        max_workers=config.feed_max_workers,
    )

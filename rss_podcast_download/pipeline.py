"""Feed-to-disk pipeline for RSS Podcast Download."""

from collections.abc import Iterable, Iterator
from itertools import islice
from typing import Any

from .config import DownloadOptions
from .downloader import EpisodeDownloader
from .logging_config import create_execution_logger
from .models import DownloadResult, DownloadStatus, Enclosure
from .rss import FeedProcessor


def newest_first(enclosures: Iterable[Enclosure]) -> list[Enclosure]:
    """Order enclosures by publication date, newest first.

    Undated enclosures go last. The sort is stable, so document order
    decides between equal dates.
    """

    def sort_key(enclosure: Enclosure) -> tuple[bool, float]:
        if enclosure.published is None:
            return (True, 0.0)
        return (False, -enclosure.published.timestamp())

    return sorted(enclosures, key=sort_key)


class RssDownloader:
    """Orchestrates fetch, parse, selection and download for one feed."""

    def __init__(
        self,
        feed_processor: FeedProcessor,
        downloader: EpisodeDownloader,
        execution_id: str | None = None,
    ):
        self.feed_processor = feed_processor
        self.downloader = downloader
        self.logger = create_execution_logger("main", execution_id)

    def select(
        self, enclosures: Iterator[Enclosure], options: DownloadOptions
    ) -> Iterator[Enclosure]:
        """Take the first ``options.count`` enclosures.

        "Latest" means first in document order, which is how podcast feeds
        are usually laid out. ``sort_by_date`` orders by ``pubDate`` instead.
        """
        if options.sort_by_date:
            enclosures = iter(newest_first(enclosures))
        return islice(enclosures, options.count)

    def process(self, options: DownloadOptions) -> dict[str, Any]:
        """Run the pipeline.

        Fetch and parse errors propagate to the caller. Per-item download
        failures are recorded and the run moves on to the next enclosure.

        Args:
            options: Validated run options

        Returns:
            Execution metrics
        """
        self.logger.log_execution_start(
            feed_uri=options.feed_uri,
            local_path=str(options.destination),
            count=options.count,
        )

        metrics: dict[str, Any] = {
            "items_found": 0,
            "downloaded": 0,
            "skipped": 0,
            "failed": 0,
            "bytes_written": 0,
            "errors": [],
        }

        content = self.feed_processor.fetch_feed(options.feed_uri)
        enclosures = self.feed_processor.parse_enclosures(content, options.feed_uri)

        self.logger.info("Extracting file paths", feed_uri=options.feed_uri)
        for enclosure in self.select(enclosures, options):
            metrics["items_found"] += 1
            result = self.downloader.download(enclosure)
            self._record(result, metrics)

        self.logger.log_metrics(metrics)
        self.logger.log_execution_end(
            success=metrics["failed"] == 0, metrics=metrics
        )
        return metrics

    def _record(self, result: DownloadResult, metrics: dict[str, Any]) -> None:
        self.logger.log_download_result(result)

        if result.status is DownloadStatus.DOWNLOADED:
            metrics["downloaded"] += 1
            metrics["bytes_written"] += result.bytes_written
        elif result.status is DownloadStatus.SKIPPED:
            metrics["skipped"] += 1
        else:
            metrics["failed"] += 1
            metrics["errors"].append(f"{result.url}: {result.reason}")

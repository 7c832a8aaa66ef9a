"""
Command-line interface for RSS Podcast Download.

Usage:
    rss-podcast-download -r https://example.com/feed.xml -d ./podcasts -n 5
    rss-podcast-download -r feed.xml -d ./podcasts -n 5 --sort-by-date
"""

import argparse
import sys

import requests

from . import __version__
from .config import Config
from .downloader import EpisodeDownloader
from .logging_config import (
    create_execution_logger,
    new_execution_id,
    setup_structured_logging,
)
from .options import ValidationError, validate_options
from .pipeline import RssDownloader
from .rss import FeedProcessor

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENTS = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rss-podcast-download",
        description=(
            "Download the media files attached to the latest items of an "
            "RSS feed, skipping files that already exist locally."
        ),
    )
    parser.add_argument(
        "-r",
        "--rssPath",
        dest="rss_path",
        required=True,
        help="Rss file path (absolute or relative URI)",
    )
    parser.add_argument(
        "-d",
        "--destPath",
        dest="dest_path",
        required=True,
        help="Local destination path (must exist)",
    )
    parser.add_argument(
        "-n",
        "--latestNumber",
        dest="latest",
        required=True,
        help="Number of latest podcasts",
    )
    parser.add_argument(
        "--sort-by-date",
        action="store_true",
        default=False,
        help="Pick the latest items by pubDate instead of feed order",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Log level (default: $LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one download pass and return the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config()
    try:
        setup_structured_logging(args.log_level or config.log_level, config.log_format)
    except ValueError as e:
        parser.error(str(e))

    execution_id = new_execution_id("run")
    logger = create_execution_logger("main", execution_id)

    try:
        options = validate_options(
            args.rss_path,
            args.dest_path,
            args.latest,
            sort_by_date=args.sort_by_date,
            logger=logger,
        )
    except ValidationError:
        return EXIT_INVALID_ARGUMENTS

    try:
        http_config = config.get_http_config()
        with requests.Session() as session:
            feed_processor = FeedProcessor(
                http_config, session=session, execution_id=execution_id
            )
            downloader = EpisodeDownloader(
                options.destination,
                http_config,
                session=session,
                execution_id=execution_id,
            )
            RssDownloader(feed_processor, downloader, execution_id).process(options)

        logger.info("Finished")
        return EXIT_OK
    except Exception as e:
        logger.error(f"Critical error: {e}", exc_info=True, error=str(e))
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())

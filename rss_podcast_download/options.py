"""Command line input validation for RSS Podcast Download."""

import re
from pathlib import Path
from urllib.parse import urlsplit

from .config import DownloadOptions
from .logging_config import ExecutionLogger, create_execution_logger

# RFC 3986 unreserved, gen-delims, sub-delims and the escape marker
_URI_CHARS = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_INTEGER = re.compile(r"^\s*[+-]?[0-9]+\s*$")

NETWORK_SCHEMES = ("http", "https")


class ValidationError(ValueError):
    """Raised when a command line input is rejected."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


def is_well_formed_uri(value: str | None) -> bool:
    """Check whether *value* is a well-formed absolute or relative URI.

    Args:
        value: Candidate URI string

    Returns:
        True if the string follows the generic URI syntax, False otherwise
    """
    if not value or not value.strip():
        return False

    # Whitespace and other non-URI characters must be percent-encoded
    if not _URI_CHARS.match(value) or _BAD_ESCAPE.search(value):
        return False

    try:
        parts = urlsplit(value)
        # Accessing the port validates it
        parts.port
    except ValueError:
        return False

    # Brackets are only legal around an IPv6 host
    for component in (parts.path, parts.query, parts.fragment):
        if "[" in component or "]" in component:
            return False

    if parts.scheme:
        if parts.scheme in NETWORK_SCHEMES and not parts.hostname:
            return False
        return True

    # A relative reference may not look like it starts with a scheme
    if not value.startswith("//"):
        first_segment = parts.path.split("/", 1)[0]
        if ":" in first_segment:
            return False

    return True


def parse_count(value: str | None) -> int | None:
    """Parse a base-10 integer, returning None when *value* is not one."""
    if value is None or not _INTEGER.match(value):
        return None
    return int(value)


def validate_options(
    rss_path: str | None,
    dest_path: str | None,
    latest: str | None,
    sort_by_date: bool = False,
    logger: ExecutionLogger | None = None,
) -> DownloadOptions:
    """Validate raw command line inputs.

    Checks run in order: feed URI, destination directory, count. The first
    failing check is logged as a warning and raised.

    Args:
        rss_path: Feed URI as typed by the user
        dest_path: Destination directory as typed by the user
        latest: Number of items to download as typed by the user
        sort_by_date: Order enclosures by publication date before taking N
        logger: Execution logger for the warning messages

    Returns:
        Validated DownloadOptions

    Raises:
        ValidationError: If any input is invalid
    """
    logger = logger or create_execution_logger("options")

    def reject(field: str, message: str) -> ValidationError:
        logger.warning(message, field=field)
        return ValidationError(field, message)

    if not is_well_formed_uri(rss_path):
        raise reject("rssPath", f"rssPath is invalid: {rss_path!r}")

    destination = Path(dest_path) if dest_path else None
    if destination is None or not destination.is_dir():
        raise reject("destPath", f"destPath does not exist: {dest_path!r}")

    count = parse_count(latest)
    if count is None:
        raise reject("latestNumber", f"latestNumber is not an integer: {latest!r}")
    if count < 0:
        raise reject("latestNumber", f"latestNumber must not be negative: {count}")

    logger.debug(
        "Options validated",
        feed_uri=rss_path,
        local_path=str(destination),
        count=count,
    )
    return DownloadOptions(
        feed_uri=rss_path,
        destination=destination,
        count=count,
        sort_by_date=sort_by_date,
    )

"""RSS feed fetching and enclosure extraction for RSS Podcast Download."""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urljoin, urlsplit
from urllib.request import url2pathname

import requests
from dateutil import parser as date_parser
from lxml import etree

from .config import HttpConfig
from .logging_config import create_execution_logger
from .models import Enclosure
from .options import NETWORK_SCHEMES


class FeedParseError(ValueError):
    """Raised when the feed body is not well-formed XML."""


def iter_elements(root: etree._Element, tag: str) -> Iterator[etree._Element]:
    """Yield every element named *tag* under *root*, in document order.

    The walk uses an explicit stack, so deeply nested documents do not hit
    the recursion limit. Comments and processing instructions are ignored.
    """
    stack = [root]
    while stack:
        element = stack.pop()
        if element.tag == tag:
            yield element
        # Reversed so the first child is visited next
        stack.extend(
            child for child in reversed(element) if isinstance(child.tag, str)
        )


def first_child(element: etree._Element, tag: str) -> etree._Element | None:
    """Return the first direct child named *tag*, or None."""
    for child in element:
        if child.tag == tag:
            return child
    return None


class FeedProcessor:
    """Handles RSS feed download and enclosure extraction."""

    def __init__(
        self,
        http_config: HttpConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize FeedProcessor with configuration.

        Args:
            http_config: HTTP client settings (timeout, user agent)
            session: Shared requests session; a new one is created if omitted
            execution_id: Execution ID for logging context
        """
        self.http_config = http_config or HttpConfig()
        self.logger = create_execution_logger("feed_processor", execution_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.http_config.user_agent})

        self.logger.info(
            "FeedProcessor initialized", timeout=self.http_config.timeout
        )

    def fetch_feed(self, feed_uri: str) -> bytes:
        """Download the raw feed document.

        The body is returned undecoded so the XML parser can honour the
        encoding declared by the document itself.

        Args:
            feed_uri: Absolute http(s) URI, ``file:`` URI or relative path

        Returns:
            Response body

        Raises:
            requests.RequestException: If the HTTP request fails
            OSError: If a local feed file cannot be read
            ValueError: If the URI scheme or host is not supported
        """
        parts = urlsplit(feed_uri)
        scheme = parts.scheme

        if scheme in NETWORK_SCHEMES:
            self.logger.info("Downloading feed", feed_uri=feed_uri)
            try:
                with self.session.get(
                    feed_uri, timeout=self.http_config.timeout
                ) as response:
                    response.raise_for_status()
                    content = response.content
            except requests.RequestException as e:
                self.logger.error(
                    f"Failed to download feed {feed_uri}: {e}",
                    feed_uri=feed_uri,
                    error=str(e),
                )
                raise

            self.logger.info(
                "Feed downloaded successfully",
                feed_uri=feed_uri,
                status_code=response.status_code,
                content_length=len(content),
            )
            return content

        if scheme in ("", "file") and parts.netloc.lower() not in ("", "localhost"):
            error_msg = f"Unsupported host {parts.netloc!r} for local feed: {feed_uri}"
            self.logger.error(error_msg, feed_uri=feed_uri)
            raise ValueError(error_msg)

        if scheme in ("", "file"):
            path = self._local_path(feed_uri)
            self.logger.info(
                "Reading local feed", feed_uri=feed_uri, local_path=str(path)
            )
            try:
                return path.read_bytes()
            except OSError as e:
                self.logger.error(
                    f"Failed to read feed {feed_uri}: {e}",
                    feed_uri=feed_uri,
                    error=str(e),
                )
                raise

        error_msg = f"Unsupported feed URI scheme {scheme!r}: {feed_uri}"
        self.logger.error(error_msg, feed_uri=feed_uri)
        raise ValueError(error_msg)

    @staticmethod
    def _local_path(feed_uri: str) -> Path:
        parts = urlsplit(feed_uri)
        if parts.scheme == "file":
            return Path(url2pathname(parts.path))
        return Path(unquote(parts.path))

    def parse_enclosures(
        self, content: bytes, feed_uri: str | None = None
    ) -> Iterator[Enclosure]:
        """Parse the feed and return a lazy iterator over its enclosures.

        The document is parsed immediately, so malformed XML fails here and
        not while downloads are running. Extraction then happens lazily, in
        document order.

        Args:
            content: Raw feed document
            feed_uri: URI the feed came from, used to resolve relative URLs

        Returns:
            Single-pass iterator of Enclosure objects

        Raises:
            FeedParseError: If the document is not well-formed XML
        """
        self.logger.info("Parsing feed content", feed_uri=feed_uri)
        parser = etree.XMLParser(
            resolve_entities=False, no_network=True, huge_tree=True
        )
        try:
            root = etree.fromstring(content, parser=parser)
        except etree.XMLSyntaxError as e:
            self.logger.error(
                f"Feed is not well-formed XML: {e}", feed_uri=feed_uri, error=str(e)
            )
            raise FeedParseError(f"Feed is not well-formed XML: {e}") from e

        base_uri = None
        if feed_uri and urlsplit(feed_uri).scheme in NETWORK_SCHEMES:
            base_uri = feed_uri
        return self._extract_enclosures(root, base_uri)

    def _extract_enclosures(
        self, root: etree._Element, base_uri: str | None
    ) -> Iterator[Enclosure]:
        for item in iter_elements(root, "item"):
            enclosure = first_child(item, "enclosure")
            if enclosure is None:
                self.logger.debug(
                    "Skipping item without enclosure", item_title=self._title(item)
                )
                continue

            url = (enclosure.get("url") or "").strip()
            if not url:
                self.logger.debug(
                    "Skipping enclosure without url", item_title=self._title(item)
                )
                continue

            if base_uri:
                try:
                    url = urljoin(base_uri, url)
                except ValueError:
                    # Left as is; the download reports it as failed
                    self.logger.debug("Cannot resolve enclosure url", enclosure_url=url)

            yield Enclosure(
                url=url,
                title=self._title(item),
                published=self._published(item),
            )

    @staticmethod
    def _title(item: etree._Element) -> str | None:
        title = first_child(item, "title")
        if title is None or title.text is None:
            return None
        return " ".join(title.text.split()) or None

    def _published(self, item: etree._Element) -> datetime | None:
        pub_date = first_child(item, "pubDate")
        if pub_date is None or not (pub_date.text or "").strip():
            return None

        try:
            published = date_parser.parse(pub_date.text)
        except (ValueError, OverflowError):
            self.logger.debug("Ignoring unparseable pubDate", pub_date=pub_date.text)
            return None

        # Naive dates are taken as local time so they compare with aware ones
        if published.tzinfo is None:
            published = published.replace(tzinfo=datetime.now().astimezone().tzinfo)
        return published

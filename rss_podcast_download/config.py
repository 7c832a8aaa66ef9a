"""Configuration management for RSS Podcast Download."""

import os
from dataclasses import dataclass
from pathlib import Path

from . import __version__

ENV_PREFIX = "RSS_PODCAST_DOWNLOAD_"


@dataclass
class HttpConfig:
    """Configuration for the HTTP client shared by fetcher and downloader."""

    # None means no timeout, the requests default
    timeout: float | None = None
    user_agent: str = f"RSS-Podcast-Download/{__version__}"
    chunk_size: int = 8192


@dataclass(frozen=True)
class DownloadOptions:
    """Validated command line inputs for one run."""

    feed_uri: str
    destination: Path
    count: int
    sort_by_date: bool = False


class Config:
    """Main configuration manager."""

    DEFAULT_CHUNK_SIZE = 8192

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "json")
        self.user_agent = os.getenv(
            f"{ENV_PREFIX}USER_AGENT", f"RSS-Podcast-Download/{__version__}"
        )

    @staticmethod
    def _get_float(name: str) -> float | None:
        raw = os.getenv(name, "").strip()
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"{name} must be a number of seconds, got {raw!r}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {raw!r}")
        return value

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        raw = os.getenv(name, "").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {raw!r}")
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {raw!r}")
        return value

    def get_http_config(self) -> HttpConfig:
        """Get HTTP client configuration.

        Raises:
            ValueError: If a numeric environment variable is invalid
        """
        return HttpConfig(
            timeout=self._get_float(f"{ENV_PREFIX}TIMEOUT"),
            user_agent=self.user_agent,
            chunk_size=self._get_int(
                f"{ENV_PREFIX}CHUNK_SIZE", self.DEFAULT_CHUNK_SIZE
            ),
        )

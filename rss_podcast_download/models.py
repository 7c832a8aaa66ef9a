"""Data models for RSS Podcast Download."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class Enclosure:
    """A media file referenced by a feed item's ``<enclosure url=...>``."""

    url: str
    title: str | None = None
    published: datetime | None = None


class DownloadStatus(Enum):
    """Outcome of a single enclosure download attempt."""

    DOWNLOADED = "downloaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class DownloadResult:
    """Represents the result of downloading one enclosure."""

    status: DownloadStatus
    url: str
    local_path: Path | None = None
    bytes_written: int = 0
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """True unless the attempt failed; skipping an existing file is fine."""
        return self.status is not DownloadStatus.FAILED

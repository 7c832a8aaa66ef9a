"""Enclosure downloader for RSS Podcast Download."""

from pathlib import Path
from urllib.parse import unquote, urlsplit

import requests

from .config import HttpConfig
from .logging_config import create_execution_logger
from .models import DownloadResult, DownloadStatus, Enclosure


def local_filename(url: str) -> str | None:
    """Derive the local file name from the last path segment of *url*.

    The path is split on ``/`` before percent-decoding, so an encoded slash
    stays inside the segment. Names that could escape the destination
    directory are rejected.

    Args:
        url: Enclosure URL

    Returns:
        Decoded file name, or None if no usable name can be derived
    """
    try:
        segment = urlsplit(url).path.rsplit("/", 1)[-1]
    except ValueError:
        return None
    name = unquote(segment)

    if name in ("", ".", ".."):
        return None
    if "/" in name or "\\" in name or "\x00" in name:
        return None
    return name


class EpisodeDownloader:
    """Downloads enclosures into a destination directory."""

    def __init__(
        self,
        destination: Path,
        http_config: HttpConfig | None = None,
        session: requests.Session | None = None,
        execution_id: str | None = None,
    ):
        """Initialize the downloader.

        Args:
            destination: Existing directory the files are written to
            http_config: HTTP client settings (timeout, chunk size)
            session: Shared requests session; a new one is created if omitted
            execution_id: Execution ID for logging context
        """
        self.destination = Path(destination)
        self.http_config = http_config or HttpConfig()
        self.logger = create_execution_logger("downloader", execution_id)
        self.session = session or requests.Session()

    def local_path(self, url: str) -> Path | None:
        """Return the path *url* is stored at, or None if it has no file name."""
        name = local_filename(url)
        if name is None:
            return None
        return self.destination / name

    def download(self, enclosure: Enclosure) -> DownloadResult:
        """Download a single enclosure unless it is already present.

        Existing files are never touched. A failed download removes the file
        it was writing, so no partial file is left behind.

        Args:
            enclosure: Enclosure to download

        Returns:
            DownloadResult describing what happened
        """
        url = enclosure.url
        self.logger.info(
            f"Processing enclosure: {url}",
            enclosure_url=url,
            item_title=enclosure.title,
        )

        path = self.local_path(url)
        if path is None:
            return DownloadResult(
                status=DownloadStatus.FAILED,
                url=url,
                reason="cannot derive a file name from the URL",
            )

        try:
            exists = path.exists()
        except OSError as e:
            return DownloadResult(
                status=DownloadStatus.FAILED,
                url=url,
                local_path=path,
                reason=f"{type(e).__name__}: {e}",
            )

        if exists:
            return DownloadResult(
                status=DownloadStatus.SKIPPED,
                url=url,
                local_path=path,
                reason=f"file '{path.name}' already exists",
            )

        self.logger.info(
            f"Downloading file: {url}", enclosure_url=url, local_path=str(path)
        )
        created = False
        bytes_written = 0
        try:
            with self.session.get(
                url, stream=True, timeout=self.http_config.timeout
            ) as response:
                response.raise_for_status()
                # Exclusive create: never overwrite a file that appeared meanwhile
                with open(path, "xb") as f:
                    created = True
                    for chunk in response.iter_content(
                        chunk_size=self.http_config.chunk_size
                    ):
                        if chunk:
                            f.write(chunk)
                            bytes_written += len(chunk)
        except (requests.RequestException, OSError) as e:
            if created:
                self._remove_partial(path)
            return DownloadResult(
                status=DownloadStatus.FAILED,
                url=url,
                local_path=path,
                bytes_written=0,
                reason=f"{type(e).__name__}: {e}",
            )

        return DownloadResult(
            status=DownloadStatus.DOWNLOADED,
            url=url,
            local_path=path,
            bytes_written=bytes_written,
        )

    def _remove_partial(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
            self.logger.debug("Removed partial file", local_path=str(path))
        except OSError as e:
            self.logger.error(
                f"Failed to remove partial file {path}: {e}",
                local_path=str(path),
                error=str(e),
            )

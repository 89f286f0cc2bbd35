"""
Dependency Fetcher.

Downloads dependency scripts into the cache directory.

Key features:
- HTTP(S) through a shared httpx.AsyncClient
- file:// URIs and absolute paths read from disk
- Concurrent downloads within one batch
- First-failure reporting: a batch fails with the first error observed.
  Sibling downloads are not cancelled; they run to completion and any
  later failures are dropped.
"""

import asyncio
import contextlib
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from userscripts.plugin.errors import DirectoryError, FetchError, WriteError

logger = logging.getLogger(__name__)


def ensure_directory(directory: Path) -> None:
    """
    Create directory (and parents) unless it already is one.

    Raises:
        DirectoryError: If the path is occupied by a non-directory or cannot
            be created
    """
    if directory.is_dir():
        return
    if directory.exists():
        raise DirectoryError(str(directory), f"Not a directory: {directory}")
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryError(
            str(directory), f"Failed to create directory {directory}: {e}"
        ) from e


def replace_contents(target: Path, data: bytes) -> None:
    """
    Replace target with data.

    The data is written to a temporary file next to target and renamed into
    place, so a failed write never leaves a partial script behind.
    """
    fd, temp_path = tempfile.mkstemp(
        dir=target.parent, prefix=f".{target.name}.", suffix=".part"
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(temp_path, target)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_path)
        raise


def uri_to_path(uri: str) -> Path | None:
    """Local filesystem path for file:// URIs and absolute paths, else None."""
    if uri.startswith("/"):
        return Path(uri)
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    return None


class Fetcher:
    """Reads dependency URIs and writes them into a directory."""

    def __init__(
        self, client: httpx.AsyncClient | None = None, timeout: float | None = None
    ):
        """
        Initialize Fetcher.

        Args:
            client: HTTP client to use (a new one is created if omitted)
            timeout: Request timeout in seconds, None for no timeout
        """
        self.client = client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=True
        )
        self._pending: set[asyncio.Task] = set()

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def read(self, uri: str) -> bytes:
        """
        Read all bytes from a URI.

        Raises:
            FetchError: If the URI cannot be read
        """
        parsed = urlparse(uri)

        if parsed.scheme in ("http", "https"):
            try:
                response = await self.client.get(uri)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise FetchError(uri, f"HTTP error: {e}") from e
            return response.content

        path = uri_to_path(uri)
        if path is None:
            raise FetchError(uri, f"Unsupported URI: {uri}")

        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FetchError(uri, f"Failed to read {path}: {e}") from e

    async def fetch_one(self, uri: str, directory: Path, filename: str) -> None:
        """
        Download uri to directory/filename, replacing any existing file.

        Raises:
            FetchError: If the URI cannot be read
            WriteError: If the file cannot be written
        """
        data = await self.read(uri)
        target = directory / filename

        try:
            await asyncio.to_thread(replace_contents, target, data)
        except OSError as e:
            raise WriteError(str(target), f"Failed to write {target}: {e}") from e

        logger.debug("Fetched %s -> %s (%d bytes)", uri, target, len(data))

    async def fetch_all(self, directory: Path, queue: Mapping[str, str]) -> None:
        """
        Download every uri -> filename pair into directory concurrently.

        Succeeds only if every download succeeds. On failure, the first
        error observed is raised and the remaining downloads keep running
        unobserved.

        Args:
            directory: Destination directory
            queue: uri -> filename

        Raises:
            DirectoryError: If directory cannot be used (nothing is fetched)
            FetchError: First read failure observed
            WriteError: First write failure observed
        """
        if not queue:
            return

        ensure_directory(directory)

        tasks = []
        for uri, filename in queue.items():
            task = asyncio.create_task(self.fetch_one(uri, directory, filename))
            self._pending.add(task)
            task.add_done_callback(self._settle)
            tasks.append(task)

        for completed in asyncio.as_completed(tasks):
            await completed

    def _settle(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Download failed: %s", task.exception())

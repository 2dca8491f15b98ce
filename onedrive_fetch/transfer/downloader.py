"""
Handles the low-level streaming of a remote file to local storage over HTTP.
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional

import aiofiles
import aiohttp

from onedrive_fetch.exceptions import DownloadError
from onedrive_fetch.models.share import DownloadedFile
from onedrive_fetch.utils.formatting import format_duration, format_size

log = logging.getLogger(__name__)


class Downloader:
    """
    Streams a URL into a local file without buffering the whole body.

    The destination is opened before the request is sent. If the transfer
    fails part-way the partially written file is left in place.
    """

    CHUNK_SIZE = 131072  # 128 KB

    def __init__(self, chunk_size: int = CHUNK_SIZE):
        self.chunk_size = chunk_size
        self._session: Optional[aiohttp.ClientSession] = None

    async def get_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available for downloads."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=None),
            )
        return self._session

    async def close(self) -> None:
        """Closes the download session."""
        if self._session and not self._session.closed:
            await self._session.close()
            log.debug("Downloader session closed.")
        self._session = None

    async def download_file(self, url: str, destination: Path) -> DownloadedFile:
        """
        Downloads a file from a URL, overwriting anything already at destination.

        Returns only after the file has been closed, so every byte received is
        on disk when the caller resumes.

        Raises:
            DownloadError: On a network error, non-2xx status, stream error or
                local write error.
        """
        bytes_written = 0
        start_time = time.monotonic()
        try:
            async with aiofiles.open(destination, "wb") as f:
                session = await self.get_session()
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()
                    log.debug(
                        f"Streaming '{os.path.basename(destination)}' "
                        f"(Content-Length: {response.headers.get('Content-Length', '?')})"
                    )
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        bytes_written += len(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise DownloadError(f"Failed to download the file: {e}") from e

        log.debug(
            f"Wrote {format_size(bytes_written)} to '{destination}' in "
            f"{format_duration(time.monotonic() - start_time)}"
        )
        return DownloadedFile(path=Path(destination), size_bytes=bytes_written)

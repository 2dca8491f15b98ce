"""
Async client for the Microsoft Graph endpoints used to resolve shared items.
"""

import logging
import time
from typing import Any, Dict, Optional

import aiohttp
from pydantic import ValidationError

from onedrive_fetch.exceptions import ResolutionError
from onedrive_fetch.models.config import GraphEndpoints
from onedrive_fetch.models.share import FileMetadata
from onedrive_fetch.utils.sharing import encode_share_link

from .auth import GraphAuthenticator

log = logging.getLogger(__name__)

DOWNLOAD_URL_FIELD = "@microsoft.graph.downloadUrl"


class GraphClient:
    """
    Minimal async client for Microsoft Graph.

    Holds one aiohttp session for the lifetime of a pipeline run. Requests are
    made without timeouts and without retries.
    """

    def __init__(self, endpoints: GraphEndpoints | None = None):
        self.endpoints = endpoints or GraphEndpoints()
        self._session: Optional[aiohttp.ClientSession] = None
        self._authenticator = GraphAuthenticator(self)

    @property
    def authenticator(self) -> GraphAuthenticator:
        """Provides access to the credential exchange helper."""
        return self._authenticator

    async def get_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=None),
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def get_json(self, url: str, token: str) -> Dict[str, Any]:
        """Performs a bearer-authenticated GET and returns the decoded JSON body."""
        session = await self.get_session()
        start_time = time.monotonic()
        async with session.get(
            url, headers={"Authorization": f"Bearer {token}"}
        ) as r:
            duration_ms = (time.monotonic() - start_time) * 1000
            log.debug(f"GET {url} -> {r.status} ({duration_ms:.0f} ms)")
            r.raise_for_status()
            return await r.json()

    async def fetch_file_metadata(self, token: str, share_link: str) -> FileMetadata:
        """
        Resolves a sharing URL to the shared file's download URL and name.

        The download URL is returned as-is, even when absent; deciding whether
        it is usable is left to the caller.

        Raises:
            ResolutionError: On a transport error, non-2xx status or a body
                that does not describe a drive item.
        """
        share_id = encode_share_link(share_link)
        url = self.endpoints.graph_url(f"shares/{share_id}/driveItem")
        try:
            item = await self.get_json(url, token)
            if not isinstance(item, dict):
                raise ResolutionError(
                    "Failed to retrieve file metadata: unexpected response body."
                )
            return FileMetadata(
                download_url=item.get(DOWNLOAD_URL_FIELD) or None,
                file_name=item.get("name") or "",
            )
        except (aiohttp.ClientError, ValidationError, ValueError) as e:
            raise ResolutionError(f"Failed to retrieve file metadata: {e}") from e

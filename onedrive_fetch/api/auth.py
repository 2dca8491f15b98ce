"""
Handles the OAuth2 client-credentials exchange against Entra ID.
"""

import logging
from typing import TYPE_CHECKING

import aiohttp

from onedrive_fetch.exceptions import AuthError
from onedrive_fetch.models.config import Credentials

if TYPE_CHECKING:
    from .client import GraphClient

log = logging.getLogger(__name__)


class GraphAuthenticator:
    """
    Exchanges an application identity for a Graph access token.

    Every call performs a fresh exchange; tokens are not cached.
    """

    def __init__(self, api_client: "GraphClient"):
        """
        Initializes the authenticator.

        Args:
            api_client: The GraphClient whose session and endpoints are used.
        """
        self._api_client = api_client

    async def acquire_token(self, credentials: Credentials) -> str:
        """
        Requests a token with the client-credentials grant.

        Args:
            credentials: Client id, client secret and tenant id.

        Returns:
            The bearer access token.

        Raises:
            AuthError: On a transport error, non-2xx status, a body that is not
                JSON, or a body without an access token.
        """
        endpoints = self._api_client.endpoints
        url = endpoints.token_url(credentials.tenant_id)
        form = {
            "client_id": credentials.client_id,
            "scope": endpoints.scope,
            "client_secret": credentials.client_secret,
            "grant_type": "client_credentials",
        }

        log.debug(f"Requesting token for client {credentials.client_id} from {url}")
        session = await self._api_client.get_session()
        try:
            async with session.post(url, data=form) as r:
                log.debug(f"Token endpoint responded with status {r.status}")
                r.raise_for_status()
                body = await r.json()
        except (aiohttp.ClientError, ValueError) as e:
            raise AuthError(f"Failed to retrieve the access token: {e}") from e

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token or not isinstance(token, str):
            raise AuthError(
                "Failed to retrieve the access token: "
                "response did not contain an access_token."
            )
        return token

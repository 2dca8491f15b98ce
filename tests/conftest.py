"""Pytest configuration and fixtures."""

import asyncio
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from onedrive_fetch.models.config import Credentials, FetchConfig, GraphEndpoints

SHARE_LINK = "https://1drv.ms/b/s!AkR?x=>>"


class FakeGraph:
    """
    In-process stand-in for Entra ID, Microsoft Graph and the download host.

    Every request is recorded in `calls` as (endpoint, detail) so tests can
    assert which wire calls were made and in what order.
    """

    def __init__(self):
        self.base_url = ""
        self.calls: list[tuple[str, str]] = []
        self.token_forms: list[dict[str, str]] = []
        self.auth_headers: list[str | None] = []

        self.token_status = 200
        self.token_body: Any = {
            "token_type": "Bearer",
            "expires_in": 3599,
            "access_token": "T",
        }
        self.item_status = 200
        self.item_body: Any = None
        self.file_status = 200
        self.file_bytes = b"hello"

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/{tenant}/oauth2/v2.0/token", self.token)
        app.router.add_get("/v1.0/shares/{share_id}/driveItem", self.drive_item)
        app.router.add_get("/content/{name}", self.content)
        app.router.add_get("/partial/{name}", self.partial_content)
        return app

    def default_item(self) -> dict[str, Any]:
        return {
            "id": "01ABCDEF",
            "name": "report.pdf",
            "size": len(self.file_bytes),
            "@microsoft.graph.downloadUrl": f"{self.base_url}/content/report.pdf",
        }

    async def token(self, request: web.Request) -> web.StreamResponse:
        form = await request.post()
        self.calls.append(("token", request.match_info["tenant"]))
        self.token_forms.append({k: str(v) for k, v in form.items()})
        if self.token_status != 200:
            return web.json_response(
                {"error": "invalid_client", "error_description": "AADSTS7000215"},
                status=self.token_status,
            )
        if isinstance(self.token_body, str):
            return web.Response(text=self.token_body)
        return web.json_response(self.token_body)

    async def drive_item(self, request: web.Request) -> web.StreamResponse:
        self.calls.append(("driveItem", request.match_info["share_id"]))
        self.auth_headers.append(request.headers.get("Authorization"))
        if self.item_status != 200:
            return web.json_response(
                {"error": {"code": "itemNotFound", "message": "Item not found"}},
                status=self.item_status,
            )
        body = self.item_body if self.item_body is not None else self.default_item()
        return web.json_response(body)

    async def content(self, request: web.Request) -> web.StreamResponse:
        self.calls.append(("content", request.match_info["name"]))
        self.auth_headers.append(request.headers.get("Authorization"))
        if self.file_status != 200:
            return web.Response(status=self.file_status, text="gone")
        return web.Response(
            body=self.file_bytes, content_type="application/octet-stream"
        )

    async def partial_content(self, request: web.Request) -> web.StreamResponse:
        """Sends the first bytes of a file, then drops the connection."""
        self.calls.append(("partial", request.match_info["name"]))
        response = web.StreamResponse()
        response.content_type = "application/octet-stream"
        response.content_length = len(self.file_bytes) + 1024
        await response.prepare(request)
        await response.write(self.file_bytes)
        # Give the client time to consume the bytes before the connection drops.
        await asyncio.sleep(0.2)
        request.transport.close()
        return response

    @property
    def endpoints(self) -> GraphEndpoints:
        return GraphEndpoints(
            authority_host=self.base_url, graph_base_url=f"{self.base_url}/v1.0"
        )

    def endpoint_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest_asyncio.fixture
async def fake_graph():
    """Serves a FakeGraph on a local port for the duration of a test."""
    fake = FakeGraph()
    server = TestServer(fake.build_app())
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}"
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id="client", client_secret="secret", tenant_id="tenant")


@pytest.fixture
def make_config(fake_graph, credentials, tmp_path):
    """Builds a FetchConfig pointing at the fake server and writing into tmp_path."""

    def _make(**overrides) -> FetchConfig:
        values: dict[str, Any] = {
            "credentials": credentials,
            "onedrive_link": SHARE_LINK,
            "endpoints": fake_graph.endpoints,
            "output_dir": tmp_path,
        }
        values.update(overrides)
        return FetchConfig(**values)

    return _make

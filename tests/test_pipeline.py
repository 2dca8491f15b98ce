import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from onedrive_fetch.core.pipeline import FetchPipeline
from onedrive_fetch.models.config import Credentials
from onedrive_fetch.models.result import ErrorKind, PipelineState


@pytest.mark.asyncio
async def test_pipeline_downloads_file_and_reports_name(fake_graph, make_config, tmp_path):
    result = await FetchPipeline(make_config()).run()

    assert result.succeeded
    assert result.state is PipelineState.DONE
    assert result.file_name == "report.pdf"
    assert result.error_message is None
    assert (tmp_path / "report.pdf").read_bytes() == b"hello"
    assert fake_graph.endpoint_names() == ["token", "driveItem", "content"]
    assert fake_graph.auth_headers == ["Bearer T", None]


@pytest.mark.asyncio
async def test_pipeline_logs_each_stage(fake_graph, make_config, caplog):
    caplog.set_level(logging.INFO, logger="onedrive_fetch")

    await FetchPipeline(make_config()).run()

    messages = [r.getMessage() for r in caplog.records]
    assert "Access token retrieved successfully." in messages
    assert "File name: report.pdf" in messages
    assert "File downloaded successfully." in messages


@pytest.mark.asyncio
async def test_pipeline_logs_bracketed_file_name_verbatim(
    fake_graph, make_config, tmp_path
):
    fake_graph.item_body = {
        "name": "Q1 [bold]draft.pdf",
        "@microsoft.graph.downloadUrl": f"{fake_graph.base_url}/content/draft.pdf",
    }
    console = Console(file=io.StringIO(), record=True, width=200)
    handler = RichHandler(
        console=console, markup=True, show_time=False, show_level=False, show_path=False
    )
    logger = logging.getLogger("onedrive_fetch")
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        result = await FetchPipeline(make_config()).run()
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)

    assert result.file_name == "Q1 [bold]draft.pdf"
    assert (tmp_path / "Q1 [bold]draft.pdf").read_bytes() == b"hello"
    assert "File name: Q1 [bold]draft.pdf" in console.export_text()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "credentials, link",
    [
        (Credentials(client_secret="secret", tenant_id="tenant"), "https://1drv.ms/x"),
        (Credentials(client_id="client", tenant_id="tenant"), "https://1drv.ms/x"),
        (Credentials(client_id="client", client_secret="secret"), "https://1drv.ms/x"),
        (
            Credentials(client_id="client", client_secret="secret", tenant_id="tenant"),
            "",
        ),
        (
            Credentials(client_id="  ", client_secret="secret", tenant_id="tenant"),
            "https://1drv.ms/x",
        ),
    ],
)
async def test_pipeline_missing_inputs_fails_without_network(
    fake_graph, make_config, tmp_path, credentials, link
):
    pipeline = FetchPipeline(make_config(credentials=credentials, onedrive_link=link))
    result = await pipeline.run()

    assert not result.succeeded
    assert result.state is PipelineState.FAILED
    assert result.error_kind is ErrorKind.INPUT_VALIDATION
    assert result.error_message == "Missing required inputs."
    assert result.failed_stage is PipelineState.START
    assert result.file_name is None
    assert fake_graph.calls == []
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_pipeline_fails_when_download_url_missing(fake_graph, make_config, tmp_path):
    fake_graph.item_body = {"name": "report.pdf"}

    result = await FetchPipeline(make_config()).run()

    assert result.state is PipelineState.FAILED
    assert result.error_kind is ErrorKind.RESOLUTION
    assert result.error_message == "Failed to retrieve download URL."
    assert result.failed_stage is PipelineState.RESOLVING
    assert result.file_name is None
    assert "content" not in fake_graph.endpoint_names()
    assert not (tmp_path / "report.pdf").exists()


@pytest.mark.asyncio
async def test_pipeline_token_failure_stops_before_resolution(fake_graph, make_config):
    fake_graph.token_status = 401

    result = await FetchPipeline(make_config()).run()

    assert result.error_kind is ErrorKind.AUTH
    assert result.failed_stage is PipelineState.AUTHENTICATING
    assert result.error_message.startswith("Failed to retrieve the access token: ")
    assert "401" in result.error_message
    assert fake_graph.endpoint_names() == ["token"]


@pytest.mark.asyncio
async def test_pipeline_metadata_failure_stops_before_download(fake_graph, make_config):
    fake_graph.item_status = 403

    result = await FetchPipeline(make_config()).run()

    assert result.error_kind is ErrorKind.RESOLUTION
    assert result.failed_stage is PipelineState.RESOLVING
    assert result.error_message.startswith("Failed to retrieve file metadata: ")
    assert "403" in result.error_message
    assert fake_graph.endpoint_names() == ["token", "driveItem"]


@pytest.mark.asyncio
async def test_pipeline_mistyped_metadata_reports_resolution_error(
    fake_graph, make_config
):
    fake_graph.item_body = {"name": 42, "@microsoft.graph.downloadUrl": "https://dl/x"}

    result = await FetchPipeline(make_config()).run()

    assert result.state is PipelineState.FAILED
    assert result.error_kind is ErrorKind.RESOLUTION
    assert result.failed_stage is PipelineState.RESOLVING
    assert result.error_message.startswith("Failed to retrieve file metadata: ")
    assert fake_graph.endpoint_names() == ["token", "driveItem"]


@pytest.mark.asyncio
async def test_pipeline_download_failure_reports_download_error(fake_graph, make_config):
    fake_graph.file_status = 500

    result = await FetchPipeline(make_config()).run()

    assert result.error_kind is ErrorKind.DOWNLOAD
    assert result.failed_stage is PipelineState.DOWNLOADING
    assert result.error_message.startswith("Failed to download the file: ")
    assert result.file_name is None


@pytest.mark.asyncio
async def test_pipeline_closes_sessions(fake_graph, make_config):
    pipeline = FetchPipeline(make_config())

    await pipeline.run()

    assert pipeline.client._session is None
    assert pipeline.downloader._session is None

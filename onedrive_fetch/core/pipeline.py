"""
Runs the fetch pipeline: credentials -> token -> share resolution -> download.
"""

import logging
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

from rich.markup import escape

from onedrive_fetch.api.client import GraphClient
from onedrive_fetch.exceptions import FetchError, InputValidationError, ResolutionError
from onedrive_fetch.models.config import FetchConfig
from onedrive_fetch.models.result import PipelineResult, PipelineState, StageResult
from onedrive_fetch.models.share import DownloadedFile, FileMetadata
from onedrive_fetch.transfer.downloader import Downloader

log = logging.getLogger(__name__)

T = TypeVar("T")


class FetchPipeline:
    """
    Sequences the three stages for one run and reports a single outcome.

    Stages run strictly one after another; the first failed stage ends the
    run. Only stage errors are turned into a failed result, anything else
    propagates to the caller.
    """

    def __init__(
        self,
        config: FetchConfig,
        client: GraphClient | None = None,
        downloader: Downloader | None = None,
    ):
        self.config = config
        self.client = client or GraphClient(config.endpoints)
        self.downloader = downloader or Downloader()
        self.state = PipelineState.START

    async def run(self) -> PipelineResult:
        """Executes the pipeline and returns its outcome."""
        self.state = PipelineState.START
        if not self.config.has_required_inputs:
            return self._fail(InputValidationError("Missing required inputs."))

        try:
            return await self._run_stages()
        finally:
            await self.client.close()
            await self.downloader.close()

    async def _run_stages(self) -> PipelineResult:
        token_result = await self._attempt(
            PipelineState.AUTHENTICATING, self._authenticate
        )
        if not token_result.ok:
            return self._fail(token_result.error)
        log.info("Access token retrieved successfully.")

        metadata_result = await self._attempt(
            PipelineState.RESOLVING, lambda: self._resolve(token_result.value)
        )
        if not metadata_result.ok:
            return self._fail(metadata_result.error)
        metadata: FileMetadata = metadata_result.value
        log.info(f"File name: {escape(metadata.file_name)}")

        download_result = await self._attempt(
            PipelineState.DOWNLOADING, lambda: self._download(metadata)
        )
        if not download_result.ok:
            return self._fail(download_result.error)
        log.info("File downloaded successfully.")

        self.state = PipelineState.DONE
        return PipelineResult.done(metadata.file_name)

    async def _attempt(
        self, state: PipelineState, stage: Callable[[], Awaitable[T]]
    ) -> StageResult[T]:
        """Enters a state and runs its stage, capturing a stage error as a value."""
        self.state = state
        log.debug(f"Pipeline state: {state.value}")
        try:
            return StageResult(value=await stage())
        except FetchError as e:
            return StageResult(error=e)

    async def _authenticate(self) -> str:
        return await self.client.authenticator.acquire_token(self.config.credentials)

    async def _resolve(self, token: str) -> FileMetadata:
        metadata = await self.client.fetch_file_metadata(
            token, self.config.onedrive_link
        )
        if not metadata.download_url:
            raise ResolutionError("Failed to retrieve download URL.")
        return metadata

    async def _download(self, metadata: FileMetadata) -> DownloadedFile:
        destination = Path(self.config.output_dir) / metadata.file_name
        return await self.downloader.download_file(metadata.download_url, destination)

    def _fail(self, error: FetchError) -> PipelineResult:
        failed_stage = self.state
        self.state = PipelineState.FAILED
        log.debug(f"Pipeline failed during '{failed_stage.value}': {error}")
        return PipelineResult.failed(error, failed_stage)

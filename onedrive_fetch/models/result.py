"""
Explicit result values for the fetch pipeline: the states a run moves through,
the error taxonomy, and the per-stage and final outcomes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from onedrive_fetch.exceptions import FetchError

T = TypeVar("T")


class PipelineState(Enum):
    """Pipeline execution states."""

    START = "start"
    AUTHENTICATING = "authenticating"
    RESOLVING = "resolving"
    DOWNLOADING = "downloading"
    DONE = "done"
    FAILED = "failed"


class ErrorKind(Enum):
    """Which stage of the pipeline an error originated in."""

    INPUT_VALIDATION = "input_validation"
    AUTH = "auth"
    RESOLUTION = "resolution"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of a single stage: either a value or the error that stopped it."""

    value: T | None = None
    error: "FetchError | None" = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PipelineResult:
    """Final outcome of a pipeline run."""

    state: PipelineState
    file_name: str | None = None
    error_kind: ErrorKind | None = None
    error_message: str | None = None
    failed_stage: PipelineState | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.DONE

    @classmethod
    def done(cls, file_name: str) -> "PipelineResult":
        return cls(state=PipelineState.DONE, file_name=file_name)

    @classmethod
    def failed(cls, error: "FetchError", stage: PipelineState) -> "PipelineResult":
        return cls(
            state=PipelineState.FAILED,
            error_kind=error.kind,
            error_message=str(error),
            failed_stage=stage,
        )

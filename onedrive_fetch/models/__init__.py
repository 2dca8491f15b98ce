"""
Data Models Layer.

This package contains the Pydantic models and result types that define the
core data structures used throughout the application.
"""

from .config import Credentials, FetchConfig, GraphEndpoints
from .result import ErrorKind, PipelineResult, PipelineState, StageResult
from .share import DownloadedFile, FileMetadata

__all__ = [
    "Credentials",
    "DownloadedFile",
    "ErrorKind",
    "FetchConfig",
    "FileMetadata",
    "GraphEndpoints",
    "PipelineResult",
    "PipelineState",
    "StageResult",
]

"""
Models for a resolved shared item and the file written from it.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class FileMetadata(BaseModel):
    """What the Graph `shares` endpoint tells us about a shared file."""

    model_config = ConfigDict(frozen=True)

    # Temporary, pre-authenticated URL. Presence is checked by the pipeline.
    download_url: str | None = None
    file_name: str = ""


class DownloadedFile(BaseModel):
    """The local file produced by a download."""

    model_config = ConfigDict(frozen=True)

    path: Path
    size_bytes: int = 0

"""
Transfer Layer.

This package is responsible for moving file content from remote storage to
the local filesystem.
"""

from .downloader import Downloader

__all__ = ["Downloader"]

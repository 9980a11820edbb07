"""
Media component port definitions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.entities import File, Folder

from .models import ProbeResult


class FileRepoPort(Protocol):
    """Read access to stored files."""

    def get_by_id(self, file_id: int) -> File | None:
        """Get file by ID."""
        ...

    def list_files(
        self,
        *,
        extensions: Sequence[str] | None = None,
        parent_id: int | None = None,
    ) -> list[File]:
        """List files whose name ends with one of the extensions, optionally in a folder."""
        ...

    def get_folder(self, folder_id: int) -> Folder | None:
        """Get folder by ID."""
        ...


class FileUrlPort(Protocol):
    """URL and thumbnail generation for stored files."""

    def file_url(self, file: File) -> str | None:
        """Public URL of the stored file, None if it has no reachable URL."""
        ...

    def thumbnail_url(self, file: File, width: int, height: int) -> str:
        """URL of a thumbnail fitted inside width x height."""
        ...


class RemoteProbePort(Protocol):
    """Best-effort metadata probe for remote images. Must not raise."""

    def probe(self, url: str) -> ProbeResult:
        ...

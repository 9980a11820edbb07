"""
Shared fixtures: real rules, in-memory repositories and stub ports.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pytest

from src.components.embeds import EmbedResult
from src.components.media import MediaConfig, ProbeResult
from src.domain.entities import File, Folder, Page, User
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.shell.hooks.editor_hooks import EditorHooks

PROJECT_ROOT = Path(__file__).parent.parent


# --- In-memory Ports ---


class InMemoryFileRepo:
    def __init__(self) -> None:
        self.files: dict[int, File] = {}
        self.folders: dict[int, Folder] = {}

    def add(self, file: File) -> File:
        self.files[file.id] = file
        return file

    def add_folder(self, folder: Folder) -> Folder:
        self.folders[folder.id] = folder
        return folder

    def get_by_id(self, file_id: int) -> File | None:
        return self.files.get(file_id)

    def get_by_filename(self, filename: str) -> File | None:
        for file in self.files.values():
            if file.filename == filename:
                return file
        return None

    def list_files(
        self,
        *,
        extensions: Sequence[str] | None = None,
        parent_id: int | None = None,
    ) -> list[File]:
        result = []
        for file in sorted(self.files.values(), key=lambda f: f.name):
            if extensions is not None and not any(
                file.name.lower().endswith(f".{ext.lower()}") for ext in extensions
            ):
                continue
            if parent_id and file.parent_id != parent_id:
                continue
            result.append(file)
        return result

    def get_folder(self, folder_id: int) -> Folder | None:
        return self.folders.get(folder_id)


class FakeFileUrls:
    """URLs under /assets; file IDs in `missing` have no reachable URL."""

    def __init__(self) -> None:
        self.missing: set[int] = set()
        self.thumbnail_requests: list[tuple[int, int, int]] = []

    def file_url(self, file: File) -> str | None:
        if file.id in self.missing:
            return None
        return f"/assets/{file.filename}"

    def thumbnail_url(self, file: File, width: int, height: int) -> str:
        self.thumbnail_requests.append((file.id, width, height))
        return f"/assets/_resampled/fit{width}x{height}/{file.filename}"


class InMemoryPageRepo:
    def __init__(self) -> None:
        self.pages: dict[int, Page] = {}
        self.saved: list[int] = []

    def add(self, page: Page) -> Page:
        self.pages[page.id] = page
        return page

    def get_by_id(self, page_id: int) -> Page | None:
        return self.pages.get(page_id)

    def search(self, term: str) -> list[Page]:
        needle = term.lower()
        return [
            p
            for p in self.pages.values()
            if needle in p.menu_title.lower() or needle in p.title.lower()
        ]

    def save(self, page: Page) -> Page:
        self.pages[page.id] = page
        self.saved.append(page.id)
        return page


class StubEmbedLookup:
    """Resolves only the URLs it was given results for."""

    def __init__(self) -> None:
        self.results: dict[str, EmbedResult] = {}
        self.calls: list[str] = []

    def resolve(self, url: str) -> EmbedResult | None:
        self.calls.append(url)
        return self.results.get(url)


class StubProbe:
    def __init__(self, result: ProbeResult | None = None, error: Exception | None = None) -> None:
        self.result = result or ProbeResult()
        self.error = error
        self.calls: list[str] = []

    def probe(self, url: str) -> ProbeResult:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.result


# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    """The project's real rules file."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def media_config() -> MediaConfig:
    return MediaConfig()


@pytest.fixture
def file_repo() -> InMemoryFileRepo:
    return InMemoryFileRepo()


@pytest.fixture
def file_urls() -> FakeFileUrls:
    return FakeFileUrls()


@pytest.fixture
def page_repo() -> InMemoryPageRepo:
    return InMemoryPageRepo()


@pytest.fixture
def embed_lookup() -> StubEmbedLookup:
    return StubEmbedLookup()


@pytest.fixture
def probe() -> StubProbe:
    return StubProbe(ProbeResult(size_bytes=2048, width=1200, height=800))


@pytest.fixture
def make_probe():
    """StubProbe factory, for probes that fail or return nothing."""
    return StubProbe


@pytest.fixture
def hooks() -> EditorHooks:
    return EditorHooks()


@pytest.fixture
def make_file():
    """Factory for stored File records."""

    def _make(
        file_id: int = 1,
        name: str = "photo.jpg",
        *,
        width: int = 0,
        height: int = 0,
        size_bytes: int = 0,
        parent_id: int | None = 1,
        title: str = "",
    ) -> File:
        return File(
            id=file_id,
            name=name,
            title=title,
            filename=f"Uploads/{name}",
            parent_id=parent_id,
            size_bytes=size_bytes,
            width=width,
            height=height,
            created_at=datetime(2025, 1, 1, 12, 0),
            last_edited=datetime(2025, 1, 2, 12, 0),
        )

    return _make


@pytest.fixture
def editor_user() -> User:
    return User(email="editor@example.com", display_name="Editor", roles=["editor"])


@pytest.fixture
def admin_user() -> User:
    return User(email="admin@example.com", display_name="Admin", roles=["admin"])


@pytest.fixture
def viewer_user() -> User:
    return User(email="viewer@example.com", display_name="Viewer", roles=["viewer"])

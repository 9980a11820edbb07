from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteFileRepo, SQLitePageRepo, SQLiteUserRepo
from src.domain.entities import File, Folder, Page, User

MIGRATIONS_DIR = Path(__file__).parent.parent.parent / "migrations"


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "test.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def users(db_path):
    return SQLiteUserRepo(db_path)


@pytest.fixture
def files(db_path):
    repo = SQLiteFileRepo(db_path)
    repo.save_folder(Folder(id=1, name="Uploads"))
    repo.save_folder(Folder(id=2, name="Docs", parent_id=1))
    return repo


@pytest.fixture
def pages(db_path):
    return SQLitePageRepo(db_path)


def make_file(file_id, name, parent_id=1, **kwargs):
    return File(id=file_id, name=name, filename=f"Uploads/{name}", parent_id=parent_id, **kwargs)


# --- Users ---

def test_user_roundtrip_with_roles(users):
    user = User(id=uuid4(), email="ed@example.com", display_name="Ed", roles=["editor", "viewer"])
    users.save(user)

    loaded = users.get_by_id(user.id)
    assert loaded is not None
    assert loaded.email == "ed@example.com"
    assert sorted(loaded.roles) == ["editor", "viewer"]
    assert users.get_by_email("ed@example.com").id == user.id


def test_user_roles_replaced_on_save(users):
    user = User(id=uuid4(), email="ed@example.com", display_name="Ed", roles=["editor"])
    users.save(user)

    user.roles = ["admin"]
    user.status = "disabled"
    users.save(user)

    loaded = users.get_by_id(user.id)
    assert loaded.roles == ["admin"]
    assert loaded.status == "disabled"


def test_user_missing(users):
    assert users.get_by_id(uuid4()) is None
    assert users.get_by_email("nobody@example.com") is None


# --- Files ---

def test_file_roundtrip(files):
    created = datetime(2025, 3, 1, 9, 30)
    files.save(make_file(1, "photo.jpg", width=800, height=600, size_bytes=1234, created_at=created))

    loaded = files.get_by_id(1)
    assert loaded.width == 800
    assert loaded.size_bytes == 1234
    assert loaded.created_at == created
    assert files.get_by_filename("Uploads/photo.jpg").id == 1
    assert files.get_by_id(99) is None


def test_file_upsert(files):
    files.save(make_file(1, "photo.jpg"))
    files.save(make_file(1, "photo.jpg", title="Renamed"))

    assert files.get_by_id(1).title == "Renamed"
    assert len(files.list_files()) == 1


def test_list_files_by_extension_and_folder(files):
    files.save(make_file(1, "b.JPG"))
    files.save(make_file(2, "a.png"))
    files.save(make_file(3, "c.pdf"))
    files.save(make_file(4, "d.gif", parent_id=2))

    assert [f.name for f in files.list_files(extensions=["jpg", "png", "gif"])] == ["a.png", "b.JPG", "d.gif"]
    assert [f.name for f in files.list_files(extensions=["gif"], parent_id=2)] == ["d.gif"]
    assert [f.name for f in files.list_files(parent_id=1)] == ["a.png", "b.JPG", "c.pdf"]
    assert files.list_files(extensions=[]) == []


def test_extension_must_be_the_suffix(files):
    files.save(make_file(1, "jpg-notes.txt"))
    assert files.list_files(extensions=["jpg"]) == []


def test_get_folder(files):
    folder = files.get_folder(2)
    assert folder == Folder(id=2, name="Docs", parent_id=1)
    assert files.get_folder(42) is None


# --- Pages ---

def test_page_roundtrip(pages):
    page = Page(id=1, title="Home", content='<h2 id="x">Hi</h2>', visibility="logged_in")
    pages.save(page)

    loaded = pages.get_by_id(1)
    assert loaded.content == '<h2 id="x">Hi</h2>'
    assert loaded.visibility == "logged_in"
    assert pages.get_by_id(2) is None


def test_page_save_updates_content(pages):
    page = Page(id=1, title="Home")
    pages.save(page)

    page.set_field("Content", "<p>new</p>")
    pages.save(page)

    assert pages.get_by_id(1).content == "<p>new</p>"
    assert len(pages.list_all()) == 1


def test_page_search(pages):
    pages.save(Page(id=1, title="Home"))
    pages.save(Page(id=2, title="About", menu_title="About us"))
    pages.save(Page(id=3, title="Contact", menu_title="Reach us"))

    assert [p.id for p in pages.search("us")] == [2, 3]
    assert [p.id for p in pages.search("HOME")] == [1]
    assert pages.search("zzz") == []


def test_page_search_treats_wildcards_literally(pages):
    pages.save(Page(id=1, title="Home"))
    pages.save(Page(id=2, title="50% off"))
    pages.save(Page(id=3, title="snake_case"))

    assert [p.id for p in pages.search("_")] == [3]
    assert [p.id for p in pages.search("%")] == [2]
    assert [p.id for p in pages.search("0%")] == [2]

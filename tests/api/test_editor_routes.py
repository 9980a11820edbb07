"""
Tests for the editor API routes.

Routes run against in-memory repositories through dependency overrides.
"""

from __future__ import annotations

from urllib.parse import unquote

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.links.regenerator import AssetLinkRegenerator
from src.api import deps
from src.api.routes import editor
from src.components.embeds import EmbedResult
from src.components.media import MediaConfig
from src.components.toolbar import HtmlEditorToolbar, ToolbarSettings
from src.domain.entities import Folder, Page, User
from src.rules.models import Rules
from src.shell.hooks.editor_hooks import ExtensionPoint

# --- Test Setup ---


class CurrentUser:
    """Mutable stand-in for the authenticated user."""

    def __init__(self) -> None:
        self.user: User | None = None


@pytest.fixture
def current(editor_user: User) -> CurrentUser:
    holder = CurrentUser()
    holder.user = editor_user
    return holder


@pytest.fixture
def stocked(file_repo, page_repo, make_file):
    file_repo.add_folder(Folder(id=1, name="Uploads"))
    file_repo.add(make_file(1, "photo.jpg", width=800, height=600))
    file_repo.add(make_file(2, "notes.pdf"))
    page_repo.add(Page(id=1, title="Home", content='<h2 id="welcome">Hi</h2><a name="about"></a>'))
    page_repo.add(Page(id=2, title="Members", content='<a id="m"></a>', visibility="logged_in"))


@pytest.fixture
def app(
    rules: Rules,
    current: CurrentUser,
    file_repo,
    file_urls,
    page_repo,
    embed_lookup,
    probe,
    hooks,
    stocked,
) -> FastAPI:
    """Test FastAPI app with editor routes."""
    app = FastAPI()
    app.include_router(editor.router, prefix="/admin/editor")

    toolbar = HtmlEditorToolbar(
        files=file_repo,
        urls=file_urls,
        pages=page_repo,
        embeds=embed_lookup,
        probe=probe,
        config=MediaConfig.from_rules(rules.media),
        settings=ToolbarSettings(base_url="https://site.example/"),
        hooks=hooks,
    )

    app.dependency_overrides[deps.get_rules] = lambda: rules
    app.dependency_overrides[deps.get_current_user_optional] = lambda: current.user
    app.dependency_overrides[deps.get_page_repo] = lambda: page_repo
    app.dependency_overrides[deps.get_toolbar] = lambda: toolbar
    app.dependency_overrides[deps.get_hooks] = lambda: hooks
    app.dependency_overrides[deps.get_link_regenerator] = lambda: AssetLinkRegenerator(
        file_repo, file_urls
    )
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Test client."""
    return TestClient(app)


# --- Access ---


class TestAccess:
    def test_anonymous_rejected(self, client: TestClient, current: CurrentUser) -> None:
        current.user = None
        response = client.get("/admin/editor/LinkForm")
        assert response.status_code == 401

    def test_viewer_forbidden(self, client: TestClient, current: CurrentUser, viewer_user) -> None:
        current.user = viewer_user
        response = client.get("/admin/editor/MediaForm")
        assert response.status_code == 403


# --- Field / Forms ---


class TestFieldAndForms:
    def test_field_markup(self, client: TestClient) -> None:
        response = client.get("/admin/editor/field", params={"name": "Content", "value": "<p>x</p>"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'tinymce="true"' in response.text
        assert "&lt;p&gt;x&lt;/p&gt;" in response.text

    def test_readonly_field(self, client: TestClient) -> None:
        response = client.get("/admin/editor/field", params={"readonly": "true"})
        assert "(not set)" in response.text

    def test_unknown_config_is_server_error(self, client: TestClient) -> None:
        response = client.get("/admin/editor/field", params={"config": "nope"})
        assert response.status_code == 500

    def test_toolbar_placeholder(self, client: TestClient) -> None:
        response = client.get("/admin/editor/toolbar")
        assert 'data-url-linkform="/admin/editor/LinkForm/forTemplate"' in response.text

    @pytest.mark.parametrize("path", ["/admin/editor/LinkForm", "/admin/editor/LinkForm/forTemplate"])
    def test_link_form(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 200
        assert 'id="Form_LinkForm"' in response.text

    def test_media_form_in_folder(self, client: TestClient) -> None:
        response = client.get("/admin/editor/MediaForm/forTemplate", params={"ParentID": 1})

        assert response.status_code == 200
        assert 'id="Form_MediaForm"' in response.text
        assert (
            '<li data-id="1" data-thumbnail="/assets/_resampled/fit176x128/Uploads/photo.jpg" '
            'data-kind="image"'
        ) in response.text
        assert '>photo.jpg</li>' in response.text
        assert "notes.pdf" not in response.text

    def test_site_tree(self, client: TestClient) -> None:
        response = client.get("/admin/editor/sitetree", params={"search": "mem"})

        assert response.json() == [
            {"id": 2, "title": "Members", "menu_title": "Members", "visibility": "logged_in"}
        ]


# --- View File ---


class TestViewFile:
    def test_by_id(self, client: TestClient) -> None:
        response = client.get("/admin/editor/viewfile", params={"ID": 1})

        assert response.status_code == 200
        assert 'data-kind="image"' in response.text
        assert 'name="FileID" value="1"' in response.text

    def test_unknown_id(self, client: TestClient) -> None:
        response = client.get("/admin/editor/viewfile", params={"ID": 42})

        assert response.status_code == 404
        assert response.json()["detail"] == "File could not be found"

    def test_missing_parameters(self, client: TestClient) -> None:
        response = client.get("/admin/editor/viewfile")

        assert response.status_code == 400
        assert "Need either" in response.json()["detail"]

    def test_stored_non_media_file(self, client: TestClient) -> None:
        response = client.get("/admin/editor/viewfile", params={"ID": 2})
        assert response.status_code == 400

    def test_embed(self, client: TestClient, embed_lookup) -> None:
        url = "https://vimeo.com/7"
        embed_lookup.results[url] = EmbedResult(type="video", width=640, height=360)

        response = client.get("/admin/editor/viewfile", params={"FileURL": url})

        assert response.status_code == 200
        assert 'data-kind="embed"' in response.text

    def test_unresolvable_embed_sets_status_header(self, client: TestClient) -> None:
        url = "https://nowhere.example/page"
        response = client.get("/admin/editor/viewfile", params={"FileURL": url})

        assert response.status_code == 404
        assert url in unquote(response.headers["X-Status"])


# --- Anchors ---


class TestGetAnchors:
    def test_public_page(self, client: TestClient) -> None:
        response = client.get("/admin/editor/getanchors", params={"PageID": 1})

        assert response.status_code == 200
        assert response.json() == ["welcome", "about"]

    def test_anonymous_may_read_public_page(self, client: TestClient, current: CurrentUser) -> None:
        current.user = None
        response = client.get("/admin/editor/getanchors", params={"PageID": "1"})
        assert response.status_code == 200

    def test_unknown_page(self, client: TestClient) -> None:
        response = client.get("/admin/editor/getanchors", params={"PageID": "abc"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Target page not found."

    def test_protected_page(self, client: TestClient, current: CurrentUser) -> None:
        current.user = None
        response = client.get("/admin/editor/getanchors", params={"PageID": 2})
        assert response.status_code == 403


# --- Save ---


class TestSaveContent:
    def test_saves_page_content(self, client: TestClient, page_repo) -> None:
        response = client.post(
            "/admin/editor/pages/1/content",
            json={"field": "Content", "value": '<p><img src="/assets/Uploads/photo.jpg" width="400" height="300"></p>'},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["sanitized"] is False
        assert "/assets/_resampled/fit400x300/Uploads/photo.jpg" in body["content"]
        assert page_repo.pages[1].content == body["content"]
        assert page_repo.saved == [1]

    def test_process_html_hook_runs(self, client: TestClient, hooks, page_repo) -> None:
        @hooks.on(ExtensionPoint.PROCESS_HTML)
        def strip_divs(doc, **context):
            for div in doc.find_all("div"):
                div.unwrap()

        client.post("/admin/editor/pages/1/content", json={"value": "<div><p>x</p></div>"})

        assert page_repo.pages[1].content == "<p>x</p>"

    def test_non_html_field_is_configuration_error(self, client: TestClient, page_repo) -> None:
        response = client.post("/admin/editor/pages/1/content", json={"field": "Title", "value": "<b>x</b>"})

        assert response.status_code == 500
        assert page_repo.pages[1].title == "Home"
        assert page_repo.saved == []

    def test_unknown_page(self, client: TestClient) -> None:
        response = client.post("/admin/editor/pages/9/content", json={"value": "<p>x</p>"})
        assert response.status_code == 404

    def test_sanitises_when_enabled(self, app: FastAPI, client: TestClient, rules: Rules) -> None:
        strict = rules.model_copy(deep=True)
        strict.editor.sanitise_server_side = True
        app.dependency_overrides[deps.get_rules] = lambda: strict

        response = client.post(
            "/admin/editor/pages/1/content",
            json={"value": '<p onclick="x()">a</p><script>bad()</script>'},
        )

        body = response.json()
        assert body["sanitized"] is True
        assert body["content"] == "<p>a</p>"
        assert {n["code"] for n in body["notes"]} == {"stripped_attribute", "stripped_tag"}

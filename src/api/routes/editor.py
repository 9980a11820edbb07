"""
Editor API routes.

Serves the HTML editor field, the insert-link / insert-media dialog forms,
the file preview view, page anchors, and saving editor content into pages.
"""

from typing import Any, NoReturn
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse

from src.api.deps import (
    get_current_user_optional,
    get_editor_registry,
    get_field_settings,
    get_hooks,
    get_link_regenerator,
    get_page_repo,
    get_policy,
    get_toolbar,
    require_editor,
)
from src.api.schemas import PageSummary, SanitizerNote, SaveContentRequest, SaveContentResponse
from src.components.editor import (
    EditorConfigRegistry,
    EditorFieldSettings,
    RenderFieldInput,
    run_render,
    run_save_into,
)
from src.components.media import ViewFileInput
from src.components.toolbar import (
    GetAnchorsInput,
    HtmlEditorToolbar,
    run_get_anchors,
    run_view_file,
)
from src.domain.entities import User
from src.domain.errors import EditorError, EmbedResolutionError, PageNotFoundError
from src.domain.policy import PolicyEngine
from src.shell.hooks.editor_hooks import EditorHooks

router = APIRouter()


def raise_http(err: EditorError) -> NoReturn:
    """Re-raise an editor failure as the matching HTTP error."""
    headers = None
    if isinstance(err, EmbedResolutionError):
        headers = {"X-Status": quote(err.message)}
    raise HTTPException(status_code=err.status_code, detail=err.message, headers=headers) from err


# --- Field ---


@router.get("/field", response_class=HTMLResponse)
def render_field(
    name: str = "Content",
    value: str = "",
    config: str | None = None,
    readonly: bool = False,
    _user: User | None = Depends(require_editor),
    registry: EditorConfigRegistry = Depends(get_editor_registry),
    field_settings: EditorFieldSettings = Depends(get_field_settings),
) -> HTMLResponse:
    """Editor field markup."""
    try:
        result = run_render(
            RenderFieldInput(name=name, value=value, config=config, readonly=readonly),
            registry=registry,
            settings=field_settings,
        )
    except EditorError as e:
        raise_http(e)
    return HTMLResponse(result.html)


# --- Toolbar ---


@router.get("/toolbar", response_class=HTMLResponse)
def render_toolbar(
    _user: User | None = Depends(require_editor),
    toolbar: HtmlEditorToolbar = Depends(get_toolbar),
) -> HTMLResponse:
    """Placeholder the client loads the dialogs into."""
    return HTMLResponse(toolbar.for_template())


@router.get("/LinkForm", response_class=HTMLResponse)
@router.get("/LinkForm/forTemplate", response_class=HTMLResponse)
def link_form(
    _user: User | None = Depends(require_editor),
    toolbar: HtmlEditorToolbar = Depends(get_toolbar),
) -> HTMLResponse:
    return HTMLResponse(toolbar.link_form().render())


@router.get("/MediaForm", response_class=HTMLResponse)
@router.get("/MediaForm/forTemplate", response_class=HTMLResponse)
def media_form(
    parent_id: int | None = Query(None, alias="ParentID"),
    _user: User | None = Depends(require_editor),
    toolbar: HtmlEditorToolbar = Depends(get_toolbar),
) -> HTMLResponse:
    return HTMLResponse(toolbar.media_form(parent_id).render())


@router.get("/sitetree", response_model=list[PageSummary])
def site_tree_search(
    search: str = "",
    _user: User | None = Depends(require_editor),
    toolbar: HtmlEditorToolbar = Depends(get_toolbar),
) -> list[PageSummary]:
    """Pages for the internal-link dropdown."""
    return [
        PageSummary(id=p.id, title=p.title, menu_title=p.get_menu_title(), visibility=p.visibility)
        for p in toolbar.site_tree_search(search)
    ]


@router.get("/viewfile", response_class=HTMLResponse)
def view_file(
    file_id: int | None = Query(None, alias="ID"),
    file_url: str | None = Query(None, alias="FileURL"),
    _user: User | None = Depends(require_editor),
    toolbar: HtmlEditorToolbar = Depends(get_toolbar),
) -> HTMLResponse:
    """Edit fields for a stored file (ID) or a remote resource (FileURL)."""
    try:
        result = run_view_file(ViewFileInput(file_url=file_url, file_id=file_id), toolbar=toolbar)
    except EditorError as e:
        raise_http(e)
    return HTMLResponse(result.html)


@router.get("/getanchors")
def get_anchors(
    page_id: str | None = Query(None, alias="PageID"),
    user: User | None = Depends(get_current_user_optional),
    pages: Any = Depends(get_page_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> list[str]:
    """Anchor names/ids found in a page's content."""
    try:
        result = run_get_anchors(GetAnchorsInput(page_id=page_id), pages=pages, policy=policy, user=user)
    except EditorError as e:
        raise_http(e)
    return result.anchors


# --- Save ---


@router.post("/pages/{page_id}/content", response_model=SaveContentResponse)
def save_page_content(
    page_id: int,
    req: SaveContentRequest,
    user: User | None = Depends(require_editor),
    pages: Any = Depends(get_page_repo),
    policy: PolicyEngine = Depends(get_policy),
    registry: EditorConfigRegistry = Depends(get_editor_registry),
    field_settings: EditorFieldSettings = Depends(get_field_settings),
    hooks: EditorHooks = Depends(get_hooks),
    regenerator: Any = Depends(get_link_regenerator),
) -> SaveContentResponse:
    """Save editor HTML into a page field through the save pipeline."""
    try:
        page = pages.get_by_id(page_id)
        if page is None:
            raise PageNotFoundError("Target page not found.")
        if not policy.can_edit_page(user):
            raise HTTPException(status_code=403, detail="You are not permitted to edit this page.")

        result = run_save_into(
            req.field,
            req.value,
            page,
            registry=registry,
            settings=field_settings,
            hooks=hooks,
            regenerator=regenerator,
        )
    except EditorError as e:
        raise_http(e)

    pages.save(page)
    return SaveContentResponse(
        page_id=page.id,
        field=result.field_name,
        content=result.content,
        sanitized=result.sanitized,
        last_edited=page.last_edited,
        notes=[SanitizerNote(code=e.code, message=e.message, path=e.path) for e in result.errors],
    )

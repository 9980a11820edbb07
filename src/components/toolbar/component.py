"""
Toolbar component - Insert-link and insert-media dialogs for the HTML editor.

Key behaviors:
- link_form / media_form build the dialog forms, then run their update hooks
- view_file resolves a file by ID (stored file) or FileURL (remote resource),
  classifies it and returns the per-kind edit fields
- get_anchors lists the anchors of a page the caller may view
- All failures are raised as EditorError subclasses carrying an HTTP status
"""

from __future__ import annotations

import logging

from src.components.embeds import EmbedLookupPort
from src.components.media import (
    DEFAULT_MEDIA_CONFIG,
    AssetDescriptor,
    AssetRef,
    FileRepoPort,
    FileUrlPort,
    MediaConfig,
    RemoteProbePort,
    ViewFileInput,
    ViewFileOutput,
    build_file_fields,
    create_descriptor,
    describe_stored_file,
    render_view,
)
from src.core.forms import (
    CHECKBOX,
    EMAIL,
    GRID,
    HIDDEN,
    OPTIONSET,
    TEXT,
    TREE_DROPDOWN,
    UPLOAD,
    FieldList,
    Form,
    FormField,
    composite,
    literal,
)
from src.domain.entities import File, Page, User
from src.domain.errors import (
    MissingParameterError,
    PageNotFoundError,
    PermissionDeniedError,
    ResolutionError,
)
from src.domain.policy import PolicyEngine
from src.shell.hooks.editor_hooks import EditorHooks, ExtensionPoint

from ._impl import absolute_url, join_links, parse_page_id, scan_anchors
from .models import DEFAULT_TOOLBAR_SETTINGS, GetAnchorsInput, GetAnchorsOutput, ToolbarSettings
from .ports import PageRepoPort

logger = logging.getLogger(__name__)

_STEP_LABEL = (
    '<span class="step-label"><span class="flyout">{number}</span><span class="arrow"></span>'
    '<strong class="title">{title}</strong></span>'
)

URL_DESCRIPTION = (
    "Insert videos and images from the web into your page simply by entering the URL of "
    "the file. Make sure you have the rights or permissions before sharing media directly "
    "from the web.<br /><br />Please note that files are not added to the file store of "
    "the CMS but embeds the file from its original location, if for some reason the file "
    "is no longer available in its original location it will no longer be viewable on "
    "this page."
)

LINK_TYPES = {
    "internal": "Page on the site",
    "external": "Another website",
    "anchor": "Anchor on this page",
    "email": "Email address",
    "file": "Download a file",
}


class HtmlEditorToolbar:
    """
    Server side of the editor's insert-link and insert-media dialogs.

    Mounted under a controller link; every dialog form posts back to
    {controller_link}/{name}/{FormName}.
    """

    def __init__(
        self,
        *,
        files: FileRepoPort,
        urls: FileUrlPort,
        pages: PageRepoPort,
        embeds: EmbedLookupPort | None = None,
        probe: RemoteProbePort | None = None,
        config: MediaConfig = DEFAULT_MEDIA_CONFIG,
        settings: ToolbarSettings = DEFAULT_TOOLBAR_SETTINGS,
        hooks: EditorHooks | None = None,
    ) -> None:
        self._files = files
        self._urls = urls
        self._pages = pages
        self._embeds = embeds
        self._probe = probe
        self._config = config
        self._settings = settings
        self._hooks = hooks or EditorHooks()

    @property
    def settings(self) -> ToolbarSettings:
        return self._settings

    def link(self, *parts: str) -> str:
        return join_links(self._settings.controller_link, self._settings.name, *parts)

    def for_template(self) -> str:
        """Placeholder element the client fills with the dialogs."""
        return (
            f'<div id="cms-editor-dialogs" '
            f'data-url-linkform="{self.link("LinkForm", "forTemplate")}" '
            f'data-url-mediaform="{self.link("MediaForm", "forTemplate")}"></div>'
        )

    def site_tree_search(self, search: str) -> list[Page]:
        """Pages for the internal-link dropdown, matched on menu title or title."""
        return self._pages.search(search)

    # --- Link Form ---

    def link_form(self) -> Form:
        site_tree = FormField(
            name="internal",
            field_type=TREE_DROPDOWN,
            title="Page",
            attributes={
                "data-source": "page",
                "data-key-field": "ID",
                "data-label-field": "MenuTitle",
                "data-search": True,
            },
        )
        file_field = FormField(name="file", field_type=UPLOAD, title="File")
        file_field.set_attribute("data-max-files", 1)

        header = composite(
            "LinkFormHeader",
            literal(
                "Heading",
                '<h3 class="htmleditorfield-mediaform-heading insert">Insert Link</h3>',
            ),
            extra_classes="CompositeField composite cms-content-header nolabel",
        )
        content = composite(
            "LinkFormContent",
            FormField(
                name="LinkType",
                field_type=OPTIONSET,
                title=_STEP_LABEL.format(number=1, title="Link to"),
                options=dict(LINK_TYPES),
                value="internal",
            ),
            literal(
                "Step2",
                '<div class="step2">' + _STEP_LABEL.format(number=2, title="Details") + "</div>",
            ),
            site_tree,
            FormField(name="external", field_type=TEXT, title="URL", value="http://"),
            FormField(name="email", field_type=EMAIL, title="Email address"),
            file_field,
            FormField(name="Anchor", field_type=TEXT, title="Anchor"),
            FormField(name="Subject", field_type=TEXT, title="Email subject"),
            FormField(name="Description", field_type=TEXT, title="Link description"),
            FormField(name="TargetBlank", field_type=CHECKBOX, title="Open link in a new window?"),
            FormField(name="Locale", field_type=HIDDEN, value=self._settings.locale),
            extra_classes="ss-insert-link content",
        )

        form = Form(
            name="LinkForm",
            action=self.link("LinkForm"),
            fields=FieldList(header, content),
        )
        form.unset_validator()
        form.add_extra_class("htmleditorfield-form htmleditorfield-linkform cms-mediaform-content")

        return self._hooks.run(ExtensionPoint.UPDATE_LINK_FORM, form, toolbar=self)

    # --- Media Form ---

    def attach_parent_id(self, requested: int | None) -> int | None:
        """Folder to list files from; hooks may override the requested one."""
        return self._hooks.run(ExtensionPoint.UPDATE_ATTACH_PARENT_ID, requested, toolbar=self)

    def allowed_extensions(self) -> list[str]:
        """Extensions the media views can handle."""
        return self._hooks.run(
            ExtensionPoint.UPDATE_ALLOWED_EXTENSIONS,
            list(self._config.allowed_extensions),
            toolbar=self,
        )

    def get_files(self, parent_id: int | None = None) -> list[File]:
        """Stored files with an allowed extension, limited to a folder when given."""
        return self._files.list_files(
            extensions=self.allowed_extensions(),
            parent_id=parent_id or None,
        )

    def grid_row(self, file: File) -> dict[str, str]:
        """StripThumbnail and Created columns of one files grid row."""
        descriptor = describe_stored_file(
            file, self._urls.file_url(file) or "", config=self._config, urls=self._urls
        )
        return {
            "data-thumbnail": descriptor.get_preview_url(),
            "data-kind": descriptor.kind.value,
            "data-created": file.created_at.strftime("%d/%m/%Y"),
        }

    def media_form(self, requested_parent_id: int | None = None) -> Form:
        parent_id = self.attach_parent_id(requested_parent_id)
        files = self.get_files(parent_id)
        page_size = self._config.files_page_size
        first_page = files[:page_size]

        files_grid = FormField(
            name="Files",
            field_type=GRID,
            options={str(f.id): f.get_title() for f in first_page},
            option_attributes={str(f.id): self.grid_row(f) for f in first_page},
            value=len(files),
            attributes={
                "data-selectable": True,
                "data-multiselect": True,
                "data-page-size": page_size,
                "data-columns": "StripThumbnail,Title,Created",
            },
        )
        folder_select = FormField(
            name="ParentID",
            field_type=TREE_DROPDOWN,
            value=parent_id,
            attributes={"data-source": "folder"},
        ).add_extra_class("noborder content-select")

        from_cms = composite(
            "FromCMS",
            folder_select,
            files_grid,
            extra_classes="content ss-uploadfield htmleditorfield-from-cms",
        )
        from_web = composite(
            "FromWeb",
            literal("URLDescription", f'<div class="url-description">{URL_DESCRIPTION}</div>'),
            FormField(name="RemoteURL", field_type=TEXT, title="http://").add_extra_class("remoteurl"),
            literal(
                "addURLImage",
                '<button type="button" class="action ui-action-constructive ui-button field '
                'font-icon-plus add-url">Add url</button>',
            ),
            extra_classes="content ss-uploadfield htmleditorfield-from-web",
        )
        computer_upload = FormField(
            name="AssetUploadField",
            field_type=UPLOAD,
            attributes={
                "data-preview-max-width": 40,
                "data-preview-max-height": 30,
                "data-folder-name": self._config.uploads_folder,
            },
        ).add_extra_class("ss-assetuploadfield htmleditorfield-from-computer")

        all_fields = composite(
            "AllFields",
            composite(
                "DefaultPanel",
                computer_upload,
                from_cms,
                extra_classes="htmleditorfield-default-panel",
            ),
            composite("FromWebPanel", from_web, extra_classes="htmleditorfield-web-panel"),
            composite(
                "EditPanel",
                literal("contentEdit", '<div class="content-edit ss-uploadfield-files files"></div>'),
                extra_classes="ss-assetuploadfield",
            ),
            extra_classes="ss-insert-media",
        )
        headings = composite(
            "Headings",
            literal(
                "Heading",
                '<h3 class="htmleditorfield-mediaform-heading insert">Insert media from</h3>'
                '<h3 class="htmleditorfield-mediaform-heading update">Update media</h3>',
            ),
            extra_classes="cms-content-header",
        )

        form = Form(
            name="MediaForm",
            action=self.link("MediaForm"),
            fields=FieldList(headings, all_fields),
        )
        form.unset_validator()
        form.disable_security_token()
        form.add_extra_class("htmleditorfield-form htmleditorfield-mediaform cms-dialog-content")

        return self._hooks.run(ExtensionPoint.UPDATE_MEDIA_FORM, form, toolbar=self)

    # --- File View ---

    def get_fields_for_file(self, url: str, descriptor: AssetDescriptor) -> FieldList:
        """Per-kind edit fields; a get_fields_for_file hook may replace them outright."""
        fields = self._hooks.first(
            ExtensionPoint.GET_FIELDS_FOR_FILE, url=url, descriptor=descriptor
        )
        if fields is None:
            fields = build_file_fields(descriptor, self._hooks)
        return self._hooks.run(
            ExtensionPoint.UPDATE_FIELDS_FOR_FILE, fields, url=url, descriptor=descriptor
        )

    def describe(self, inp: ViewFileInput) -> AssetDescriptor:
        """
        Resolve the request to a descriptor.

        Raises:
            ResolutionError: unknown file ID, stored file without a URL, or an
                unresolvable embed
            EmbedIncompatibleError: a stored file that would need embed resolution
            MissingParameterError: neither ID nor FileURL given
        """
        file: File | None = None
        if inp.file_id is not None:
            file = self._files.get_by_id(inp.file_id)
            if file is None:
                raise ResolutionError("File could not be found")
            url = self._urls.file_url(file)
            if not url:
                raise ResolutionError("File not found")
        elif inp.file_url:
            # URLs identify remote resources
            url = absolute_url(inp.file_url, self._settings.base_url)
        else:
            raise MissingParameterError('Need either "ID" or "FileURL" parameter to identify the file')

        return create_descriptor(
            AssetRef(url=url, file=file),
            config=self._config,
            urls=self._urls,
            embeds=self._embeds,
            probe=self._probe,
        )

    def view_file(self, inp: ViewFileInput) -> ViewFileOutput:
        descriptor = self.describe(inp)
        fields = self.get_fields_for_file(descriptor.url, descriptor)
        return ViewFileOutput(
            kind=descriptor.kind,
            url=descriptor.url,
            html=render_view(descriptor, fields),
            field_names=fields.names(),
        )


# --- Component Entry Points ---


def run_view_file(inp: ViewFileInput, *, toolbar: HtmlEditorToolbar) -> ViewFileOutput:
    return toolbar.view_file(inp)


def run_get_anchors(
    inp: GetAnchorsInput,
    *,
    pages: PageRepoPort,
    policy: PolicyEngine,
    user: User | None,
) -> GetAnchorsOutput:
    """
    Anchors of a page, for the "anchor on this page" link type.

    Raises:
        PageNotFoundError: no page with that ID
        PermissionDeniedError: the user may not view the page
    """
    page_id = parse_page_id(inp.page_id)
    page = pages.get_by_id(page_id) if page_id is not None else None
    if page is None:
        raise PageNotFoundError("Target page not found.")

    if not policy.can_view_page(user, page):
        logger.info("Anchor lookup denied for page %s", page.id)
        raise PermissionDeniedError("You are not permitted to access the content of the target page.")

    return GetAnchorsOutput(page_id=page.id, anchors=scan_anchors(page.content))

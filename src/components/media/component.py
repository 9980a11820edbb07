"""
Media component - Descriptor-backed edit fields for inserted media.

Shell Layer - builds the per-kind field lists shown when a file or URL is
picked in the insert-media dialog. These fields edit the instance inserted
into HTML, not the stored file record.
"""

from __future__ import annotations

import html
import random

from src.core.forms import (
    DATE_DISABLED,
    DROPDOWN,
    FIELD_GROUP,
    HIDDEN,
    READONLY,
    TEXT,
    FieldList,
    FormField,
    composite,
    literal,
)
from src.shell.hooks.editor_hooks import EditorHooks, ExtensionPoint

from ._impl import AssetDescriptor, join_query
from .models import AssetKind

CSS_CLASS_OPTIONS: dict[str, str] = {
    "leftAlone": "On the left, on its own.",
    "center": "Centered, on its own.",
    "left": "On the left, with text wrapping around.",
    "right": "On the right, with text wrapping around.",
}


def render_preview(descriptor: AssetDescriptor, hooks: EditorHooks | None = None) -> str:
    """Preview <img> markup. A get_preview hook may supply its own."""
    if hooks is not None:
        custom = hooks.first(ExtensionPoint.GET_PREVIEW, descriptor=descriptor)
        if custom:
            return str(custom)

    # Cache-busting query so the dialog never shows a stale thumbnail
    thumbnail_url = join_query(descriptor.get_preview_url(), f"r={random.randint(1, 100000)}")
    return (
        f"<img id='thumbnailImage' class='thumbnail-preview'  "
        f"src='{html.escape(thumbnail_url, quote=True)}' "
        f"alt='{html.escape(descriptor.get_name(), quote=True)}' />\n"
    )


def build_detail_fields(descriptor: AssetDescriptor) -> FieldList:
    """Read-only facts about the asset: type, size, URL, dates, original size."""
    fields = FieldList(
        FormField(name="FileType", field_type=READONLY, title="File type", value=descriptor.get_file_type()),
        FormField(
            name="ClickableURL",
            field_type=READONLY,
            title="URL",
            value=descriptor.get_external_link(),
            dont_escape=True,
        ),
    )

    size = descriptor.get_size()
    if size:
        fields.insert_after(
            "FileType", FormField(name="Size", field_type=READONLY, title="File size", value=size)
        )

    file = descriptor.file
    if file is not None:
        fields.push(
            FormField(
                name="Created",
                field_type=DATE_DISABLED,
                title="First uploaded",
                value=file.created_at.strftime("%d/%m/%Y"),
            )
        )
        fields.push(
            FormField(
                name="LastEdited",
                field_type=DATE_DISABLED,
                title="Last changed",
                value=file.last_edited.strftime("%d/%m/%Y"),
            )
        )

    if descriptor.kind == AssetKind.IMAGE:
        width = descriptor.get_original_width()
        height = descriptor.get_original_height()
        if width and height:
            fields.insert_after(
                "ClickableURL",
                FormField(name="OriginalWidth", field_type=READONLY, title="Width", value=width),
            )
            fields.insert_after(
                "OriginalWidth",
                FormField(name="OriginalHeight", field_type=READONLY, title="Height", value=height),
            )

    return fields


def build_file_fields(descriptor: AssetDescriptor, hooks: EditorHooks | None = None) -> FieldList:
    """Edit fields for the inserted instance, specialised per kind."""
    preview = composite("FilePreviewImage", literal("ImageFull", render_preview(descriptor, hooks)))
    preview.add_extra_class("cms-file-info-preview")
    data = FormField(
        name="FilePreviewData", field_type="composite", children=build_detail_fields(descriptor)
    )
    data.add_extra_class("cms-file-info-data")

    fields = FieldList(
        composite("FilePreview", preview, data, extra_classes="cms-file-info"),
        FormField(name="CaptionText", title="Caption text"),
        FormField(
            name="CSSClass",
            field_type=DROPDOWN,
            title="Alignment / style",
            options=dict(CSS_CLASS_OPTIONS),
        ),
        FormField(
            name="Dimensions",
            field_type=FIELD_GROUP,
            title="Dimensions",
            children=FieldList(
                FormField(name="Width", title="Width", value=descriptor.get_insert_width(), max_length=5),
                FormField(name="Height", title=" x Height", value=descriptor.get_insert_height(), max_length=5),
            ),
        ).add_extra_class("dimensions last"),
        FormField(name="URL", field_type=HIDDEN, value=descriptor.url),
        FormField(name="FileID", field_type=HIDDEN, value=descriptor.get_file_id()),
    )

    if descriptor.kind == AssetKind.IMAGE:
        alt_title = descriptor.file.title if descriptor.file else ""
        fields.insert_before(
            "CaptionText",
            FormField(name="AltText", field_type=TEXT, title="Alternative text (alt)", value=alt_title, max_length=80)
            .set_description("Shown to screen readers or if image can't be displayed"),
        )
        fields.insert_after(
            "AltText",
            FormField(name="Title", field_type=TEXT, title="Title text (tooltip)")
            .set_description("For additional information about the image"),
        )
    elif descriptor.kind == AssetKind.EMBED and descriptor.get_type() == "photo":
        fields.insert_before(
            "CaptionText",
            FormField(
                name="AltText",
                title="Alternative text (alt) - shown if image can't be displayed",
                value=descriptor.embed.title if descriptor.embed else None,
                max_length=80,
            ),
        )
        fields.insert_before(
            "CaptionText",
            FormField(
                name="Title",
                title="Title text (tooltip) - for additional information about the image",
            ),
        )
    elif descriptor.kind == AssetKind.FLASH:
        fields.remove_by_name("CaptionText", data_field_only=True)

    if hooks is not None:
        fields = hooks.run(ExtensionPoint.UPDATE_FIELDS, fields, descriptor=descriptor)
    return fields


def render_view(descriptor: AssetDescriptor, fields: FieldList) -> str:
    """Markup for the file view: a wrapper carrying kind metadata plus the fields."""
    attrs = {
        "data-kind": descriptor.kind.value,
        "data-category": descriptor.app_category() or "",
        "data-url": descriptor.url,
        "data-name": descriptor.get_name(),
    }
    if descriptor.get_type():
        attrs["data-type"] = descriptor.get_type() or ""
    attr_html = "".join(f' {key}="{html.escape(str(val), quote=True)}"' for key, val in attrs.items())
    return (
        f'<div class="ss-uploadfield-item ss-htmleditorfield-file {descriptor.kind.value}"{attr_html}>'
        f"{fields.render()}</div>"
    )

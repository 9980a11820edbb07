"""
Media component - Asset classification, descriptors and insertion geometry.
"""

from ._impl import (
    APP_CATEGORIES,
    AssetDescriptor,
    classify,
    compute_insert_geometry,
    create_descriptor,
    describe_stored_file,
    format_size,
    get_app_category,
    get_file_extension,
    get_file_type,
    icon_for_extension,
    url_basename,
)
from .component import build_detail_fields, build_file_fields, render_preview, render_view
from .models import (
    DEFAULT_MEDIA_CONFIG,
    AssetKind,
    AssetRef,
    InsertionGeometry,
    MediaConfig,
    ProbeResult,
    ViewFileInput,
    ViewFileOutput,
)
from .ports import FileRepoPort, FileUrlPort, RemoteProbePort

__all__ = [
    # Entry points
    "create_descriptor",
    "describe_stored_file",
    "build_file_fields",
    "build_detail_fields",
    "render_preview",
    "render_view",
    # Helper functions
    "classify",
    "compute_insert_geometry",
    "format_size",
    "get_app_category",
    "get_file_extension",
    "get_file_type",
    "icon_for_extension",
    "url_basename",
    # Configuration
    "APP_CATEGORIES",
    "DEFAULT_MEDIA_CONFIG",
    "MediaConfig",
    # Models
    "AssetDescriptor",
    "AssetKind",
    "AssetRef",
    "InsertionGeometry",
    "ProbeResult",
    "ViewFileInput",
    "ViewFileOutput",
    # Ports
    "FileRepoPort",
    "FileUrlPort",
    "RemoteProbePort",
]

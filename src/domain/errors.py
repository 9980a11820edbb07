"""
Editor error taxonomy.

Every error carries a human-readable message and the HTTP status the API
layer answers with. Probe failures never surface as errors; they degrade to
unknown values where they happen.
"""

from __future__ import annotations


class EditorError(Exception):
    """Base class for request-aborting editor failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(EditorError):
    """A field is wired to a record in a way that cannot work."""

    status_code = 500


class ResolutionError(EditorError):
    """A file or embed could not be resolved."""

    status_code = 404


class EmbedResolutionError(ResolutionError):
    """The embed lookup returned nothing for a URL."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"The URL '{url}' could not be turned into a media resource.")


class MissingParameterError(EditorError):
    """The request lacks the parameter identifying its target."""

    status_code = 400


class EmbedIncompatibleError(EditorError):
    """A local file was routed through embed resolution."""

    status_code = 400

    def __init__(self, message: str = "oEmbed is only compatible with remote files") -> None:
        super().__init__(message)


class PermissionDeniedError(EditorError):
    status_code = 403


class PageNotFoundError(EditorError):
    status_code = 404

"""Exceptions raised while rendering and storing order documents."""


class DocumentError(Exception):
    """Base class for order document failures."""


class RenderFailure(DocumentError):
    """The rendering engine failed to start, crashed or produced no output."""


class RenderTimeout(RenderFailure):
    """The rendering engine did not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(f"Rendering did not finish within {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds


class StorageFailure(DocumentError):
    """Upload or pre-signed URL issuance failed while storage is configured."""

    def __init__(self, message: str, object_name: str | None = None) -> None:
        super().__init__(message)
        self.object_name = object_name

"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ContentValidationError(Exception):
    """Raised when caller-supplied content breaks a domain rule."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class MediaHostError(Exception):
    """Raised when the external media host rejects a request.

    Provider-agnostic — the provider name travels with the error.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")


class MediaUploadError(MediaHostError):
    """An upload to the media host failed."""


class MediaDeletionError(MediaHostError):
    """A delete request to the media host failed."""


class ContentPersistenceError(Exception):
    """Raised when the database transaction of a content write fails."""

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(f"Failed to save {kind}: {message}")


class DuplicateEntryError(Exception):
    """Raised when an entry would clash with an existing one (e.g. a category title)."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)

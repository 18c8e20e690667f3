"""Exceptions shared across the content service and the admin console."""


class ContentServiceError(Exception):
    """Base class for content service errors."""


class ValidationFailed(ContentServiceError):
    """A payload did not match its schema.

    `errors` is a list of {"field": ..., "message": ...} dicts.
    """

    def __init__(self, errors: list[dict]):
        self.errors = errors
        fields = ", ".join(e["field"] for e in errors) or "payload"
        super().__init__(f"Validation failed: {fields}")


class StoreNotOpenError(ContentServiceError):
    """A session was requested before ContentStore.open()."""


class MediaError(ContentServiceError):
    """An image could not be validated, stored or removed."""


class ContentApiError(ContentServiceError):
    """The content API answered with an error envelope or could not be reached."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)

"""API error classes.

Each error carries its HTTP status and a machine-readable code. Handlers
registered in ``job_tracker.main`` render them as the error envelope, so
routers and repositories just raise.
"""


class APIError(Exception):
    """Base for every error that reaches the client as an envelope.

    Attributes:
        code: Stable identifier clients can switch on ("NOT_FOUND", ...).
        message: Text safe to show to the user.
        status_code: HTTP status of the response.
        details: Field-level information, when there is any.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """400: the request is well-formed HTTP but its content is rejected.

    Empty id lists, unknown sort fields and malformed filter dates all
    land here, as do pydantic body errors.
    """

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        super().__init__("VALIDATION_ERROR", message, 400, details)


class UnauthorizedError(APIError):
    """401: no usable identity. The reason is deliberately not given."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__("UNAUTHORIZED", message, 401)


class NotFoundError(APIError):
    """404: no such row for this caller.

    A row owned by someone else raises exactly this, with the same
    message, so ids can't be discovered across owners.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__("NOT_FOUND", message, 404)


class BackendError(APIError):
    """500 carrying the database's own message (constraint names and all)."""

    def __init__(self, message: str) -> None:
        super().__init__("BACKEND_ERROR", message, 500)


class InternalError(APIError):
    """500 for anything unexpected; never includes internals."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__("INTERNAL_ERROR", message, 500)

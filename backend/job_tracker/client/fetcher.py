"""HTTP fetch helper shared by the client data hooks.

Non-2xx responses raise ApiRequestError carrying the server's error
message (from the ``{"error": {...}}`` envelope) and the status code.
"""

from typing import Any

import httpx

DEFAULT_ERROR_MESSAGE = "Request failed"


class ApiRequestError(Exception):
    """A request to the job tracker API failed.

    Attributes:
        message: Server-provided message, or "Request failed".
        status_code: HTTP status of the response.
    """

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def error_message(response: httpx.Response) -> str:
    """Extract a human-readable message from an error response.

    Accepts both the envelope form ``{"error": {"message": ...}}`` and a
    bare ``{"error": "..."}``; anything else yields the default message.
    """
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error = error.get("message")
    if isinstance(error, str) and error:
        return error
    return DEFAULT_ERROR_MESSAGE


async def api_fetch(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    """Send a request and return the decoded JSON body.

    Args:
        client: HTTP client (base URL and cookies already configured).
        method: HTTP method.
        url: Request URL, relative to the client's base URL.
        **kwargs: Passed through to ``httpx.AsyncClient.request``.

    Returns:
        Parsed JSON body.

    Raises:
        ApiRequestError: If the response status is not 2xx.
    """
    response = await client.request(method, url, **kwargs)
    if response.is_error:
        raise ApiRequestError(error_message(response), response.status_code)
    return response.json()

"""slowapi limiter for the bulk endpoints.

Bulk update and bulk delete touch many rows per call, so they are
throttled (RATE_LIMIT_BULK). In hosted mode the bucket is the JWT
subject; otherwise it is the client address.

Usage in routers:
    @router.put("/bulk")
    @limiter.limit(settings.rate_limit_bulk)
    async def bulk_update_applications(request: Request, ...):
        ...
"""

import jwt
from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from job_tracker.core.config import settings

_PERIOD_SECONDS = {"second": 1, "minute": 60, "hour": 3600, "day": 86400}
_DEFAULT_RETRY_AFTER = 60

# Longest sub we key on (a UUID string)
_MAX_SUB_LENGTH = 36


def _rate_limit_key_func(request: Request) -> str:
    """Bucket key for a request.

    - auth disabled: "<ip>"
    - auth enabled, token with a sub: "user:<sub>"
    - auth enabled, no usable token: "unauth:<ip>"

    Only the signature and sub are checked here; the dependency in
    ``api.deps`` still authenticates the request properly.
    """
    address = get_remote_address(request)
    if not settings.auth_enabled:
        return address

    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        return f"unauth:{address}"

    try:
        claims = jwt.decode(
            token,
            settings.auth_secret.get_secret_value(),
            algorithms=["HS256"],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
        )
    except jwt.InvalidTokenError:
        return f"unauth:{address}"

    sub = claims.get("sub")
    if isinstance(sub, str) and 0 < len(sub) <= _MAX_SUB_LENGTH:
        return f"user:{sub}"
    return f"unauth:{address}"


limiter = Limiter(
    key_func=_rate_limit_key_func,
    enabled=settings.rate_limit_enabled,
)


def retry_after_seconds(detail: str | None) -> int:
    """Length of the limit window described by slowapi's detail text.

    Example:
        >>> retry_after_seconds("30 per 1 minute")
        60
        >>> retry_after_seconds("5 per 2 hours")
        7200
    """
    try:
        amount, unit = detail.split()[-2:]
        return int(amount) * _PERIOD_SECONDS[unit.rstrip("s")]
    except (AttributeError, ValueError, KeyError):
        return _DEFAULT_RETRY_AFTER


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """429 in the standard error envelope, with Retry-After."""
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMITED",
                "message": f"Rate limit exceeded: {exc.detail}",
                "details": None,
            }
        },
        headers={"Retry-After": str(retry_after_seconds(exc.detail))},
    )

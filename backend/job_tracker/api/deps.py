"""FastAPI dependencies shared by the v1 routers.

Local-first mode uses DEFAULT_USER_ID; hosted mode validates a JWT from
the session cookie. Either way the handler receives a plain owner id and
passes it explicitly to every repository call.
"""

import uuid
from typing import Annotated

import jwt
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from job_tracker.core.config import settings
from job_tracker.core.database import get_db
from job_tracker.core.errors import UnauthorizedError


def get_current_user_id(request: Request) -> uuid.UUID:
    """Resolve the owner of this request.

    With auth off, DEFAULT_USER_ID (401 when unset). With auth on, the
    session cookie must hold an HS256 token with our audience and issuer,
    unexpired, whose ``sub`` is a UUID; anything else is a bare 401.
    """
    if not settings.auth_enabled:
        if settings.default_user_id is None:
            raise UnauthorizedError()
        return settings.default_user_id

    token = request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise UnauthorizedError()

    try:
        claims = jwt.decode(
            token,
            settings.auth_secret.get_secret_value(),
            algorithms=["HS256"],
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options={"require": ["exp", "sub"]},
        )
        return uuid.UUID(claims["sub"])
    except (
        jwt.InvalidTokenError, KeyError, ValueError, TypeError, AttributeError
    ) as exc:
        raise UnauthorizedError() from exc


# Handler parameter types
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]

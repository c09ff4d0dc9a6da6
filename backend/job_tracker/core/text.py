"""String type for values that end up in PostgreSQL text columns.

PostgreSQL refuses U+0000 in text, and asyncpg reports it as a driver
error at bind time. ``DbText`` rejects it during validation instead, so
``?search=a%00b`` or ``{"notes": "a\\u0000b"}`` is a 400, not a 500.
"""

from typing import Annotated

from pydantic import AfterValidator

NUL = "\x00"


def reject_nul(value: str) -> str:
    """Return ``value`` unchanged; raise if it contains a NUL character."""
    if NUL in value:
        msg = "must not contain NUL (\\x00) characters"
        raise ValueError(msg)
    return value


DbText = Annotated[str, AfterValidator(reject_nul)]

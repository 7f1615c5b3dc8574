from __future__ import annotations

import uuid

from app.services.error_codes import ErrorCode
from app.services.exceptions import NotFoundError


def coerce_id(value: uuid.UUID | str, not_found: ErrorCode) -> uuid.UUID:
    """Parse an id from a path or body; a malformed id can never match a row."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except ValueError:
        raise NotFoundError(not_found) from None

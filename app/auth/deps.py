from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.auth.jwt import user_id_from_token
from app.db import get_db
from app.services.error_codes import ErrorCode, message_for
from app.storage.base import StorageAdapter
from app.storage.factory import get_storage

DBSession = Annotated[Session, Depends(get_db)]
Storage = Annotated[StorageAdapter, Depends(get_storage)]


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={
            "code": ErrorCode.UNAUTHENTICATED.value,
            "message": message_for(ErrorCode.UNAUTHENTICATED),
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_id(request: Request) -> uuid.UUID:
    """Resolve the acting identity from the bearer token without touching the database."""
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        raise _unauthorized()

    token = auth.removeprefix("Bearer ").strip()
    if not token:
        raise _unauthorized()

    try:
        return user_id_from_token(token)
    except ValueError:
        raise _unauthorized() from None


CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]

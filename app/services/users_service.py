from __future__ import annotations

import io
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any

import structlog
from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.auth.jwt import create_access_token
from app.auth.password import burn_verification, hash_password, verify_password
from app.avatars import avatar_seed, generate_identicon
from app.core.config import settings
from app.models import Follow, User
from app.services.error_codes import ErrorCode
from app.services.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.services.ids import coerce_id
from app.storage.base import StorageAdapter

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("email", "name", "bio", "date_of_birth", "location")


@dataclass(frozen=True)
class Identity:
    access_token: str
    expires_in: int


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _validated_email(email: str) -> str:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError(ErrorCode.INVALID_EMAIL) from None
    return normalize_email(email)


def _find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email))


def _avatar_key(user_id: uuid.UUID) -> str:
    return f"avatars/{user_id}.png"


def register(db: Session, storage: StorageAdapter, email: str, password: str, name: str) -> User:
    email = normalize_email(email)
    name = name.strip()
    if not email or not password or not name:
        raise ValidationError(ErrorCode.EMPTY_FIELDS)

    if _find_by_email(db, email):
        raise ConflictError(ErrorCode.USER_EXISTS)

    user = User(email=email, name=name, password_hash=hash_password(password))
    db.add(user)
    try:
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.USER_EXISTS) from exc

    key = _avatar_key(user.id)
    try:
        avatar = generate_identicon(avatar_seed(name), size=settings.avatar_size)
        user.avatar_url = storage.put_file(key, io.BytesIO(avatar))
    except Exception:
        db.rollback()
        logger.exception("avatar_write_failed", user_id=str(user.id))
        raise

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        storage.delete(key)
        raise ConflictError(ErrorCode.USER_EXISTS) from exc
    except Exception:
        db.rollback()
        storage.delete(key)
        raise

    db.refresh(user)
    logger.info("user_registered", user_id=str(user.id))
    return user


def authenticate(db: Session, email: str, password: str) -> Identity:
    if not email or not password:
        raise ValidationError(ErrorCode.EMPTY_FIELDS)

    user = _find_by_email(db, normalize_email(email))
    if not user:
        burn_verification(password)
        raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS)

    logger.info("user_logged_in", user_id=str(user.id))
    return Identity(
        access_token=create_access_token(user.id),
        expires_in=settings.access_token_ttl_seconds,
    )


def get_by_id(
    db: Session,
    user_id: uuid.UUID | str,
    include_relations: bool = False,
    include_related_users: bool = False,
) -> User:
    user_id = coerce_id(user_id, ErrorCode.USER_NOT_FOUND)
    stmt = select(User).where(User.id == user_id)
    if include_related_users:
        stmt = stmt.options(
            selectinload(User.followers).selectinload(Follow.follower),
            selectinload(User.following).selectinload(Follow.following),
        )
    elif include_relations:
        stmt = stmt.options(selectinload(User.followers), selectinload(User.following))

    user = db.scalar(stmt)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND)
    return user


def _parse_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(ErrorCode.INVALID_DATE) from None


def update(db: Session, user_id: uuid.UUID | str, acting_id: uuid.UUID, fields: dict[str, Any]) -> User:
    """Apply a partial profile update on behalf of ``acting_id``.

    Ownership is checked before the payload is looked at. Only keys in
    ``UPDATABLE_FIELDS`` with a non-empty value are applied; everything else
    keeps its stored value. The avatar is never touched here.
    """
    try:
        target_id = coerce_id(user_id, ErrorCode.USER_NOT_FOUND)
    except NotFoundError:
        target_id = None
    if target_id != acting_id:
        raise PermissionDeniedError(ErrorCode.FORBIDDEN)

    user = get_by_id(db, target_id)

    changes: dict[str, Any] = {}
    for key, value in fields.items():
        if key not in UPDATABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        if value in (None, ""):
            continue
        changes[key] = value

    if "email" in changes:
        changes["email"] = _validated_email(changes["email"])
        existing = _find_by_email(db, changes["email"])
        if existing and existing.id != user.id:
            raise ConflictError(ErrorCode.EMAIL_IN_USE)

    if "date_of_birth" in changes:
        changes["date_of_birth"] = _parse_date(changes["date_of_birth"])

    for key, value in changes.items():
        setattr(user, key, value)

    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.EMAIL_IN_USE) from exc

    db.refresh(user)
    logger.info("user_updated", user_id=str(user.id), fields=sorted(changes))
    return user

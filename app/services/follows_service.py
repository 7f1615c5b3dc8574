from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Follow, User
from app.services.error_codes import ErrorCode
from app.services.exceptions import ConflictError, NotFoundError, ValidationError
from app.services.ids import coerce_id

logger = structlog.get_logger(__name__)


def _find_edge(db: Session, follower_id: uuid.UUID, following_id: uuid.UUID) -> Follow | None:
    return db.scalar(
        select(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )


def is_following(db: Session, follower_id: uuid.UUID, following_id: uuid.UUID) -> bool:
    return _find_edge(db, follower_id, following_id) is not None


def follow(db: Session, follower_id: uuid.UUID, following_id: uuid.UUID | str) -> Follow:
    following_id = coerce_id(following_id, ErrorCode.USER_NOT_FOUND)
    if follower_id == following_id:
        raise ValidationError(ErrorCode.SELF_FOLLOW)

    if not db.get(User, following_id):
        raise NotFoundError(ErrorCode.USER_NOT_FOUND)

    if is_following(db, follower_id, following_id):
        raise ConflictError(ErrorCode.ALREADY_FOLLOWING)

    edge = Follow(follower_id=follower_id, following_id=following_id)
    db.add(edge)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.ALREADY_FOLLOWING) from exc

    db.refresh(edge)
    logger.info("user_followed", follower_id=str(follower_id), following_id=str(following_id))
    return edge


def unfollow(db: Session, follower_id: uuid.UUID, following_id: uuid.UUID | str) -> Follow:
    following_id = coerce_id(following_id, ErrorCode.FOLLOW_NOT_FOUND)
    edge = _find_edge(db, follower_id, following_id)
    if not edge:
        raise NotFoundError(ErrorCode.FOLLOW_NOT_FOUND)

    db.delete(edge)
    db.commit()
    logger.info("user_unfollowed", follower_id=str(follower_id), following_id=str(following_id))
    return edge

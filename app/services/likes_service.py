from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models import Like, Post
from app.services.error_codes import ErrorCode
from app.services.exceptions import ConflictError, NotFoundError
from app.services.ids import coerce_id

logger = structlog.get_logger(__name__)


def _find_like(db: Session, user_id: uuid.UUID, post_id: uuid.UUID) -> Like | None:
    return db.scalar(select(Like).where(Like.user_id == user_id, Like.post_id == post_id))


def like_post(db: Session, user_id: uuid.UUID, post_id: uuid.UUID | str) -> Like:
    post_id = coerce_id(post_id, ErrorCode.POST_NOT_FOUND)
    if not db.get(Post, post_id):
        raise NotFoundError(ErrorCode.POST_NOT_FOUND)

    if _find_like(db, user_id, post_id):
        raise ConflictError(ErrorCode.ALREADY_LIKED)

    like = Like(user_id=user_id, post_id=post_id)
    db.add(like)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(ErrorCode.ALREADY_LIKED) from exc

    db.refresh(like)
    logger.info("post_liked", post_id=str(post_id), user_id=str(user_id))
    return like


def unlike_post(db: Session, user_id: uuid.UUID, post_id: uuid.UUID | str) -> Like:
    post_id = coerce_id(post_id, ErrorCode.POST_NOT_FOUND)
    like = _find_like(db, user_id, post_id)
    if not like:
        raise NotFoundError(ErrorCode.LIKE_NOT_FOUND)

    db.delete(like)
    db.commit()
    logger.info("post_unliked", post_id=str(post_id), user_id=str(user_id))
    return like

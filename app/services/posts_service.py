from __future__ import annotations

import uuid
from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models import Comment, Post
from app.services.error_codes import ErrorCode
from app.services.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from app.services.ids import coerce_id

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PostView:
    post: Post
    liked_by_user: bool


def _with_relations(stmt, include_comments: bool = False):
    options = [selectinload(Post.author), selectinload(Post.likes)]
    if include_comments:
        options.append(selectinload(Post.comments).selectinload(Comment.user))
    else:
        options.append(selectinload(Post.comments))
    return stmt.options(*options)


def _view(post: Post, viewer_id: uuid.UUID) -> PostView:
    return PostView(post=post, liked_by_user=any(like.user_id == viewer_id for like in post.likes))


def _load_post(db: Session, post_id: uuid.UUID | str, include_comments: bool = False) -> Post:
    post_id = coerce_id(post_id, ErrorCode.POST_NOT_FOUND)
    post = db.scalar(_with_relations(select(Post).where(Post.id == post_id), include_comments))
    if not post:
        raise NotFoundError(ErrorCode.POST_NOT_FOUND)
    return post


def create_post(db: Session, author_id: uuid.UUID, content: str) -> PostView:
    content = content.strip()
    if not content:
        raise ValidationError(ErrorCode.EMPTY_FIELDS)

    post = Post(content=content, author_id=author_id)
    db.add(post)
    db.commit()
    logger.info("post_created", post_id=str(post.id), author_id=str(author_id))
    return _view(_load_post(db, post.id), author_id)


def list_posts(db: Session, viewer_id: uuid.UUID) -> list[PostView]:
    stmt = _with_relations(select(Post).order_by(Post.created_at.desc()))
    return [_view(post, viewer_id) for post in db.scalars(stmt).all()]


def get_post(db: Session, post_id: uuid.UUID | str, viewer_id: uuid.UUID) -> PostView:
    return _view(_load_post(db, post_id, include_comments=True), viewer_id)


def delete_post(db: Session, post_id: uuid.UUID | str, acting_id: uuid.UUID) -> Post:
    post = _load_post(db, post_id)
    if post.author_id != acting_id:
        raise PermissionDeniedError(ErrorCode.FORBIDDEN)

    db.delete(post)
    db.commit()
    logger.info("post_deleted", post_id=str(post_id))
    return post


def create_comment(db: Session, user_id: uuid.UUID, post_id: uuid.UUID | str, content: str) -> Comment:
    post_id = coerce_id(post_id, ErrorCode.POST_NOT_FOUND)
    content = content.strip()
    if not content:
        raise ValidationError(ErrorCode.EMPTY_FIELDS)

    if not db.get(Post, post_id):
        raise NotFoundError(ErrorCode.POST_NOT_FOUND)

    comment = Comment(content=content, user_id=user_id, post_id=post_id)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    logger.info("comment_created", comment_id=str(comment.id), post_id=str(post_id))
    return comment


def delete_comment(db: Session, comment_id: uuid.UUID | str, acting_id: uuid.UUID) -> Comment:
    comment_id = coerce_id(comment_id, ErrorCode.COMMENT_NOT_FOUND)
    comment = db.get(Comment, comment_id)
    if not comment:
        raise NotFoundError(ErrorCode.COMMENT_NOT_FOUND)
    if comment.user_id != acting_id:
        raise PermissionDeniedError(ErrorCode.FORBIDDEN)

    db.delete(comment)
    db.commit()
    logger.info("comment_deleted", comment_id=str(comment_id))
    return comment

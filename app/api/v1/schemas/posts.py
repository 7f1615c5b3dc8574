from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.api.v1.schemas.base import SchemaBase
from app.api.v1.schemas.users import UserOut
from app.services.posts_service import PostView


class PostIn(SchemaBase):
    content: str = Field(min_length=1)


class CommentIn(SchemaBase):
    post_id: str = Field(min_length=1)
    content: str = Field(min_length=1)


class LikeIn(SchemaBase):
    post_id: str = Field(min_length=1)


class LikeOut(SchemaBase):
    id: UUID
    user_id: UUID
    post_id: UUID
    created_at: datetime


class CommentOut(SchemaBase):
    id: UUID
    content: str
    user_id: UUID
    post_id: UUID
    created_at: datetime


class CommentWithUserOut(CommentOut):
    user: UserOut


class PostOut(SchemaBase):
    id: UUID
    content: str
    author_id: UUID
    author: UserOut
    likes: list[LikeOut] = []
    comments: list[CommentOut] = []
    liked_by_user: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: PostView) -> "PostOut":
        out = cls.model_validate(view.post)
        out.liked_by_user = view.liked_by_user
        return out


class PostDetailOut(PostOut):
    comments: list[CommentWithUserOut] = []


class DeletedPostOut(SchemaBase):
    id: UUID
    content: str
    author_id: UUID
    created_at: datetime

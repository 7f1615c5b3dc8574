from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.api.v1.schemas.base import SchemaBase


class RegisterIn(SchemaBase):
    email: EmailStr
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoginIn(SchemaBase):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class TokenOut(SchemaBase):
    token: str
    token_type: str = "bearer"
    expires_in: int


class UserOut(SchemaBase):
    id: UUID
    email: str
    name: str
    bio: str | None = None
    date_of_birth: date | None = None
    location: str | None = None
    avatar_url: str | None = None
    created_at: datetime
    updated_at: datetime


class FollowOut(SchemaBase):
    id: UUID
    follower_id: UUID
    following_id: UUID
    created_at: datetime


class FollowerOut(FollowOut):
    follower: UserOut


class FollowingOut(FollowOut):
    following: UserOut


class CurrentUserOut(UserOut):
    followers: list[FollowerOut] = []
    following: list[FollowingOut] = []


class UserProfileOut(UserOut):
    followers: list[FollowOut] = []
    following: list[FollowOut] = []
    is_following: bool = False

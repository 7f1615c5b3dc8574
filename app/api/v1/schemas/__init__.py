from app.api.v1.schemas.follows import FollowIn
from app.api.v1.schemas.posts import (
    CommentIn,
    CommentOut,
    CommentWithUserOut,
    DeletedPostOut,
    LikeIn,
    LikeOut,
    PostDetailOut,
    PostIn,
    PostOut,
)
from app.api.v1.schemas.users import (
    CurrentUserOut,
    FollowerOut,
    FollowingOut,
    FollowOut,
    LoginIn,
    RegisterIn,
    TokenOut,
    UserOut,
    UserProfileOut,
)

__all__ = [
    "FollowIn",
    "FollowOut",
    "FollowerOut",
    "FollowingOut",
    "RegisterIn",
    "LoginIn",
    "TokenOut",
    "UserOut",
    "CurrentUserOut",
    "UserProfileOut",
    "PostIn",
    "PostOut",
    "PostDetailOut",
    "DeletedPostOut",
    "CommentIn",
    "CommentOut",
    "CommentWithUserOut",
    "LikeIn",
    "LikeOut",
]

from app.models.base import Base
from app.models.comment import Comment
from app.models.follow import Follow
from app.models.like import Like
from app.models.post import Post
from app.models.user import User

__all__ = ["Base", "User", "Follow", "Post", "Comment", "Like"]

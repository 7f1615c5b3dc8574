from pydantic import Field

from app.api.v1.schemas.base import SchemaBase


class FollowIn(SchemaBase):
    following_id: str = Field(min_length=1)

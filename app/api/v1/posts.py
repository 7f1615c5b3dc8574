from __future__ import annotations

from fastapi import APIRouter

from app.api.errors import http_error_from_service
from app.api.v1.schemas import DeletedPostOut, PostDetailOut, PostIn, PostOut
from app.auth.deps import CurrentUserId, DBSession
from app.services import posts_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostOut)
def create_post(payload: PostIn, user_id: CurrentUserId, db: DBSession):
    try:
        view = posts_service.create_post(db, user_id, payload.content)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return PostOut.from_view(view)


@router.get("", response_model=list[PostOut])
def list_posts(user_id: CurrentUserId, db: DBSession):
    return [PostOut.from_view(view) for view in posts_service.list_posts(db, user_id)]


@router.get("/{post_id}", response_model=PostDetailOut)
def get_post(post_id: str, user_id: CurrentUserId, db: DBSession):
    try:
        view = posts_service.get_post(db, post_id, user_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return PostDetailOut.from_view(view)


@router.delete("/{post_id}", response_model=DeletedPostOut)
def delete_post(post_id: str, user_id: CurrentUserId, db: DBSession):
    try:
        post = posts_service.delete_post(db, post_id, user_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return DeletedPostOut.model_validate(post)

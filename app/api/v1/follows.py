from fastapi import APIRouter

from app.api.errors import http_error_from_service
from app.api.v1.schemas import FollowIn, FollowOut
from app.auth.deps import CurrentUserId, DBSession
from app.services import follows_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/follows", tags=["follows"])


@router.post("", response_model=FollowOut)
def follow_user(payload: FollowIn, user_id: CurrentUserId, db: DBSession):
    try:
        edge = follows_service.follow(db, user_id, payload.following_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return FollowOut.model_validate(edge)


@router.delete("/{following_id}", response_model=FollowOut)
def unfollow_user(following_id: str, user_id: CurrentUserId, db: DBSession):
    try:
        edge = follows_service.unfollow(db, user_id, following_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return FollowOut.model_validate(edge)

from fastapi import APIRouter

from app.api.errors import http_error_from_service
from app.api.v1.schemas import LikeIn, LikeOut
from app.auth.deps import CurrentUserId, DBSession
from app.services import likes_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/likes", tags=["likes"])


@router.post("", response_model=LikeOut)
def like_post(payload: LikeIn, user_id: CurrentUserId, db: DBSession):
    try:
        like = likes_service.like_post(db, user_id, payload.post_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return LikeOut.model_validate(like)


@router.delete("/{post_id}", response_model=LikeOut)
def unlike_post(post_id: str, user_id: CurrentUserId, db: DBSession):
    try:
        like = likes_service.unlike_post(db, user_id, post_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return LikeOut.model_validate(like)

from fastapi import APIRouter

from app.api.errors import http_error_from_service
from app.api.v1.schemas import CommentIn, CommentOut
from app.auth.deps import CurrentUserId, DBSession
from app.services import posts_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentOut)
def create_comment(payload: CommentIn, user_id: CurrentUserId, db: DBSession):
    try:
        comment = posts_service.create_comment(db, user_id, payload.post_id, payload.content)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return CommentOut.model_validate(comment)


@router.delete("/{comment_id}", response_model=CommentOut)
def delete_comment(comment_id: str, user_id: CurrentUserId, db: DBSession):
    try:
        comment = posts_service.delete_comment(db, comment_id, user_id)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return CommentOut.model_validate(comment)

from __future__ import annotations

import structlog
from fastapi import APIRouter, File, Form, UploadFile

from app.api.errors import http_error_from_service
from app.api.v1.schemas import (
    CurrentUserOut,
    LoginIn,
    RegisterIn,
    TokenOut,
    UserOut,
    UserProfileOut,
)
from app.auth.deps import CurrentUserId, DBSession, Storage
from app.services import follows_service, users_service
from app.services.exceptions import ServiceError

router = APIRouter(prefix="/users", tags=["users"])

logger = structlog.get_logger(__name__)


@router.post("/register", response_model=UserOut)
def register(payload: RegisterIn, db: DBSession, storage: Storage):
    try:
        user = users_service.register(
            db,
            storage,
            email=payload.email,
            password=payload.password,
            name=payload.name,
        )
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return UserOut.model_validate(user)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: DBSession):
    try:
        identity = users_service.authenticate(db, payload.email, payload.password)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return TokenOut(token=identity.access_token, expires_in=identity.expires_in)


@router.get("/current", response_model=CurrentUserOut)
def current(user_id: CurrentUserId, db: DBSession):
    try:
        user = users_service.get_by_id(db, user_id, include_related_users=True)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return CurrentUserOut.model_validate(user)


@router.get("/{user_id}", response_model=UserProfileOut)
def get_user(user_id: str, acting_id: CurrentUserId, db: DBSession):
    try:
        user = users_service.get_by_id(db, user_id, include_relations=True)
    except ServiceError as err:
        raise http_error_from_service(err) from err

    out = UserProfileOut.model_validate(user)
    out.is_following = follows_service.is_following(db, acting_id, user.id)
    return out


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    acting_id: CurrentUserId,
    db: DBSession,
    email: str | None = Form(default=None),
    name: str | None = Form(default=None),
    bio: str | None = Form(default=None),
    date_of_birth: str | None = Form(default=None, alias="dateOfBirth"),
    location: str | None = Form(default=None),
    avatar: UploadFile | None = File(default=None),
):
    if avatar is not None:
        # The avatar reference is fixed at registration
        logger.info("avatar_upload_ignored", user_id=str(acting_id))
        avatar.file.close()

    fields = {
        "email": email,
        "name": name,
        "bio": bio,
        "date_of_birth": date_of_birth,
        "location": location,
    }
    try:
        user = users_service.update(db, user_id, acting_id, fields)
    except ServiceError as err:
        raise http_error_from_service(err) from err
    return UserOut.model_validate(user)

from fastapi import APIRouter

from app.api.v1.comments import router as comments_router
from app.api.v1.follows import router as follows_router
from app.api.v1.likes import router as likes_router
from app.api.v1.posts import router as posts_router
from app.api.v1.users import router as users_router

router = APIRouter()
router.include_router(users_router)
router.include_router(posts_router)
router.include_router(comments_router)
router.include_router(follows_router)
router.include_router(likes_router)

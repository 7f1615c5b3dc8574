from app.services import follows_service, likes_service, posts_service, users_service

__all__ = ["users_service", "follows_service", "posts_service", "likes_service"]

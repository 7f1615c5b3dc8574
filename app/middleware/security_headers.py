from __future__ import annotations

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.config import settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)

        if not settings.security_headers_enabled:
            return response

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")

        path = request.url.path
        if path.startswith("/api/"):
            # Bodies can carry access tokens and profile data
            response.headers.setdefault("Cache-Control", "no-store")
        elif path.startswith(settings.uploads_url_path):
            # Avatars are embedded by the web client from another origin
            response.headers.setdefault("Cross-Origin-Resource-Policy", "cross-origin")

        if settings.env != "local":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=63072000; includeSubDomains",
            )

        return response

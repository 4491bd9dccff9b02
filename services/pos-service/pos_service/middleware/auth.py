"""
POS Service — JWT Authentication Middleware
Every route except the public ones needs a Bearer token signed with the shared secret.
"""
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from jose import JWTError

from pos_service.core.config import get_settings
from pos_service.core.security import decode_token

settings = get_settings()


def public_paths(debug: bool) -> set[str]:
    """Swagger UI is only mounted in debug mode, so it is only public there."""
    paths = {"/", "/health", "/metrics", "/openapi.json"}
    if debug:
        paths.add("/docs")
    return paths


PUBLIC_PATHS = public_paths(settings.DEBUG)


def _unauthorized(detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTAuthMiddleware(BaseHTTPMiddleware):
    """Attaches decoded claims to request.state.user, or answers 401."""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return await call_next(request)

        path = request.url.path
        if path in PUBLIC_PATHS or path.startswith("/metrics"):
            return await call_next(request)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith("Bearer "):
            return _unauthorized("Missing or invalid Authorization header. Expected: Bearer <token>")

        try:
            request.state.user = decode_token(auth_header.split(" ", 1)[1])
        except JWTError as exc:
            return _unauthorized(f"Invalid or expired JWT: {exc}")

        return await call_next(request)

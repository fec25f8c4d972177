"""Rate limiting for API protection"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings


def get_identifier(request: Request) -> str:
    """
    Get identifier for rate limiting.

    Priority:
    1. Bearer token (last 32 chars)
    2. IP address (for unauthenticated requests such as login)
    """
    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return f"bearer:{auth_header[7:][-32:]}"

    return get_remote_address(request)


limiter = Limiter(
    key_func=get_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

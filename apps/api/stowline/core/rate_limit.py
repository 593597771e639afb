"""Rate limiting for the Stowline API.

Keys are client addresses. Behind a load balancer (TRUST_PROXY_HEADERS) the
first X-Forwarded-For hop is the client. Limits are disabled under TESTING.
"""

import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from stowline.core.config import settings

logger = logging.getLogger(__name__)


def client_key(request: Request) -> str:
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


def _default_limits() -> list[str]:
    if settings.TESTING or settings.RATE_LIMIT_API <= 0:
        return []
    return [f"{settings.RATE_LIMIT_API}/minute"]


def _storage_uri() -> str:
    """Redis when reachable so limits hold across workers."""
    if settings.TESTING:
        return "memory://"
    try:
        import redis

        redis.from_url(settings.REDIS_URL, socket_connect_timeout=1).ping()
        return settings.REDIS_URL
    except Exception as e:
        logger.warning(f"Redis unavailable for rate limiting, using in-memory: {e}")
        return "memory://"


limiter = Limiter(
    key_func=client_key,
    storage_uri=_storage_uri(),
    default_limits=_default_limits(),
    enabled=not settings.TESTING,
)


def auth_limit() -> str:
    """Limit string for verification-code endpoints."""
    return f"{settings.RATE_LIMIT_AUTH}/minute"

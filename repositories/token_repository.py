# repositories/token_repository.py
from extensions.redis_client import get_redis

REVOKED_PREFIX = "auth:revoked:"


class TokenRepository:
    """Revoked token ids (jti), kept in Redis until the token would have expired anyway."""

    @staticmethod
    def revoke(jti: str, ttl_seconds: int):
        if not jti:
            return
        get_redis().setex(REVOKED_PREFIX + jti, max(int(ttl_seconds), 1), "1")

    @staticmethod
    def is_revoked(jti: str) -> bool:
        if not jti:
            return False
        return bool(get_redis().exists(REVOKED_PREFIX + jti))

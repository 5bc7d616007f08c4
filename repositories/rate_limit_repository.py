# repositories/rate_limit_repository.py
from extensions.redis_client import get_redis


class RateLimitRepository:
    """Failure counters with a sliding block window (Redis INCR + EXPIRE)."""

    @staticmethod
    def get_fail_count(key: str) -> int:
        value = get_redis().get(key)
        return int(value) if value else 0

    @staticmethod
    def incr_fail(key: str, block_seconds: int) -> int:
        r = get_redis()
        count = r.incr(key)
        if count == 1:
            r.expire(key, block_seconds)
        return count

    @staticmethod
    def get_ttl(key: str) -> int:
        ttl = get_redis().ttl(key)
        return ttl if ttl and ttl > 0 else 0

    @staticmethod
    def clear(key: str):
        get_redis().delete(key)

# services/rate_limit_service.py
import logging

from repositories.rate_limit_repository import RateLimitRepository
from utils.exceptions import TooManyAttempts

logger = logging.getLogger(__name__)


class PasswordChangeRateLimiter:
    def __init__(self, user_id: int, fail_limit: int, block_seconds: int):
        self.user_id = user_id
        self.key = f"pwdchg:fail:{user_id}"
        self.fail_limit = fail_limit
        self.block_seconds = block_seconds

    def ensure_not_blocked(self):
        if RateLimitRepository.get_fail_count(self.key) >= self.fail_limit:
            ttl = RateLimitRepository.get_ttl(self.key)
            logger.warning("password change blocked for user %s (%ss left)", self.user_id, ttl)
            raise TooManyAttempts(f"Too many attempts, retry in {ttl} seconds")

    def record_failure(self) -> int:
        return RateLimitRepository.incr_fail(self.key, self.block_seconds)

    def clear(self):
        RateLimitRepository.clear(self.key)

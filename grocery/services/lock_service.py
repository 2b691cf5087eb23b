# grocery/services/lock_service.py
import redis

from grocery.utils.logging import get_logger
from grocery.utils.retry import redis_retry
from grocery.utils.settings import REDIS_URL

logger = get_logger(__name__)

# compare-and-delete in one Lua script: nothing can run between GET and DEL,
# so a request never frees a lock another request re-acquired after expiry
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


def user_lock_key(user_id: int) -> str:
    return f"address:user:{user_id}:lock"


class LockService:
    """
    Per-user mutex over Redis.
    - acquire: SET key token NX EX ttl
    - release: Lua compare-and-delete, only the holder's token frees the key
    Expired locks vanish on their own, nothing has to sweep them.
    """

    def __init__(self, url: str | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def acquire_user_lock(self, user_id: int, token: str, ttl: int) -> bool:
        key = user_lock_key(user_id)
        logger.debug("lock_acquire", key=key)
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_user_lock(self, user_id: int, token: str) -> bool:
        key = user_lock_key(user_id)
        logger.debug("lock_release", key=key)
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

# grocery/utils/retry.py
import redis
import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential


def backoff_retry(exc_types, base: float, cap: float, attempts: int = 3):
    """Retry on ``exc_types`` with exponential backoff from ``base`` up to ``cap`` seconds."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=cap),
        retry=retry_if_exception_type(exc_types),
    )


def http_retry():
    # only for idempotent calls; creating a checkout session is never retried
    return backoff_retry(requests.RequestException, base=0.3, cap=3)


def redis_retry():
    return backoff_retry(redis.RedisError, base=0.2, cap=2)

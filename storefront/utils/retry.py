# storefront/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import requests
import redis

from storefront.utils.settings import (
    HTTP_RETRY_ATTEMPTS,
    HTTP_RETRY_WAIT_MAX,
    HTTP_RETRY_WAIT_MIN,
    REDIS_RETRY_ATTEMPTS,
    REDIS_RETRY_WAIT_MAX,
    REDIS_RETRY_WAIT_MIN,
)


def _backoff(exc_type, attempts: int, wait_min: float, wait_max: float):
    #po ostatniej probie leci oryginalny wyjatek, nie RetryError
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential(multiplier=wait_min, min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exc_type),
    )


def http_retry(attempts: int | None = None):
    """Wywolania HTTP (magazyn dokumentow, katalog)."""
    return _backoff(
        requests.RequestException,
        HTTP_RETRY_ATTEMPTS if attempts is None else attempts,
        HTTP_RETRY_WAIT_MIN,
        HTTP_RETRY_WAIT_MAX,
    )


def redis_retry(attempts: int | None = None):
    return _backoff(
        redis.RedisError,
        REDIS_RETRY_ATTEMPTS if attempts is None else attempts,
        REDIS_RETRY_WAIT_MIN,
        REDIS_RETRY_WAIT_MAX,
    )

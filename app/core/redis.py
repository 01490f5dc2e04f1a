"""
Redis connection.

`redis_client` is a stable proxy so modules can import it once while the
underlying client is swapped (fakeredis in tests).
"""
import redis

from app.core.config import REDIS_URL


class RedisProxy:
    def __init__(self, client: redis.Redis):
        self._client: redis.Redis = client

    def set_client(self, client: redis.Redis) -> None:
        self._client = client

    def __getattr__(self, item):
        return getattr(self._client, item)


# connects lazily on first command
_real_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
redis_client: RedisProxy = RedisProxy(_real_client)


def set_redis_client(client: redis.Redis) -> None:
    redis_client.set_client(client)

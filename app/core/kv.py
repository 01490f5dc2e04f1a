"""
Shared key-value state on Redis: get / set-with-expiry / delete, plus a
fixed-window hit counter. Every key is written with a TTL.
"""
import json
from typing import Any, Optional, Tuple

from app.core.redis import redis_client


def get_json(key: str) -> Optional[Any]:
    raw = redis_client.get(key)
    if raw is None:
        return None
    return json.loads(raw)


def set_json(key: str, value: Any, ttl_seconds: int) -> None:
    redis_client.set(key, json.dumps(value), ex=ttl_seconds)


def delete(key: str) -> None:
    redis_client.delete(key)


def touch_window(key: str, ttl_seconds: int) -> Tuple[int, int]:
    """
    Count a hit in a fixed window. The first hit creates the key with its
    TTL; later hits increment without extending it.
    Returns (count, seconds until the window resets).
    """
    with redis_client.pipeline(transaction=True) as pipe:
        pipe.set(key, 0, ex=ttl_seconds, nx=True)
        pipe.incr(key)
        pipe.ttl(key)
        _, count, ttl = pipe.execute()
    return int(count), max(int(ttl), 0)

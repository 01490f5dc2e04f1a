import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict

from fastapi import HTTPException
from loguru import logger

from app.core import kv
from app.core.match_config import RATE_LIMIT_WINDOW_SECONDS


@dataclass
class RateLimitResult:
    success: bool
    limit: int
    remaining: int
    reset: float  # epoch seconds


def check_rate_limit(
    key: str,
    limit: int = 60,
    window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
) -> RateLimitResult:
    # windows keyed by "rl:<action>:<wallet>"
    count, ttl = kv.touch_window(f"rl:{key}", window_seconds)
    reset = time.time() + ttl

    if count > limit:
        logger.info(f"[rate_limit] exceeded key={key} count={count} limit={limit}")
        return RateLimitResult(success=False, limit=limit, remaining=0, reset=reset)

    return RateLimitResult(success=True, limit=limit, remaining=limit - count, reset=reset)


def rate_limit_headers(result: RateLimitResult) -> Dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": datetime.fromtimestamp(result.reset, tz=timezone.utc).isoformat(),
    }


def enforce_rate_limit(key: str, limit: int) -> RateLimitResult:
    result = check_rate_limit(key, limit)
    if not result.success:
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Please try again later.",
            headers=rate_limit_headers(result),
        )
    return result

"""Lightweight per-IP per-path rate limiter for sensitive endpoints."""
import time
from collections import defaultdict, deque
from fastapi import HTTPException, Request, status
from app.core.config import settings
from app.utils.helpers import get_client_ip

# In-memory sliding window buckets: key -> deque[timestamps]
_buckets = defaultdict(deque)


def reset_buckets() -> None:
    _buckets.clear()


async def rate_limit(request: Request):
    if not settings.RATE_LIMIT_ENABLED:
        return True

    now = time.monotonic()
    window = settings.RATE_LIMIT_PERIOD_SECONDS
    key = f"{get_client_ip(request)}:{request.url.path}"

    bucket = _buckets[key]
    while bucket and bucket[0] <= now - window:
        bucket.popleft()

    if len(bucket) >= settings.RATE_LIMIT_REQUESTS:
        retry_after = max(1, int(bucket[0] + window - now))
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests. Please slow down.",
            headers={"Retry-After": str(retry_after)},
        )

    bucket.append(now)
    return True

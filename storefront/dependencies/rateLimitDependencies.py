from typing import List

from fastapi import Depends
from fastapi_limiter.depends import RateLimiter

from storefront.config.settings import settings


def rate_limited(times: int, seconds: int) -> List:
    """Router dependencies for a rate limit, empty when limiting is switched off"""
    if not settings.RATE_LIMITING_ENABLED:
        return []
    return [Depends(RateLimiter(times=times, seconds=seconds))]

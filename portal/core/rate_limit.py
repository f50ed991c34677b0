"""
Simple in-memory rate limiter for API endpoints.
"""
import logging
import time
from collections import defaultdict
from typing import Dict, List

from fastapi import HTTPException, Request, status

from portal.core.config import RATE_LIMIT_MAX_REQUESTS, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)

# Request timestamps per client IP
rate_limit_store: Dict[str, List[float]] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """Extract client IP address from request."""
    # Check for forwarded IP (from proxy/load balancer)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"


def check_rate_limit(
    request: Request,
    max_requests: int = RATE_LIMIT_MAX_REQUESTS,
    window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
) -> None:
    """
    Check if client has exceeded rate limit.

    Raises:
        HTTPException: 429 if rate limit exceeded
    """
    ip = get_client_ip(request)
    now = time.time()

    cutoff = now - window_seconds
    rate_limit_store[ip] = [timestamp for timestamp in rate_limit_store[ip] if timestamp > cutoff]

    request_count = len(rate_limit_store[ip])
    if request_count >= max_requests:
        logger.warning(f"Rate limit exceeded for IP: {ip} ({request_count} requests in {window_seconds}s)")
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Rate limit exceeded. Maximum {max_requests} requests per {window_seconds} seconds.",
        )

    rate_limit_store[ip].append(now)
    logger.debug(f"Rate limit check passed for IP: {ip} ({request_count + 1}/{max_requests})")


def rate_limited(request: Request) -> None:
    """Dependency form of ``check_rate_limit`` with the configured limits."""
    check_rate_limit(request)

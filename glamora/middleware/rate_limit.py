"""
Rate Limit Middleware

Simple in-memory rate limiting using sliding window.
"""

import time
from typing import Callable, Dict, List, Tuple

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from glamora.config import settings

# Credential endpoints get the stricter login budget
LOGIN_PATHS = {
    f"{settings.api_prefix}/admin/login",
    f"{settings.api_prefix}/auth/login",
    f"{settings.api_prefix}/auth/register",
}

EXEMPT_PATHS = {"/health", "/", "/docs", "/redoc", "/openapi.json"}


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware using sliding window algorithm.

    SECURITY: Protects against brute force and DoS attacks.
    Requests are keyed by client IP. Login and registration share a
    separate, smaller budget per IP. X-Forwarded-For is only read when
    TRUST_FORWARDED_FOR is set.

    Windows live in process memory, so each worker counts on its own.
    """

    def __init__(self, app, window_size: int = 60):
        super().__init__(app)
        self.requests: Dict[str, List[float]] = {}
        self.window_size = window_size
        self._last_sweep = time.time()

    def _client_ip(self, request: Request) -> str:
        if settings.trust_forwarded_for:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _get_key(self, request: Request) -> Tuple[str, int]:
        """
        Get rate limit key and limit based on request.

        Returns (key, limit) tuple.
        """
        client_ip = self._client_ip(request)

        if request.url.path in LOGIN_PATHS:
            return f"login:{client_ip}", settings.rate_limit_login_per_minute

        return f"ip:{client_ip}", settings.rate_limit_per_minute

    def _sweep(self, now: float) -> None:
        """Drop keys with no request inside the window, at most once per window."""
        if now - self._last_sweep < self.window_size:
            return
        window_start = now - self.window_size
        for key in list(self.requests):
            if not self.requests[key] or self.requests[key][-1] <= window_start:
                del self.requests[key]
        self._last_sweep = now

    def _is_rate_limited(self, key: str, limit: int) -> bool:
        """
        Check if the key is rate limited.

        Uses sliding window algorithm.
        """
        now = time.time()
        window_start = now - self.window_size
        self._sweep(now)

        # Remove old entries
        recent = [ts for ts in self.requests.get(key, []) if ts > window_start]

        if len(recent) >= limit:
            self.requests[key] = recent
            return True

        recent.append(now)
        self.requests[key] = recent
        return False

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with rate limiting."""
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        key, limit = self._get_key(request)

        if self._is_rate_limited(key, limit):
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "message": "Rate limit exceeded. Please try again later.",
                    "retry_after_seconds": self.window_size
                },
                headers={"Retry-After": str(self.window_size)}
            )

        return await call_next(request)

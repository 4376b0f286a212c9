"""Glamora Middleware Package"""

from glamora.middleware.rate_limit import RateLimitMiddleware

__all__ = ["RateLimitMiddleware"]

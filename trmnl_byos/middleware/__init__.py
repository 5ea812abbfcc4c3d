"""
Middleware Package
"""

from trmnl_byos.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]

"""
Middleware layer for the Workboard application.

This package contains middleware components for request processing:
security headers, request size limits, request timeouts and rate limiting.
"""

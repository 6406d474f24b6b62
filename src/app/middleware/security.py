"""
Security headers middleware.
Adds a Content-Security-Policy header to every response.
"""
from __future__ import annotations

from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

BASE_DIRECTIVES: dict[str, list[str]] = {
    "default-src": ["'self'"],
    "font-src": ["'self'", "https://fonts.gstatic.com"],
    "connect-src": ["'self'"],
    "script-src": ["'self'", "'unsafe-inline'", "https://www.gstatic.com"],
    "style-src": ["'self'", "'unsafe-inline'", "https://fonts.googleapis.com"],
    "img-src": ["'self'", "data:"],
    "object-src": ["'none'"],
    "frame-src": ["'none'"],
}


def build_csp(connect_sources: Iterable[str] = ()) -> str:
    directives = {name: list(values) for name, values in BASE_DIRECTIVES.items()}
    for source in connect_sources:
        if source and source not in directives["connect-src"]:
            directives["connect-src"].append(source)
    return "; ".join(f"{name} {' '.join(values)}" for name, values in directives.items())


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, connect_sources: Iterable[str] = ()):
        super().__init__(app)
        self.policy = build_csp(connect_sources)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", self.policy)
        return response

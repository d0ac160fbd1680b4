"""
Errors that map onto HTTP responses of the shape {"error": ..., "details": ...}.
"""

from __future__ import annotations

from typing import Optional


class ProxyError(Exception):
    status_code = 500

    def __init__(
        self,
        error: str,
        details: Optional[str] = None,
        *,
        extra: Optional[dict] = None,
    ):
        super().__init__(error)
        self.error = error
        self.details = details
        self.extra = extra or {}

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationFailed(ProxyError):
    status_code = 400


class Unauthorized(ProxyError):
    status_code = 401


class RecordNotFound(ProxyError):
    status_code = 404


class UpstreamError(ProxyError):
    status_code = 500


class FallbackExhausted(ProxyError):
    """Every table identifier variant failed."""

    status_code = 500

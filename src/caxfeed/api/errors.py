"""API error types."""

from __future__ import annotations


class CaxApiError(Exception):
    """Base error for a failed request/response cycle."""


class TransportError(CaxApiError):
    """Connection, DNS, TLS or timeout failure before a response was read."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"request to {url} failed: {message}")


class HttpStatusError(CaxApiError):
    """Server answered with a non-2xx status."""

    def __init__(self, status: int, url: str, reason: str | None = None):
        self.status = status
        self.url = url
        self.reason = reason
        detail = f"HTTP {status}"
        if reason:
            detail += f" {reason}"
        super().__init__(f"{detail} from {url}")


class DecodeError(CaxApiError):
    """Response body did not match the wire schema."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)

"""
Error taxonomy for the validation service.

LoadError and ResolutionError mean the request could not be evaluated at all.
They are infrastructure/configuration failures and never a verdict about the
candidate document. MALFORMED and INVALID are verdicts, not exceptions.
"""

from __future__ import annotations

from typing import Any


class XsdServiceError(Exception):
    """Base exception for every failure the core raises."""

    code = "internal_error"
    http_status = 500

    def __init__(self, message: str, *, reference: str | None = None):
        super().__init__(message)
        self.message = message
        self.reference = reference

    def to_response(self) -> dict[str, Any]:
        """Standard JSON envelope returned by the API layer."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.reference:
            error["reference"] = self.reference
        return {"error": error}


class LoadError(XsdServiceError):
    """A document or schema could not be fetched (network, 404, timeout, size)."""

    code = "load_error"


class ResolutionError(XsdServiceError):
    """The schema set could not be resolved or compiled completely."""

    code = "resolution_error"


class ValidationCancelled(XsdServiceError):
    """The caller abandoned the request before it finished."""

    code = "cancelled"
    http_status = 499

"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from pydantic import BaseModel

from xsd_service.core.models import ValidationDiagnostic, ValidationOutcome


# ---------------------------------------------------------------------------
# Validation verdict
# ---------------------------------------------------------------------------

class DiagnosticModel(BaseModel):
    severity: str
    message: str
    line: int | None = None
    column: int | None = None

    @classmethod
    def from_diagnostic(cls, diagnostic: ValidationDiagnostic) -> DiagnosticModel:
        return cls(
            severity=diagnostic.severity.value,
            message=diagnostic.message,
            line=diagnostic.line,
            column=diagnostic.column,
        )


class ValidationResponse(BaseModel):
    """Verdict for one document: MALFORMED, INVALID or VALID."""
    outcome: str
    valid: bool
    error_count: int = 0
    warning_count: int = 0
    diagnostics: list[DiagnosticModel] = []

    @classmethod
    def from_outcome(cls, outcome: ValidationOutcome) -> ValidationResponse:
        return cls(
            outcome=outcome.classification.value,
            valid=outcome.is_valid,
            error_count=len(outcome.errors),
            warning_count=len(outcome.warnings),
            diagnostics=[DiagnosticModel.from_diagnostic(d) for d in outcome.diagnostics],
        )


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    code: str
    message: str
    reference: str | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    environment: str
    schema_header: str

"""Maps engine results to a ValidationOutcome. Pure, no I/O."""

from __future__ import annotations

from collections.abc import Iterable

from xsd_service.core.models import (
    Classification,
    ValidationDiagnostic,
    ValidationOutcome,
)


def classify(well_formed: bool, diagnostics: Iterable[ValidationDiagnostic]) -> ValidationOutcome:
    """
    MALFORMED if the document could not be parsed, INVALID if any diagnostic
    is an ERROR, otherwise VALID. Diagnostics are passed through unchanged.
    """
    diagnostics = tuple(diagnostics)
    if not well_formed:
        classification = Classification.MALFORMED
    elif any(d.is_error for d in diagnostics):
        classification = Classification.INVALID
    else:
        classification = Classification.VALID
    return ValidationOutcome(classification=classification, diagnostics=diagnostics)

"""
XSD validation service.

Demonstrates:
- Load -> Resolve -> Validate -> Classify as one call with no shared state
- Collecting all errors rather than failing on the first one
- Infrastructure failures (LoadError, ResolutionError) propagated, never
  turned into a verdict
"""

from __future__ import annotations

import logging
import threading

from xsd_service.core.models import SchemaReference, ValidationOutcome
from xsd_service.services.classifier import classify
from xsd_service.services.engine import ValidationEngine
from xsd_service.services.loader import ContentLoader, is_remote_reference
from xsd_service.services.resolver import SchemaSetResolver

logger = logging.getLogger(__name__)


def validate_document(
    document_source: str | bytes,
    schema_source: str,
    loader: ContentLoader,
    *,
    cancel_event: threading.Event | None = None,
) -> ValidationOutcome:
    """
    Validate inline XML (or the XML a URL points to) against the XSD at
    ``schema_source`` and its full import/include closure.
    Raises LoadError or ResolutionError when the request cannot be evaluated.
    """
    if is_remote_reference(document_source):
        reference = (
            document_source.decode("utf-8") if isinstance(document_source, bytes) else document_source
        )
        logger.info("Loading document from %s", reference.strip())
        document = loader.load(reference.strip())
    else:
        document = document_source

    schema_set = SchemaSetResolver(loader).resolve(
        SchemaReference.from_location(schema_source), cancel_event=cancel_event
    )
    well_formed, diagnostics = ValidationEngine().validate(
        document, schema_set, cancel_event=cancel_event
    )
    outcome = classify(well_formed, diagnostics)
    logger.info(
        "Validation finished: %s (%d errors, %d warnings)",
        outcome.classification.value,
        len(outcome.errors),
        len(outcome.warnings),
    )
    return outcome

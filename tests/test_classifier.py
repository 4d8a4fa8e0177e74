"""Tests for outcome classification – pure function, no schemas needed."""

from xsd_service.core.models import Classification, Severity, ValidationDiagnostic
from xsd_service.services.classifier import classify

WARNING = ValidationDiagnostic(Severity.WARNING, "Skipping unknown namespace")
ERROR = ValidationDiagnostic(Severity.ERROR, "The attribute 'id' is required but missing.", 1, 0)


def test_malformed_when_not_well_formed():
    outcome = classify(False, [ERROR])
    assert outcome.classification == Classification.MALFORMED
    assert outcome.diagnostics == (ERROR,)


def test_valid_with_no_diagnostics():
    outcome = classify(True, [])
    assert outcome.classification == Classification.VALID
    assert outcome.is_valid
    assert outcome.diagnostics == ()


def test_warnings_do_not_affect_classification():
    outcome = classify(True, [WARNING])
    assert outcome.classification == Classification.VALID
    assert outcome.warnings == [WARNING]
    assert outcome.errors == []


def test_any_error_makes_invalid():
    outcome = classify(True, [WARNING, ERROR])
    assert outcome.classification == Classification.INVALID
    assert not outcome.is_valid
    # order preserved
    assert outcome.diagnostics == (WARNING, ERROR)


def test_independent_results():
    """No state carries over between calls."""
    first = classify(True, [ERROR])
    second = classify(True, [])
    assert first.classification == Classification.INVALID
    assert second.classification == Classification.VALID

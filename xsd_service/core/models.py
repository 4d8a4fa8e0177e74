"""
Data model for schema resolution and document validation.

Everything here is created per request and never shared between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urljoin, urlsplit, urlunsplit

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


class Severity(str, Enum):
    WARNING = "WARNING"
    ERROR = "ERROR"


class Classification(str, Enum):
    MALFORMED = "MALFORMED"
    INVALID = "INVALID"
    VALID = "VALID"


class ImportKind(str, Enum):
    IMPORT = "import"
    INCLUDE = "include"
    REDEFINE = "redefine"
    OVERRIDE = "override"


def canonicalize_location(location: str, base: str | None = None) -> str:
    """
    Resolve ``location`` against ``base`` and normalize it.

    Scheme and host are lower-cased, dot-segments removed (by ``urljoin``)
    and the fragment dropped, so the same schema reached via different
    relative paths maps to one key.
    """
    absolute = urljoin(base, location) if base else location
    parts = urlsplit(absolute.strip())
    path = parts.path or ("/" if parts.netloc else "")
    if "/." in path:
        path = urlsplit(urljoin("http://host/", path)).path
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


@dataclass(frozen=True)
class SchemaReference:
    """An immutable pointer to a schema document."""

    location: str

    @classmethod
    def from_location(cls, location: str, base: str | None = None) -> SchemaReference:
        return cls(location=canonicalize_location(location, base))

    def __str__(self) -> str:
        return self.location


@dataclass(frozen=True)
class ImportReference:
    """One xs:import / xs:include / xs:redefine / xs:override declaration."""

    kind: ImportKind
    reference: SchemaReference | None
    namespace: str | None = None


@dataclass
class SchemaDocument:
    """A fetched and parsed schema document, as seen during resolution."""

    reference: SchemaReference
    content: bytes
    target_namespace: str | None
    # chameleon includes adopt the includer's namespace
    namespace: str | None
    imports: list[ImportReference] = field(default_factory=list)

    @property
    def key(self) -> tuple[str | None, str]:
        return (self.namespace, self.reference.location)


@dataclass
class SchemaSet:
    """
    The transitive closure of a root schema and everything it imports,
    includes, redefines or overrides.

    ``namespaces`` maps each namespace to the location of the one document
    that owns it (the root or an imported document).
    """

    root: SchemaDocument
    documents: dict[tuple[str | None, str], SchemaDocument] = field(default_factory=dict)
    namespaces: dict[str | None, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.documents)

    def __contains__(self, location: object) -> bool:
        return any(doc.reference.location == location for doc in self.documents.values())

    def content_for(self, location: str) -> bytes | None:
        """Raw content of the document at ``location``, or None if not in the set."""
        for doc in self.documents.values():
            if doc.reference.location == location:
                return doc.content
        return None


@dataclass(frozen=True)
class ValidationDiagnostic:
    """One problem reported while checking a document."""

    severity: Severity
    message: str
    line: int | None = None
    column: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        where = f" (line {self.line}, column {self.column})" if self.line else ""
        return f"{self.severity.value}: {self.message}{where}"


@dataclass(frozen=True)
class ValidationOutcome:
    """Terminal result of one validation request."""

    classification: Classification
    diagnostics: tuple[ValidationDiagnostic, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.classification == Classification.VALID

    @property
    def errors(self) -> list[ValidationDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationDiagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

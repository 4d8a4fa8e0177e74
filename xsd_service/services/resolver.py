"""
Schema set resolution.

Demonstrates:
- Breadth-first traversal of the xs:import / xs:include graph to closure
- A visited-set keyed by (namespace, canonical location), so cycles terminate
  and a schema reachable via several paths is fetched once
- Failing loudly on anything that would leave the set incomplete
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from lxml import etree

from xsd_service.config import settings
from xsd_service.core.errors import ResolutionError, ValidationCancelled
from xsd_service.core.models import (
    XML_NAMESPACE,
    XSD_NAMESPACE,
    ImportKind,
    ImportReference,
    SchemaDocument,
    SchemaReference,
    SchemaSet,
)
from xsd_service.services.loader import ContentLoader

logger = logging.getLogger(__name__)

_SCHEMA_TAG = f"{{{XSD_NAMESPACE}}}schema"
_IMPORT_TAGS = {f"{{{XSD_NAMESPACE}}}{kind.value}": kind for kind in ImportKind}


def _schema_parser() -> etree.XMLParser:
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False)


def parse_schema_document(reference: SchemaReference, content: bytes) -> SchemaDocument:
    """Parse raw schema content and list the references it declares."""
    try:
        root = etree.fromstring(content, parser=_schema_parser(), base_url=reference.location)
    except etree.XMLSyntaxError as exc:
        raise ResolutionError(
            f"Schema is not well-formed XML: {exc}", reference=reference.location
        ) from exc
    if root.tag != _SCHEMA_TAG:
        raise ResolutionError(
            f"Root element {root.tag!r} is not xs:schema", reference=reference.location
        )

    target_namespace = root.get("targetNamespace") or None
    imports: list[ImportReference] = []
    for child in root:
        kind = _IMPORT_TAGS.get(child.tag) if isinstance(child.tag, str) else None
        if kind is None:
            continue
        location = child.get("schemaLocation")
        if not location and kind != ImportKind.IMPORT:
            raise ResolutionError(
                f"xs:{kind.value} without schemaLocation", reference=reference.location
            )
        imports.append(
            ImportReference(
                kind=kind,
                reference=(
                    SchemaReference.from_location(location, reference.location)
                    if location
                    else None
                ),
                namespace=(child.get("namespace") or None) if kind == ImportKind.IMPORT else None,
            )
        )

    return SchemaDocument(
        reference=reference,
        content=content,
        target_namespace=target_namespace,
        namespace=target_namespace,
        imports=imports,
    )


class SchemaSetResolver:
    """
    Builds the complete SchemaSet for a root schema reference.

    Usage:
        resolver = SchemaSetResolver(UrlContentLoader())
        schema_set = resolver.resolve("https://example.com/invoice.xsd")
    """

    def __init__(self, loader: ContentLoader, *, max_documents: int | None = None):
        self.loader = loader
        self.max_documents = max_documents or settings.MAX_SCHEMA_DOCUMENTS

    def resolve(
        self,
        root_reference: SchemaReference | str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SchemaSet:
        if isinstance(root_reference, str):
            root_reference = SchemaReference.from_location(root_reference)

        fetched: dict[str, bytes] = {}
        root = self._fetch(root_reference, fetched)
        schema_set = SchemaSet(root=root)
        self._claim_namespace(schema_set, root)
        schema_set.documents[root.key] = root

        unlocated: list[tuple[str | None, str]] = []
        queue = deque([root])
        while queue:
            current = queue.popleft()
            for declared in current.imports:
                if cancel_event is not None and cancel_event.is_set():
                    raise ValidationCancelled("Schema resolution cancelled")

                if declared.reference is None:
                    unlocated.append((declared.namespace, current.reference.location))
                    continue

                if declared.kind == ImportKind.IMPORT:
                    expected_namespace = declared.namespace
                else:
                    expected_namespace = current.namespace
                if (expected_namespace, declared.reference.location) in schema_set.documents:
                    continue

                document = self._fetch(declared.reference, fetched)
                if declared.kind == ImportKind.IMPORT:
                    if document.target_namespace != declared.namespace:
                        raise ResolutionError(
                            f"Imported schema declares targetNamespace "
                            f"{document.target_namespace!r}, expected {declared.namespace!r}",
                            reference=declared.reference.location,
                        )
                    self._claim_namespace(schema_set, document)
                else:
                    if document.target_namespace not in (None, current.namespace):
                        raise ResolutionError(
                            f"Included schema declares targetNamespace "
                            f"{document.target_namespace!r}, includer uses {current.namespace!r}",
                            reference=declared.reference.location,
                        )
                    document.namespace = current.namespace

                schema_set.documents[document.key] = document
                if len(schema_set) > self.max_documents:
                    raise ResolutionError(
                        f"Schema set exceeds {self.max_documents} documents",
                        reference=root_reference.location,
                    )
                queue.append(document)

        for namespace, origin in unlocated:
            if namespace == XML_NAMESPACE or namespace in schema_set.namespaces:
                continue
            raise ResolutionError(
                f"Import of namespace {namespace!r} has no schemaLocation "
                f"and no schema in the set provides it",
                reference=origin,
            )

        logger.info(
            "Resolved schema set for %s: %d documents, %d namespaces",
            root_reference,
            len(schema_set),
            len(schema_set.namespaces),
        )
        return schema_set

    def _fetch(self, reference: SchemaReference, fetched: dict[str, bytes]) -> SchemaDocument:
        # parsed fresh each time: a chameleon include gets its own namespace
        if reference.location not in fetched:
            fetched[reference.location] = self.loader.load(reference.location)
            logger.debug("Fetched schema %s", reference)
        return parse_schema_document(reference, fetched[reference.location])

    @staticmethod
    def _claim_namespace(schema_set: SchemaSet, document: SchemaDocument) -> None:
        owner = schema_set.namespaces.get(document.namespace)
        if owner is not None and owner != document.reference.location:
            raise ResolutionError(
                f"Namespace {document.namespace!r} is defined by both {owner} "
                f"and {document.reference.location}",
                reference=document.reference.location,
            )
        schema_set.namespaces[document.namespace] = document.reference.location

"""Shared fixtures: an in-memory content loader and a small invoice schema family."""

from __future__ import annotations

import pytest

from xsd_service.core.errors import LoadError

BASE = "http://schemas.test"

ROOT_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns="urn:example:common"
           targetNamespace="urn:example:common"
           elementFormDefault="qualified">
  <xs:import schemaLocation="invoice.xsd"/>
  <xs:element name="Note" type="xs:string"/>
</xs:schema>
"""

INVOICE_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="Invoice">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="Line" minOccurs="0" maxOccurs="unbounded">
          <xs:complexType>
            <xs:attribute name="amount" type="xs:decimal" use="required"/>
          </xs:complexType>
        </xs:element>
      </xs:sequence>
      <xs:attribute name="id" type="xs:string" use="required"/>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""


def xsd(body: str, target_namespace: str | None = None) -> str:
    """Wrap schema components in an xs:schema element."""
    tns = (
        f' targetNamespace="{target_namespace}" xmlns="{target_namespace}"'
        if target_namespace
        else ""
    )
    return (
        f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"{tns}>'
        f"{body}</xs:schema>"
    )


class InMemoryLoader:
    """ContentLoader backed by a dict; records every fetch."""

    def __init__(self, documents: dict[str, str | bytes]):
        self.documents = {
            url: content.encode("utf-8") if isinstance(content, str) else content
            for url, content in documents.items()
        }
        self.calls: list[str] = []

    def load(self, reference: str) -> bytes:
        self.calls.append(reference)
        try:
            return self.documents[reference]
        except KeyError:
            raise LoadError("HTTP 404 while fetching", reference=reference) from None


@pytest.fixture
def invoice_loader():
    return InMemoryLoader(
        {
            f"{BASE}/root.xsd": ROOT_XSD,
            f"{BASE}/invoice.xsd": INVOICE_XSD,
        }
    )


@pytest.fixture
def root_url():
    return f"{BASE}/root.xsd"

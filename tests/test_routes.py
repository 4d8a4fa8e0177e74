"""API tests – the content loader is swapped for an in-memory one."""

import pytest
from fastapi.testclient import TestClient

from conftest import BASE, InMemoryLoader
from xsd_service.api.routes import get_loader
from xsd_service.main import app


@pytest.fixture
def client(invoice_loader):
    app.dependency_overrides[get_loader] = lambda: invoice_loader
    yield TestClient(app)
    app.dependency_overrides.clear()


def _post(client, body, schema=f"{BASE}/root.xsd"):
    headers = {"Content-Type": "application/xml"}
    if schema is not None:
        headers["x-xsd-schema"] = schema
    return client.post("/api/v1/validate", content=body, headers=headers)


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["schema_header"] == "x-xsd-schema"


def test_valid_document_returns_200(client):
    response = _post(client, '<Invoice id="1"/>')

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "VALID"
    assert data["valid"] is True
    assert data["diagnostics"] == []


def test_invalid_document_returns_400_with_diagnostics(client):
    response = _post(client, "<Invoice/>")

    assert response.status_code == 400
    data = response.json()
    assert data["outcome"] == "INVALID"
    assert data["error_count"] == 1
    assert data["diagnostics"][0]["severity"] == "ERROR"
    assert "'id'" in data["diagnostics"][0]["message"]


def test_malformed_document_returns_400(client):
    response = _post(client, '<Invoice id="1">')
    assert response.status_code == 400
    assert response.json()["outcome"] == "MALFORMED"


def test_missing_body_returns_400(client):
    response = _post(client, "   ")
    assert response.status_code == 400
    assert response.json()["detail"] == "XML body is empty"


def test_missing_schema_header_returns_400(client):
    response = _post(client, '<Invoice id="1"/>', schema=None)
    assert response.status_code == 400
    assert "x-xsd-schema" in response.json()["detail"]


def test_url_body_is_fetched(client, invoice_loader):
    invoice_loader.documents[f"{BASE}/doc.xml"] = b'<Invoice id="9"/>'
    response = _post(client, f"{BASE}/doc.xml")

    assert response.status_code == 200
    assert f"{BASE}/doc.xml" in invoice_loader.calls


def test_unreachable_schema_returns_500(client):
    response = _post(client, '<Invoice id="1"/>', schema=f"{BASE}/gone.xsd")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["code"] == "load_error"
    assert error["reference"] == f"{BASE}/gone.xsd"


def test_unresolvable_schema_returns_500():
    loader = InMemoryLoader(
        {f"{BASE}/root.xsd": '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">'
         '<xs:import namespace="urn:nowhere"/></xs:schema>'}
    )
    app.dependency_overrides[get_loader] = lambda: loader
    try:
        response = _post(TestClient(app), '<Invoice id="1"/>')
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "resolution_error"

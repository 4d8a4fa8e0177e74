"""
FastAPI routes – the main API surface.

Demonstrates:
- Header + raw-body request handling for an XML validation endpoint
- Dependency injection (content loader via Depends)
- Running the blocking validation core in the threadpool, one request per call
- Mapping verdicts to 200/400 and infrastructure failures to 500
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Iterator

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from xsd_service.config import settings
from xsd_service.schemas.api import ErrorResponse, HealthResponse, ValidationResponse
from xsd_service.services.loader import ContentLoader, UrlContentLoader
from xsd_service.services.validation import validate_document

logger = logging.getLogger(__name__)

router = APIRouter()


def get_loader() -> Iterator[ContentLoader]:
    """FastAPI dependency that yields a content loader for one request."""
    loader = UrlContentLoader()
    try:
        yield loader
    finally:
        loader.close()


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
def health_check():
    """Basic health endpoint."""
    return HealthResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        schema_header=settings.SCHEMA_HEADER,
    )


# ---------------------------------------------------------------------------
# XML validation
# ---------------------------------------------------------------------------

@router.post(
    "/validate",
    response_model=ValidationResponse,
    responses={
        400: {"model": ValidationResponse, "description": "Malformed or invalid XML"},
        500: {"model": ErrorResponse, "description": "Schema or document could not be loaded"},
    },
)
async def validate_xml(
    request: Request,
    schema_url: str | None = Header(default=None, alias=settings.SCHEMA_HEADER),
    loader: ContentLoader = Depends(get_loader),
):
    """
    Validate the XML in the request body (or the XML a URL body points to)
    against the XSD named by the schema header.
    """
    logger.info("Validating XML against its XSD...")
    body = await request.body()
    if not body.strip():
        logger.error("XML body is empty")
        raise HTTPException(status_code=400, detail="XML body is empty")
    if not schema_url or not schema_url.strip():
        logger.error("Header [%s] for XSD schema URL is empty", settings.SCHEMA_HEADER)
        raise HTTPException(
            status_code=400,
            detail=f"Header [{settings.SCHEMA_HEADER}] for XSD schema URL is empty",
        )
    logger.info("XSD schema URL: %s", schema_url)

    cancel_event = threading.Event()
    try:
        outcome = await run_in_threadpool(
            validate_document, body, schema_url.strip(), loader, cancel_event=cancel_event
        )
    except asyncio.CancelledError:
        cancel_event.set()
        raise

    response = ValidationResponse.from_outcome(outcome)
    if outcome.is_valid:
        logger.info("XML is valid")
        return response

    logger.warning("XML is %s", outcome.classification.value.lower())
    for diagnostic in outcome.diagnostics:
        logger.warning("  %s", diagnostic)
    return JSONResponse(status_code=400, content=response.model_dump())

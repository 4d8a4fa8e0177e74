"""
FastAPI application entrypoint.

Run locally:  uvicorn xsd_service.main:app --reload
"""

import logging

from fastapi import FastAPI

from xsd_service.api.error_handlers import register_error_handlers
from xsd_service.api.routes import router
from xsd_service.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(
    title="XSD Validation API",
    description=(
        "Validates an XML document against an XML Schema and its full "
        "import/include closure. Returns MALFORMED, INVALID or VALID with "
        "every diagnostic found."
    ),
    version="1.0.0",
)

register_error_handlers(app)
app.include_router(router, prefix="/api/v1")

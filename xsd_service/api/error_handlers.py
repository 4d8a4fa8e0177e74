"""Global exception handlers: infrastructure failures become a JSON error envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from xsd_service.core.errors import XsdServiceError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the service's exception handlers on the FastAPI app."""

    @app.exception_handler(XsdServiceError)
    async def xsd_service_error_handler(request: Request, exc: XsdServiceError):
        logger.error(
            "%s on %s: %s (reference=%s)",
            exc.code,
            request.url.path,
            exc.message,
            exc.reference,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

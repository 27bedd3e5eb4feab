"""FastAPI application for the launchpad.

Errors raised by the core are mapped to HTTP statuses here; handlers never
catch them individually.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from launchpad.api.endpoints import router
from launchpad.errors import (
    AuthorizationError,
    LaunchpadError,
    LiquidityError,
    StateError,
    TransferError,
    ValidationError,
)
from launchpad.log import configure_logging

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LAUNCHPAD_HOST", "0.0.0.0")
PORT = int(os.environ.get("LAUNCHPAD_PORT", "8000"))
DEBUG = os.environ.get("LAUNCHPAD_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_JSON = os.environ.get("LAUNCHPAD_LOG_JSON", "false").lower() in ("true", "1", "yes")

logger = structlog.get_logger()

# Most specific first: the first matching class decides the status
ERROR_STATUS: list[tuple[type[LaunchpadError], int]] = [
    (ValidationError, 400),
    (AuthorizationError, 403),
    (StateError, 409),
    (LiquidityError, 409),
    (TransferError, 400),
]

app = FastAPI(
    title="Launchpad",
    description="Bonding-curve token launchpad",
    version="0.1.0",
)


def status_for(error: LaunchpadError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 400


@app.exception_handler(LaunchpadError)
async def launchpad_error_handler(request: Request, exc: LaunchpadError) -> JSONResponse:
    status = status_for(exc)
    logger.info(
        "request_rejected",
        path=request.url.path,
        status=status,
        error=type(exc).__name__,
        reason=exc.reason,
    )
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "detail": exc.reason},
    )


@app.exception_handler(NotImplementedError)
async def not_implemented_handler(request: Request, exc: NotImplementedError) -> JSONResponse:
    return JSONResponse(
        status_code=501,
        content={"error": "NotImplementedError", "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the launchpad API server.

    Configuration via environment variables:
    - LAUNCHPAD_HOST: Host to bind to (default: 0.0.0.0)
    - LAUNCHPAD_PORT: Port to bind to (default: 8000)
    - LAUNCHPAD_DEBUG: Enable debug logging and reload mode (default: false)
    - LAUNCHPAD_LOG_JSON: Emit JSON log lines (default: false)
    - LAUNCHPAD_OWNER, LAUNCHPAD_<PARAMETER>: see launchpad.system / launchpad.config
    """
    configure_logging(verbose=DEBUG, json=LOG_JSON)
    uvicorn.run(
        "launchpad.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qrtag_admin import __version__
from qrtag_admin.config import ApiConfig
from qrtag_admin.logging_config import setup_logging
from qrtag_admin.routes import (
    dashboard_router,
    partners_router,
    sales_router,
    tags_router,
    wallet_router,
)
from qrtag_admin.services.errors import error_payload

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler - runs on startup and shutdown"""
    setup_logging(ApiConfig.LOG_LEVEL)
    logger.info("QR Tag admin API starting; upstream %s", ApiConfig.BASE_URL)
    yield


app = FastAPI(
    title="QR Tag Admin API",
    version=__version__,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# CORS middleware - MUST be added first before other middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=ApiConfig.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):  # type: ignore[override]
    """Request validation errors are reported as 400 VALIDATION_ERROR."""
    errors = exc.errors()
    message = "Invalid request payload."
    if errors:
        first = str(errors[0].get("msg", ""))
        if first.startswith("Value error, "):
            message = first[len("Value error, "):]
    return JSONResponse(
        status_code=400,
        content=error_payload("VALIDATION_ERROR", message, {"errors": _jsonable(errors)}),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):  # type: ignore[override]
    """Handle general exceptions - log and return 500 error"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_payload("INTERNAL_SERVER_ERROR", "Internal server error."),
    )


def _jsonable(errors):
    # pydantic puts the raised exception object under ctx
    return [
        {key: (str(value) if key == "ctx" else value) for key, value in error.items()}
        for error in errors
    ]


# Register routers
app.include_router(tags_router)
app.include_router(partners_router)
app.include_router(sales_router)
app.include_router(wallet_router)
app.include_router(dashboard_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

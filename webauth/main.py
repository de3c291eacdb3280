"""
WebAuth Credential Service

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from webauth.api.middleware.request_id import RequestIdMiddleware
from webauth.api.v1 import router as api_router
from webauth.config import get_settings
from webauth.database import check_db, close_db, init_db
from webauth.exceptions import (
    Conflict,
    IdentityError,
    InvalidInput,
    NotFound,
    RangeExhausted,
    StoreUnavailable,
    Unauthorized,
)
from webauth.kernel.identity.jwt import get_token_service
from webauth.logging_config import configure_logging, get_logger
from webauth.schemas.common import ErrorResponse, HealthResponse

settings = get_settings()
logger = get_logger(__name__)

# Most specific first; InvalidToken is an Unauthorized
ERROR_STATUS = (
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (RangeExhausted, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: IdentityError) -> int:
    """HTTP status code for an identity core error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    logger.info("Starting %s v%s", settings.project_name, settings.version)
    # Signing configuration is read once, before the first request
    get_token_service()
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.project_name,
    description="Account registration, salted password storage, login and bearer tokens.",
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Last added = outermost, so CORS wraps every response
app.add_middleware(RequestIdMiddleware, slow_request_ms=settings.slow_request_ms)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _request_id_headers(request: Request) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return {"X-Request-ID": req_id} if req_id else {}


@app.exception_handler(IdentityError)
async def identity_error_handler(request: Request, exc: IdentityError):
    """Map identity core errors to stable status codes."""
    code = status_for(exc)
    headers = _request_id_headers(request)
    if code == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    if code >= 500:
        logger.error("Identity operation failed: %s", exc.code, extra={"error": str(exc)})
    content = ErrorResponse(
        detail=exc.message,
        code=exc.code,
        request_id=headers.get("X-Request-ID"),
    )
    return JSONResponse(
        status_code=code,
        content=content.model_dump(exclude_none=True),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Handle request validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    headers = _request_id_headers(request)
    content = {"detail": "Validation error", "errors": errors}
    if headers:
        content["request_id"] = headers["X-Request-ID"]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=content,
        headers=headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions."""
    logger.exception("Unhandled exception: %s", type(exc).__name__)
    headers = _request_id_headers(request)
    req_id = headers.get("X-Request-ID")
    if settings.debug:
        content = {"detail": str(exc), "type": type(exc).__name__, "request_id": req_id}
    else:
        content = {"detail": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=headers,
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(response: Response):
    """Report service health, including whether the account store answers."""
    if await check_db():
        return HealthResponse(status="ok", version=settings.version, database="connected")
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="degraded", version=settings.version, database="unavailable")


app.include_router(api_router, prefix=settings.api_prefix)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "webauth.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )

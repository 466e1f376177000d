import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recipe_ratio import __version__
from recipe_ratio.cache import close_redis
from recipe_ratio.db.connection import dispose_engine, get_engine, init_models
from recipe_ratio.errors import (
    RemoteFetchError,
    RemoteTimeoutError,
    StoreError,
    ValidationFailure,
)
from recipe_ratio.settings import get_settings

from .api import favorites, recipes
from .schemas.error import ErrorType, ValidationErrorDetail
from .utils.error_responses import (
    build_error_response,
    build_validation_error_response,
)
from .utils.request_context import get_request_id, set_request_id

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level_numeric,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validate_environment() -> None:
    """Log warnings for optional configuration left at its defaults."""

    warnings = get_settings().optional_config_warnings()
    if warnings:
        logger.warning("=" * 60)
        logger.warning("Environment Configuration Warnings:")
        for warning in warnings:
            logger.warning(f"  • {warning}")
        logger.warning("=" * 60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    _validate_environment()

    logger.info("Recipe Ratio API - local store %s", get_settings().resolved_database_url)
    await init_models(get_engine())

    yield

    logger.info("Shutting down Recipe Ratio API")
    await close_redis()
    await dispose_engine()


app = FastAPI(
    title="Recipe Ratio API",
    version=__version__,
    description="Local favorites, custom ingredients, and servings scaling for remote recipes.",
    lifespan=lifespan,
    redirect_slashes=False,
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add unique request ID to each request for tracking."""
    request_id = str(uuid.uuid4())
    set_request_id(request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    errors = [
        ValidationErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
            value=error.get("input"),
        )
        for error in exc.errors()
    ]

    logger.warning(
        "Validation error for request %s to %s: %s errors",
        get_request_id(),
        request.url.path,
        len(errors),
    )

    error_response = build_validation_error_response(
        message="Request validation failed",
        detail=f"{len(errors)} validation error(s)",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=errors,
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(ValidationFailure)
async def input_validation_exception_handler(request: Request, exc: ValidationFailure):
    """Handle input rejected at the servings/ingredient boundary."""
    logger.warning(
        "Rejected input for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        exc,
    )

    error_response = build_validation_error_response(
        message="Input validation failed",
        detail=str(exc),
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        path=str(request.url.path),
        errors=[
            ValidationErrorDetail(
                field=exc.field or "input",
                message=str(exc),
                value=exc.value,
            )
        ],
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError):
    """Handle local store read/write failures."""
    logger.error(
        "Store error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.DATABASE_ERROR,
        message="Local store operation failed",
        detail=str(exc),
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        path=str(request.url.path),
        retry_after=1,
    )

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(RemoteTimeoutError)
async def remote_timeout_exception_handler(request: Request, exc: RemoteTimeoutError):
    """Handle recipe catalog timeouts."""
    logger.error(
        "Remote timeout for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.TIMEOUT_ERROR,
        message="Recipe catalog timed out",
        detail=str(exc),
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        path=str(request.url.path),
        retry_after=5,
    )

    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(RemoteFetchError)
async def remote_fetch_exception_handler(request: Request, exc: RemoteFetchError):
    """Handle recipe catalog failures other than timeouts."""
    logger.error(
        "Remote fetch error for request %s to %s: %s",
        get_request_id(),
        request.url.path,
        str(exc),
    )

    error_response = build_error_response(
        error_type=ErrorType.NETWORK_ERROR,
        message="Recipe catalog unavailable",
        detail=str(exc),
        status_code=status.HTTP_502_BAD_GATEWAY,
        path=str(request.url.path),
        retry_after=5,
    )

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=error_response.model_dump(mode="json"),
    )


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
app.include_router(recipes.router, prefix="/recipes", tags=["recipes"])

"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formchat import __version__
from formchat.api.exceptions import FormChatAPIError, from_domain_error
from formchat.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from formchat.api.routes import register_routes
from formchat.config import get_settings
from formchat.errors import FormChatError
from formchat.observability.logging import get_logger, setup_logging
from formchat.observability.metrics import ERRORS

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a fully configured FastAPI app with:
    - Structured logging
    - CORS middleware
    - Global exception handlers
    - All API routes registered

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title="formchat API",
        description="Conversational slot-filling for structured forms",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    metrics = settings.observability.metrics
    register_routes(app, metrics_path=metrics.path if metrics.enabled else None)

    logger.info(
        "app_created",
        debug=settings.debug,
        cors_origins=settings.api.cors_origins,
    )

    return app


def _error_response(exc: FormChatAPIError) -> JSONResponse:
    details = [
        ErrorDetail(field=d.get("field"), message=str(d.get("message", "")))
        for d in exc.details
    ]
    response = ErrorResponse(
        error=ErrorBody(
            code=exc.error_code,
            message=exc.message,
            details=details or None,
        )
    )
    return JSONResponse(status_code=exc.status_code, content=response.model_dump(mode="json"))


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(FormChatAPIError)
    async def api_error_handler(request: Request, exc: FormChatAPIError) -> JSONResponse:
        """Handle FormChatAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc)

    @app.exception_handler(FormChatError)
    async def domain_error_handler(request: Request, exc: FormChatError) -> JSONResponse:
        """Translate domain errors raised by the dialogue engine."""
        api_error = from_domain_error(exc)
        ERRORS.labels(error_type=api_error.error_code.value).inc()
        logger.warning(
            "domain_error",
            error_code=api_error.error_code.value,
            error_type=type(exc).__name__,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(api_error)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning(
            "validation_error",
            error_count=len(exc.errors()),
            path=request.url.path,
        )

        details = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            details.append(ErrorDetail(field=field, message=error["msg"]))

        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=details,
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump(mode="json"))

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        ERRORS.labels(error_type=ErrorCode.INTERNAL_ERROR.value).inc()
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )

        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INTERNAL_ERROR,
                message="An unexpected error occurred",
            )
        )
        return JSONResponse(status_code=500, content=response.model_dump(mode="json"))

    logger.debug("exception_handlers_registered")


# Create the app instance for uvicorn
app = create_app()


def run_server() -> None:
    """Run the API server on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    run_server()

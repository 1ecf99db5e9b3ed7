"""API route registration."""

from fastapi import APIRouter, FastAPI

from formchat.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from formchat.api.routes.chat import router as chat_router
    from formchat.api.routes.forms import router as forms_router
    from formchat.api.routes.sessions import router as sessions_router

    router.include_router(chat_router, tags=["Chat"])
    router.include_router(sessions_router, tags=["Sessions"])
    router.include_router(forms_router, tags=["Forms"])

    logger.debug("v1_router_created", routes=["chat", "sessions", "forms"])

    return router


def register_routes(app: FastAPI, metrics_path: str | None = "/metrics") -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        metrics_path: Path for the Prometheus endpoint, or None to disable it
    """
    app.include_router(create_v1_router())

    # Health and metrics live at root level
    from formchat.api.routes.health import metrics
    from formchat.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])
    if metrics_path:
        app.add_api_route(metrics_path, metrics, methods=["GET"], tags=["Health"])

    logger.info("routes_registered", metrics_path=metrics_path)

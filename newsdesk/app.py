import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from newsdesk.core.config import Settings, get_settings
from newsdesk.core.log import configure_logging
from newsdesk.repositories.json_storage import CollectionStore, JsonCollectionStore
from newsdesk.routers import auth as auth_router
from newsdesk.routers import feeds as feeds_router
from newsdesk.routers import health as health_router
from newsdesk.routers import resources as resources_router
from newsdesk.services.auth_service import AdminAuthService
from newsdesk.services.collection_service import RESOURCES, CollectionService
from newsdesk.services.feed_service import FeedAggregator

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, no sniffing, HSTS)."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-XSS-Protection", "1; mode=block")
        response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


def create_app(
    settings: Optional[Settings] = None,
    store_factory: Optional[Callable[[str], CollectionStore]] = None,
    feed_aggregator: Optional[FeedAggregator] = None,
) -> FastAPI:
    """
    Build the API. store_factory receives each collection's file name and
    returns its store; by default one JSON file per collection under DATA_DIR.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if store_factory is None:
        def store_factory(filename: str) -> CollectionStore:
            return JsonCollectionStore(settings.data_dir / filename)

    app = FastAPI(title="Newsdesk API")
    app.state.settings = settings
    app.state.collections = {
        spec.key: CollectionService(store_factory(spec.filename), id_field=spec.id_field) for spec in RESOURCES
    }
    app.state.feed_aggregator = feed_aggregator or FeedAggregator(
        settings.feed_sources,
        limit=settings.feed_limit,
        timeout=settings.feed_timeout_seconds,
    )
    app.state.auth_service = AdminAuthService(settings)

    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "PUT"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(feeds_router.router)
    app.include_router(auth_router.router)
    app.include_router(health_router.router)
    for router in resources_router.routers:
        app.include_router(router)

    logger.debug("Collections stored under %s", settings.data_dir)
    return app

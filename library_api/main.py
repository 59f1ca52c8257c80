"""
Library Catalog API Server

Builds the FastAPI application around the Strawberry GraphQL router:

- ``/graphql``  queries and mutations over HTTP, subscriptions over WebSocket
- ``/health``   liveness probe with rate limit and subscriber details
- ``/``         short index of the endpoints above

Startup creates missing tables; shutdown releases pooled connections.
Run locally with ``python -m library_api.main`` or
``uvicorn library_api.main:app --port 4000``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError

from library_api import __version__
from library_api.config import get_settings
from library_api.database import create_tables, engine
from library_api.graphql import create_graphql_router
from library_api.services.events import EventType, get_broadcaster
from library_api.services.rate_limiter import limiter, rate_limit_exceeded_handler

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DESCRIPTION = """
## Library Catalog API

Books and their authors, served over GraphQL at `/graphql`.

- **Queries**: authorCount, bookCount, allBooks, allAuthors, me
- **Mutations**: addBook, editAuthor, createUser, login
- **Subscriptions**: bookAdded

addBook and editAuthor need `Authorization: Bearer <token>`, where the
token comes from the `login` mutation.
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create tables before serving; dispose of the engine afterwards."""
    logger.info(
        f"Starting {settings.app_name} v{__version__} "
        f"(environment={settings.environment}, debug={settings.debug})"
    )
    create_tables()
    logger.info("Database tables ready")

    yield

    logger.info(f"Stopping {settings.app_name}")
    engine.dispose()


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map errors that escape the GraphQL layer to JSON responses.

    Resolver errors never get here: Strawberry reports them in the
    ``errors`` list of a 200 response. These handlers cover the context
    getter, the plain routes and anything unexpected.
    """
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error(f"Database error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "A database error occurred. Please try again later."},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log with traceback; expose the message only in debug outside production."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)

        if settings.debug and not settings.is_production:
            detail = str(exc)
        else:
            detail = "An internal error occurred."

        return JSONResponse(status_code=500, content={"detail": detail})


def create_app() -> FastAPI:
    """
    Application factory.

    Returns:
        FastAPI app with rate limiting, CORS, error handlers and routes
    """
    app = FastAPI(
        title=settings.app_name,
        description=DESCRIPTION,
        version=__version__,
        lifespan=lifespan,
    )

    # slowapi reads the limiter from app.state
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(create_graphql_router(), prefix="/graphql", tags=["GraphQL"])

    @app.get("/health", tags=["Health"], summary="Health check")
    async def health_check() -> dict:
        """Report liveness, rate limiting and live subscriptions."""
        broadcaster = get_broadcaster()

        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": __version__,
            "rate_limiting": {
                "enabled": settings.rate_limit_enabled,
                "default_limit": settings.rate_limit_default,
            },
            "graphql": {
                "endpoint": "/graphql",
                "ide": settings.graphql_ide,
            },
            "subscriptions": {
                "book_added": broadcaster.subscriber_count(EventType.BOOK_ADDED),
                **broadcaster.get_stats(),
            },
        }

    @app.get("/", tags=["Root"], summary="API index")
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": __version__,
            "graphql": "/graphql",
            "health": "/health",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "library_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

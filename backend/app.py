"""FastAPI application entry point for the peephole room status API."""

import logging
import sys

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, settings as default_settings
from errors import register_error_handlers
from services.cache import ExpiringCache
from services.room_status import build_census_client, build_room_cache

# Structured logging: JSON for production, human-readable for local
if default_settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, cache: ExpiringCache | None = None) -> FastAPI:
    """Build the app. ``cache`` replaces the upstream-backed cache, e.g. in tests."""
    settings = settings or default_settings
    app = FastAPI(title="Peephole", version="1.0.0")
    app.state.settings = settings
    app.state.room_cache = cache
    app.state.census_client = None

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        if "*" in settings.cors_origins:
            response.headers.setdefault("Access-Control-Allow-Origin", "*")
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.room import router as room_router

    app.include_router(health_router)
    app.include_router(room_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        missing = settings.validate()
        if missing:
            logger.error("Missing environment variables: %s", ", ".join(missing))
            raise RuntimeError(f"Missing environment variables: {', '.join(missing)}")
        if app.state.room_cache is None:
            app.state.census_client = build_census_client(settings)
            app.state.room_cache = build_room_cache(settings, app.state.census_client)

    @app.on_event("shutdown")
    async def _close_client() -> None:
        if app.state.census_client is not None:
            app.state.census_client.close()

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn on ``PEEPHOLE_HTTP_ADDR``."""
    missing = default_settings.validate()
    if missing:
        logger.error("Missing environment variables: %s", ", ".join(missing))
        sys.exit(1)
    logger.info("Starting HTTP server on %s:%d", default_settings.http_host, default_settings.http_port)
    uvicorn.run(app, host=default_settings.http_host, port=default_settings.http_port)


if __name__ == "__main__":
    main()

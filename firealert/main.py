# firealert/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import Settings, get_settings
from .db import connect, get_collection
from .errors import AuthorizationError, ConfigurationError, StoreConnectionError
from .middleware import AccessLogMiddleware, BodySizeLimitMiddleware, SecurityHeadersMiddleware
from .routes import events, health
from .services.event_store import EventStore
from .services.notifier import NotificationDispatcher
from .utils.auth import authorization_error_handler

logger = logging.getLogger("firealert")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    settings: Settings = app.state.settings
    mongo_client = None
    if app.state.store is None:
        try:
            mongo_client = await connect(settings)
        except (ConfigurationError, StoreConnectionError) as e:
            logger.error("❌ %s", e)
            raise
        app.state.store = EventStore(get_collection(mongo_client, settings))
        await app.state.store.ensure_indexes()
        logger.info("✅ Connected to MongoDB")
    if app.state.dispatcher is None:
        app.state.dispatcher = NotificationDispatcher(settings)

    logger.info("✅ Fire Event Server (Mongo) running on http://localhost:%s", settings.PORT)
    logger.info("Health: http://localhost:%s/health", settings.PORT)
    logger.info("POST events: http://localhost:%s/api/fire-events", settings.PORT)
    logger.info("Auth: %s", "ENABLED (Bearer token)" if settings.auth_enabled else "DISABLED")
    logger.info("WhatsApp notifications: %s", "ENABLED" if settings.notifications_enabled else "DISABLED")
    yield
    # shutdown
    await app.state.dispatcher.aclose()
    if mongo_client is not None:
        mongo_client.close()
    logger.info("👋 Shutting down...")


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings):
    # no-op when the root logger already has handlers
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EventStore] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title="Fire Event Server", version="1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.dispatcher = dispatcher

    app.add_exception_handler(AuthorizationError, authorization_error_handler)

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(AccessLogMiddleware)

    app.include_router(health.router)
    app.include_router(events.router)
    return app


app = create_app()


def main():
    settings = get_settings()
    configure_logging(settings)
    try:
        settings.require_database()
    except ConfigurationError as e:
        logger.error("❌ %s", e)
        sys.exit(1)
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()

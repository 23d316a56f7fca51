import uvicorn
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.containers import AppContainer
from api.dependencies import get_directory, get_notification_publisher, get_settings
from api.middleware.request_ids import RequestIdMiddleware
from api.middleware.error_handling import ErrorHandlingMiddleware
from api.routers import notifications
from api.schemas.responses import HealthResponse, HealthStatus
from core.config.settings import Settings
from core.config.validator import validate_startup_configuration
from core.logging import get_api_logger_safe, configure_logging
from core.notifications.directory import Directory
from core.streaming.publisher import NotificationPublisher
from core.utils.exceptions import ConfigurationError

logger = get_api_logger_safe("api.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the broker connection before serving and close it on shutdown.

    Any failure here aborts startup, so the server never accepts requests it
    could not acknowledge.
    """
    container: AppContainer = app.state.container
    settings = container.settings()

    logger.info(
        "Starting notification producer",
        topic=settings.redpanda.topic,
        bootstrap_servers=settings.redpanda.bootstrap_servers,
        directory_size=len(container.directory()),
    )

    if not await validate_startup_configuration(settings):
        raise ConfigurationError("Configuration validation failed - cannot proceed with startup")

    publisher = container.notification_publisher()
    try:
        await publisher.start()
    except Exception as e:
        logger.critical("Failed to initialize producer", error=str(e))
        raise

    logger.info("Producer ready, accepting requests")

    yield

    logger.info("Shutting down notification producer")
    await publisher.stop()
    logger.info("Shutdown complete")


def _build_uvicorn_log_config() -> dict:
    """Return a minimal log config that cooperates with our structlog handlers.

    Uvicorn loggers get no handlers of their own and propagate to root, where
    the console and channel handlers installed by configure_logging live.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "loggers": {
            "uvicorn": {"level": "INFO", "propagate": True},
            "uvicorn.error": {"level": "INFO", "propagate": True},
            "uvicorn.access": {"level": "INFO", "propagate": True},
        },
    }


def create_app(container: Optional[AppContainer] = None) -> FastAPI:
    """Creates and configures the FastAPI application"""
    container = container or AppContainer()
    settings = container.settings()

    configure_logging(settings)

    app = FastAPI(
        title="Kafka Notify Producer",
        version=settings.version,
        description=(
            "Publishes notifications between known parties to a partitioned "
            "Kafka topic and answers only after the broker acknowledges them."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.container = container
    container.wire(modules=["api.dependencies"])

    # Order matters: last added is outermost
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(notifications.router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check(
        settings: Settings = Depends(get_settings),
        publisher: NotificationPublisher = Depends(get_notification_publisher),
        directory: Directory = Depends(get_directory),
    ):
        connected = publisher.is_running
        return HealthResponse(
            status=HealthStatus.HEALTHY if connected else HealthStatus.DEGRADED,
            service=settings.app_name,
            version=settings.version,
            timestamp=datetime.now(timezone.utc),
            broker_connected=connected,
            directory_size=len(directory),
            topic=settings.redpanda.topic,
        )

    # Prometheus metrics endpoint
    @app.get("/metrics", tags=["Monitoring"])
    def metrics(request: Request):
        data = generate_latest(request.app.state.container.prometheus_registry())
        return Response(content=data, media_type=CONTENT_TYPE_LATEST)

    return app


def run(host: Optional[str] = None, port: Optional[int] = None):
    """Main function to run the API server"""
    app = create_app()
    settings = app.state.container.settings()

    uvicorn.run(
        app,
        host=host or settings.api.host,
        port=port or settings.api.port,
        log_level=settings.logging.level.lower(),
        access_log=settings.api.access_log,
        log_config=_build_uvicorn_log_config(),
        lifespan="on",
    )


if __name__ == "__main__":
    run()

from contextlib import asynccontextmanager
from typing import AsyncIterator, TYPE_CHECKING

from fastapi import FastAPI
from structlog.stdlib import BoundLogger

from infrastructure.configuration import SECTIONS
from infrastructure.logging.setup import configure_logging
from infrastructure.services import (
    get_message_ingress,
    get_notification_service,
    get_resilience_service,
    get_settings,
)

if TYPE_CHECKING:
    from infrastructure.configuration import Settings


def _log_configuration(settings: "Settings", logger: BoundLogger) -> None:
    """Log top-level values and, per section, the field names only."""
    logger.info(
        "configuration_initialized",
        prefix=settings.PREFIX,
        log_level=settings.LOG_LEVEL,
        git_sha=settings.GIT_SHA,
    )
    for name in SECTIONS:
        section = getattr(settings, name)
        logger.info(
            "configuration_loaded",
            config_setting=name,
            keys=sorted(type(section).model_fields),
        )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger = configure_logging(
        log_level=settings.LOG_LEVEL, is_production=settings.is_production
    )
    app.state.settings = settings
    app.state.logger = logger
    logger.info("application_startup")
    _log_configuration(settings, logger)

    # Built once here so the first request does not pay for it.
    app.state.resilience = get_resilience_service()
    app.state.notifications = get_notification_service()
    app.state.ingress = get_message_ingress()
    logger.info(
        "services_initialized",
        channels=app.state.notifications.list_channels(),
    )

    yield

    logger.info("application_shutdown")
    await app.state.notifications.aclose()
    logger.info(
        "circuit_breakers_at_shutdown",
        open=app.state.resilience.get_open_circuit_breakers(),
    )

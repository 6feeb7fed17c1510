"""Structlog configuration for the relay.

Log entries go through the standard library ``logging`` module. Outside of
tests the pipeline merges request context (correlation ID, client ID),
records the call site, stamps app and environment, masks message content
and credentials, and renders JSON in production or a console view in
development. Under pytest everything is silenced.
"""

import inspect
import logging
import sys
from types import FrameType, ModuleType
from typing import Any, Iterable, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import Settings
from infrastructure.logging.formatters import (
    add_app_info,
    add_environment_info,
    mask_sensitive_data,
    truncate_large_values,
)

APP_NAME = "messaging-core"
SILENT = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    return "pytest" in sys.modules


def _pipeline(settings: Settings, production: bool) -> List[Any]:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.FILENAME,
            structlog.processors.CallsiteParameter.LINENO,
            structlog.processors.CallsiteParameter.FUNC_NAME,
        ]
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if production
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        callsite,
        add_app_info(APP_NAME, settings.GIT_SHA),
        add_environment_info(settings.PREFIX or "production"),
        mask_sensitive_data(),
        truncate_large_values(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def _apply(processors: List[Any], level: int, force: bool = False) -> BoundLogger:
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=force)
    return structlog.stdlib.get_logger()


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
    extra_processors: Optional[Iterable[Any]] = None,
) -> BoundLogger:
    """Configure structlog and the root logger.

    Args:
        log_level: Overrides ``Settings.LOG_LEVEL``.
        is_production: Overrides ``Settings.is_production``; selects JSON
            rendering.
        extra_processors: Run just before the renderer.

    Returns:
        The root structlog logger.
    """
    if _is_test_environment():
        logging.root.setLevel(SILENT)
        return _apply(
            [
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            SILENT,
            force=True,
        )

    settings = Settings()
    production = settings.is_production if is_production is None else is_production
    processors = _pipeline(settings, production)
    processors[-1:-1] = list(extra_processors or [])

    level_name = (log_level or settings.LOG_LEVEL).upper()
    return _apply(processors, getattr(logging, level_name, logging.INFO))


logger: BoundLogger = configure_logging()


def _calling_module(frame: Optional[FrameType]) -> Optional[ModuleType]:
    # ``frame`` belongs to the helper; its parent is the caller.
    caller = frame.f_back if frame is not None else None
    return inspect.getmodule(caller) if caller is not None else None


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Logger bound to ``logger_name``, the calling module's name by default."""
    if name is None:
        module = _calling_module(inspect.currentframe())
        name = module.__name__ if module else "unknown"
    return logger.bind(logger_name=name)


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    ``component`` is the last segment of the module path, so a call from
    ``infrastructure.resilience.rate_limiter`` logs with
    ``component="rate_limiter"``.
    """
    module = _calling_module(inspect.currentframe())
    if module is None:
        return logger.bind(component="unknown")
    return logger.bind(
        component=module.__name__.rsplit(".", 1)[-1],
        module_path=module.__name__,
    )

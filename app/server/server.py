from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter, get_limiter
from infrastructure.logging import (
    CORRELATION_HEADER,
    bind_request_context,
    get_module_logger,
)
from infrastructure.operations import OperationError, RateLimitedError
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()
settings = get_settings()


handler = FastAPI(lifespan=lifespan)
setup_rate_limiter(handler)
limiter = get_limiter()


async def operation_error_handler(
    request: Request, exc: OperationError
) -> JSONResponse:
    """Render a classified OperationError as ``{"error": ...}``."""
    headers = {}
    if isinstance(exc, RateLimitedError):
        headers["Retry-After"] = str(exc.retry_after)

    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        "request_failed",
        path=request.url.path,
        status_code=exc.http_status,
        error_code=exc.error_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_dict(), headers=headers
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "request_unhandled_exception",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


handler.add_exception_handler(OperationError, operation_error_handler)
handler.add_exception_handler(Exception, unhandled_error_handler)


@handler.middleware("http")
async def correlation_middleware(request: Request, call_next):
    with bind_request_context(
        correlation_id=request.headers.get(CORRELATION_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ) as correlation_id:
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


allow_origins = ["*"] if settings.is_production else settings.server.allowed_origins
handler.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


handler.include_router(api_router)

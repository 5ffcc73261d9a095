import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from ...domain.errors import DomainError

logger = structlog.get_logger(__name__)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
        detail=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

import time
import logging
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .infrastructure.db import engine, SessionLocal
from .infrastructure.models import Base
from .infrastructure.seed import seed_sample_data
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .interfaces.http.errors import register_exception_handlers
from .interfaces.http.limiter import limiter
from .interfaces.http.routers import auth as auth_router
from .interfaces.http.routers import courses as courses_router
from .interfaces.http.routers import jobs as jobs_router
from .interfaces.http.routers import dashboard as dashboard_router
from .config import settings

VERSION = "1.0.0"

# Настройка структурированного логирования
log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

app = FastAPI(title="SkillSetu API", version=VERSION)
app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _endpoint_label(request: Request) -> str:
    # шаблон маршрута, а не сырой путь: /api/courses/{course_id}
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


# Middleware для кодировки, метрик и логирования запросов
@app.middleware("http")
async def observe_request(request: Request, call_next):
    start_time = time.time()
    method = request.method
    path = request.url.path

    response = await call_next(request)

    if response.headers.get("content-type", "").startswith("application/json"):
        response.headers["content-type"] = "application/json; charset=utf-8"

    # Метрики
    duration = time.time() - start_time
    status_code = response.status_code
    endpoint = _endpoint_label(request)
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    # Логирование
    logger.info(
        "http_request",
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration * 1000, 2)
    )

    return response


@app.on_event("startup")
def on_startup():
    logger.info("Starting SkillSetu API", version=VERSION)
    Base.metadata.create_all(bind=engine)

    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection established")

    if settings.SEED_SAMPLE_DATA:
        with SessionLocal() as db:
            seed_sample_data(db)


@app.get("/")
def index():
    return {
        "message": "SkillSetu API",
        "version": VERSION,
        "endpoints": {
            "auth": [
                "POST /api/auth/register",
                "POST /api/auth/login",
                "GET /api/auth/me",
            ],
            "courses": [
                "GET /api/courses",
                "GET /api/courses/:id",
                "POST /api/courses",
                "POST /api/courses/:id/enroll",
                "GET /api/enrollments",
            ],
            "jobs": [
                "GET /api/jobs",
                "GET /api/jobs/:id",
                "POST /api/jobs",
                "POST /api/jobs/:id/apply",
                "GET /api/applications",
            ],
            "dashboard": [
                "GET /api/dashboard/stats",
            ],
        },
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    """Prometheus metrics endpoint"""
    return metrics_endpoint()


app.include_router(auth_router.router)
app.include_router(courses_router.router)
app.include_router(jobs_router.router)
app.include_router(dashboard_router.router)

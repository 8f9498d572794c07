"""Bookstore API."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import time
import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from bookstore.api.error_handling import register_exception_handlers
from bookstore.config import get_settings
from bookstore.logging import configure_logging, get_logger

settings = get_settings()
configure_logging(settings.log_level, json_output=settings.log_json and not settings.debug)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    from bookstore.database import Base, engine

    # Import all models so they're registered with Base
    from bookstore import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("startup", app=settings.app_name)

    yield
    logger.info("shutdown", app=settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Bookstore backend: accounts, sessions and admin user management",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def bind_request_context(request: Request, call_next):
    """Tag every log line of a request with one correlation id."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response


register_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": app.version,
        "time": datetime.now(timezone.utc).isoformat(),
    }


# Import and include routers
from bookstore.api import admin, auth, users  # noqa: E402

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(admin.router)

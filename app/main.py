"""
Tableside Orders - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from app.config import settings
from app.database import SessionLocal
from app.errors import CooldownError, NotFoundError, OrderingError
from app.runtime import Runtime
from app.store.base import StoreConflictError, StoreError
from app.store.sql import SQLDocumentStore
from app.api import auth, orders, tables, waiter_calls, live

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Tableside Orders API", version="1.0.0")
    runtime = Runtime.build(SQLDocumentStore(SessionLocal))
    app.state.runtime = runtime
    await runtime.start()
    yield
    runtime.stop()
    logger.info("Shutting down Tableside Orders API")


# Create FastAPI application
app = FastAPI(
    title="Tableside Orders",
    description="Table-side ordering with open-tab reconciliation and a live staff queue",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error mapping; every failure is scoped to the one request
@app.exception_handler(OrderingError)
async def ordering_error_handler(request: Request, exc: OrderingError):
    if isinstance(exc, NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})
    if isinstance(exc, CooldownError):
        return JSONResponse(
            status_code=429,
            content={"detail": exc.message},
            headers={"Retry-After": str(exc.retry_after)},
        )
    return JSONResponse(status_code=400, content={"detail": exc.message})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if isinstance(exc, StoreConflictError):
        logger.warning("Write conflict", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=409,
            content={"detail": "The table changed while saving. Please try again."},
        )
    logger.error("Store operation failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=503,
        content={"detail": "Could not save right now. Please try again."},
    )


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    checks = {}

    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(tables.router, prefix="/tables", tags=["Tables"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(waiter_calls.router, prefix="/waiter-calls", tags=["Waiter Calls"])
app.include_router(live.router, tags=["Live"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )

"""FastAPI application entry point"""
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi.errors import RateLimitExceeded

from app import models  # noqa: F401  (registers every table on Base.metadata)
from app.api import analytics, audit_logs, auth, health, roles, users
from app.config import settings
from app.database import Base, engine
from app.errors import GatekeeperError, InternalError
from app.middleware.rate_limit import limiter
from app.utils.logger import logger, setup_logging

# Setup logging
setup_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    if settings.DB_AUTO_CREATE:
        Base.metadata.create_all(bind=engine)

    logger.info("Gatekeeper backend starting up", extra={
        "version": "0.1.0",
        "environment": settings.HOST,
        "log_level": settings.LOG_LEVEL,
        "rate_limiting": settings.RATE_LIMIT_ENABLED,
        "monitoring": settings.METRICS_ENABLED
    })
    yield
    logger.info("Gatekeeper backend shutting down")


app = FastAPI(
    title="Gatekeeper",
    description="Super-admin console: accounts, roles, audit trail and usage analytics",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ===== Middleware Setup =====

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.METRICS_ENABLED:
    from app.middleware.monitoring import MonitoringMiddleware
    app.add_middleware(MonitoringMiddleware)

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/health", "/health/ready", "/health/live"],
        inprogress_name="gatekeeper_requests_inprogress",
        inprogress_labels=True
    )
    instrumentator.instrument(app)
    instrumentator.expose(app, endpoint=settings.METRICS_PATH, include_in_schema=False)

# The login route is decorated with the limiter, so it must always be registered
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors"""
    logger.warning(
        "Rate limit exceeded",
        extra={
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": "Too many requests. Please try again later.",
        }
    )

# ===== Route Setup =====

api_v1 = APIRouter(prefix=settings.API_V1_PREFIX)
api_v1.include_router(auth.router)
api_v1.include_router(users.router)
api_v1.include_router(roles.router)
api_v1.include_router(audit_logs.router)
api_v1.include_router(analytics.router)

app.include_router(health.router)
app.include_router(api_v1)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "service": "Gatekeeper",
        "version": "0.1.0",
        "status": "operational",
        "docs": "/docs",
        "health": "/health",
        "api": settings.API_V1_PREFIX,
    }


# ===== Error Handlers =====

@app.exception_handler(GatekeeperError)
async def gatekeeper_error_handler(request: Request, exc: GatekeeperError):
    """Render domain errors as {"error", "message"} with the error's status code"""
    if exc.status_code >= 500:
        logger.error(
            f"Internal error: {exc.message}",
            extra={"path": request.url.path, "method": request.method},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "message": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing input is a 400, like every other validation failure"""
    fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "message": "Invalid or missing fields: " + ", ".join(fields),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for uncaught errors"""
    logger.error(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method
        },
        exc_info=True
    )
    error = InternalError()
    return JSONResponse(
        status_code=error.status_code,
        content={
            "error": error.code,
            "message": error.message,
        }
    )

"""Main FastAPI application."""
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from scanbridge.api.deps import get_store
from scanbridge.api.router import ROUTERS, api_router, function_methods
from scanbridge.core.config import settings
from scanbridge.core.errors import ScanBridgeError
from scanbridge.core.logging_config import get_logger, setup_logging
from scanbridge.core.rate_limit import limiter
from scanbridge.middleware import FunctionGateMiddleware, LoggingMiddleware
from scanbridge.store.base import DocumentStore

setup_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
logger = get_logger(__name__)

if settings.ENVIRONMENT == "production":
    settings.validate_production_config()

logger.info(
    "application_starting",
    app_title=settings.APP_TITLE,
    app_version=settings.APP_VERSION,
    environment=settings.ENVIRONMENT,
    store_backend=settings.STORE_BACKEND,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

app.state.limiter = limiter


# Every failure is rendered as {"error": message}

@app.exception_handler(ScanBridgeError)
async def scanbridge_error_handler(request: Request, exc: ScanBridgeError):
    if exc.status_code >= 500:
        logger.error("request_error", error=exc.message, error_type=type(exc).__name__)
    else:
        logger.info("request_rejected", error=exc.message, status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"Invalid request: {location + ': ' if location else ''}{errors[0].get('msg')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("rate_limited", limit=str(exc.detail))
    return JSONResponse(status_code=429, content={"error": f"Rate limit exceeded: {exc.detail}"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("unhandled_exception", error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Function gate runs inside the logging middleware so 405/204 answers are logged too
app.add_middleware(
    FunctionGateMiddleware,
    routes=function_methods(*ROUTERS),
    allow_origins=settings.CORS_ORIGINS,
)
app.add_middleware(LoggingMiddleware)


@app.middleware("http")
async def add_api_version_header(request: Request, call_next):
    """Add X-API-Version header to all responses for version tracking."""
    response = await call_next(request)
    response.headers["X-API-Version"] = settings.APP_VERSION
    return response


app.include_router(api_router)


@app.get("/health")
async def health_check(store: DocumentStore = Depends(get_store)):
    """Liveness check; reports which document store backend is wired in."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "store": store.name,
    }

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.errors import BadPayload, CheckoutRelayError, ConfigError
from app.api.api import api_router

# Logging Configuration
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Checkout relay - Endpoint not found"

app = FastAPI(title=settings.PROJECT_NAME)

# CORS Middleware
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )


@app.exception_handler(CheckoutRelayError)
async def checkout_relay_exception_handler(request: Request, exc: CheckoutRelayError):
    if isinstance(exc, BadPayload):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    if isinstance(exc, ConfigError):
        logger.error(f"Configuration error on {request.url.path}: {exc.message}")
        message = exc.public_message
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        message = exc.message

    return JSONResponse(status_code=exc.status_code, content={"error": message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods both read as "not found"
    if exc.status_code in (404, 405):
        return PlainTextResponse(NOT_FOUND_MESSAGE, status_code=404)
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP error"
    return JSONResponse(status_code=exc.status_code, content={"error": detail}, headers=exc.headers)


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )


# Include Router
app.include_router(api_router)

"""
FastAPI entrypoint for Expensia backend application.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.config import settings
from app.core.utils import format_error
from app.api.router import api_router
from app.services.trip_channel import TripChannel

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the trip chat registry for the lifetime of the process."""
    app.state.trip_channel = TripChannel()
    logger.info("Trip channel started")
    yield
    await app.state.trip_channel.close()
    logger.info("Trip channel stopped")


app = FastAPI(
    title="Expensia API",
    description="Backend API for personal finance tracking and shared trip chat",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(exc: RequestValidationError) -> str:
    """Turn the first validation error into a short client-facing message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    if any(e.get("type") == "missing" or e.get("input") is None for e in errors):
        return "Please fill all required fields"

    error = errors[0]
    error_type = error.get("type", "")
    if error_type.startswith(("date", "datetime")):
        return "Invalid date format"
    if error_type == "value_error":
        return error.get("msg", "").replace("Value error, ", "", 1)
    field = error.get("loc", ["request"])[-1]
    return f"Invalid value for {field}"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error(str(exc.detail)),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=format_error(_validation_message(exc))
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=format_error("Server error")
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=format_error("Server error")
    )


# Include API routes
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Expensia API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}

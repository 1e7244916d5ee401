import time
import uuid
import sys
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id

from people_tracker.config import DEFAULT_USER_ID, USER_ID_HEADER
from people_tracker.logging_setup import setup_logging, logger
from people_tracker.routes import router
from people_tracker.database import connect_to_mongo, close_mongo_connection

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles application startup and shutdown events.
    """
    setup_logging()
    logger.info("--- Application Starting Up ---")

    try:
        await connect_to_mongo()
    except Exception as e:
        logger.critical(f"Could not connect to the database on startup: {e}", exc_info=True)
        # Non-zero exit so the process supervisor restarts the service
        sys.exit(1)

    yield
    await close_mongo_connection()
    logger.info("--- Application Shutting Down ---")

app = FastAPI(
    title="People Tracker API",
    description="An API to record people and the relationships between them.",
    version="1.0.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


# MIDDLEWARE CONFIGURATION

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(CorrelationIdMiddleware)

def _request_extra(request: Request) -> dict:
    # Request log lines carry the owning user.
    return {
        "method": request.method,
        "path": request.url.path,
        "user_id": request.headers.get(USER_ID_HEADER, DEFAULT_USER_ID),
    }

@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    """
    Logs each request with its owner and timing; uncaught errors become a 500
    carrying the correlation id.
    """
    start_time = time.perf_counter()
    extra = _request_extra(request)
    logger.info("Request received", extra=extra)
    try:
        response = await call_next(request)
    except Exception as e:
        request_id = correlation_id.get() or uuid.uuid4().hex
        logger.critical("Unhandled exception", extra={**extra, "error": str(e)}, exc_info=True)
        return ORJSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred.",
                "correlation_id": request_id,
            },
        )
    logger.info(
        "Request completed",
        extra={
            **extra,
            "status_code": response.status_code,
            "process_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
        },
    )
    return response

#ROUTER INCLUSION
app.include_router(router)

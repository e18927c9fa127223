from contextlib import asynccontextmanager
import logging
import sys
import time

import air
from air.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from proximity.broadcaster import Broadcaster
from proximity.errors import proximity_error_handler
from proximity.errors import ProximityError
from proximity.middleware import ApiKeyMiddleware
from proximity.middleware import RequestLoggingMiddleware
from proximity.openapi import OPENAPI_SPEC
from proximity.openapi import SERVICE_NAME
from proximity.openapi import SERVICE_VERSION
from proximity.routes.broadcast import router as broadcast_router
from proximity.routes.proximity import router as proximity_router
from proximity.settings import settings

logging.basicConfig(
    stream=sys.stdout,
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("proximity.app")

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: air.Air):
    broadcaster = Broadcaster(queue_size=settings.subscriber_queue_size)
    app.state.broadcaster = broadcaster

    logger.info(f"Starting {SERVICE_NAME} {SERVICE_VERSION} ({settings.environment})")
    if not settings.api_key:
        logger.warning("PROXIMITY_API_KEY is not set, API key gate is disabled")

    try:
        yield
    finally:
        broadcaster.close()
        logger.info(f"{SERVICE_NAME} stopped")


app = air.Air(lifespan=lifespan)

app.add_exception_handler(ProximityError, proximity_error_handler)
app.include_router(proximity_router)
app.include_router(broadcast_router)

# Last added runs first: CORS answers preflights before the key gate sees them
app.add_middleware(ApiKeyMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return JSONResponse(
        {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "uptime": int(time.monotonic() - STARTED_AT),
        }
    )


@app.get("/api/openapi.json")
def openapi_manifest():
    return JSONResponse(OPENAPI_SPEC)

import logging
import secrets
import time
import uuid

from air.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from proximity.settings import settings

logger = logging.getLogger("proximity.request")
auth_logger = logging.getLogger("proximity.auth")

public_routes = [
    "/health",
]


def extract_api_key(request) -> str | None:
    """Reads the key from X-API-Key, a Bearer token, or the api_key query param.

    The query param is there for EventSource clients, which cannot set headers.
    """
    if "x-api-key" in request.headers:
        return request.headers.get("x-api-key")

    auth_header = request.headers.get("authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()

    return request.query_params.get("api_key")


class ApiKeyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        expected = settings.api_key
        if not expected or request.method == "OPTIONS" or request.url.path in public_routes:
            return await call_next(request)

        key = extract_api_key(request)
        if not key or not secrets.compare_digest(key.encode(), expected.encode()):
            auth_logger.warning(
                f"Rejected {request.method} {request.url.path}: "
                f"{'wrong' if key else 'missing'} API key"
            )
            return JSONResponse(
                {"error": "Unauthorized: missing or invalid API key"}, status_code=401
            )
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = uuid.uuid4().hex[:12]
        start_time = time.time()
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} failed after "
                f"{time.time() - start_time:.4f}s: {e}"
            )
            raise

        # For streams this is the time to the first byte, not the stream length
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} "
            f"{response.status_code} in {time.time() - start_time:.4f}s"
        )
        response.headers["X-Request-ID"] = request_id
        return response

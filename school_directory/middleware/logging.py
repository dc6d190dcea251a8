import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request, tagged with the id echoed in ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next):
        # Keep a caller supplied id so logs on both sides line up
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[{request_id}] {request.method} {request.url.path} failed after {_elapsed_ms(started)}ms"
            )
            raise

        logger.log(
            logging.WARNING if response.status_code >= 400 else logging.INFO,
            f"[{request_id}] {request.method} {request.url.path} {response.status_code} {_elapsed_ms(started)}ms",
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)

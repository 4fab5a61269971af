import json
import logging
import os
import sys
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware

# Logger for emitting one JSON line per request for API monitoring.
json_logger = logging.getLogger("fortune_api.access")
if not json_logger.handlers:
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter("%(message)s"))
    json_logger.addHandler(h)
json_logger.setLevel(
    getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
)
json_logger.propagate = False


def _log_request(request, rid: str, status_code: int, start: float) -> None:
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    json_logger.info(
        json.dumps(
            {
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status_code,
                "elapsed_ms": elapsed_ms,
                "client_ip": request.headers.get("x-forwarded-for")
                or getattr(request.client, "host", None),
                "content_length": request.headers.get("content-length"),
            },
            separators=(",", ":"),
        )
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    FastAPI/Starlette middleware to log a single JSON line for each HTTP request.

    Logs:
        - request_id (incoming X-Request-Id or a fresh UUID4)
        - method, path, status
        - elapsed_ms (wall time)
        - client_ip
        - content_length (from headers)
    Adds X-Request-Id to every response for traceability.
    """

    async def dispatch(self, request, call_next):
        """
        Handles incoming request, logging on completion (even on exceptions).
        """
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            _log_request(request, rid, 500, start)
            raise

        _log_request(request, rid, response.status_code, start)
        response.headers["X-Request-Id"] = rid
        return response

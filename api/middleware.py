"""
Request/response logging middleware.
"""

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from worker_assignment.utils.helpers import setup_logging

logger = setup_logging()

SLOW_REQUEST_SECONDS = 2.0


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with an id and its processing time."""

    def __init__(self, app):
        super().__init__(app)
        self.sensitive_headers = {"authorization", "x-api-key", "cookie"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.time()
        request_id = f"req_{uuid.uuid4().hex[:12]}"

        self._log_request(request, request_id)

        try:
            response = await call_next(request)
        except Exception as e:
            processing_time = time.time() - start_time
            logger.error(
                f"Request {request_id} failed: {str(e)} | "
                f"Method: {request.method} | URL: {request.url} | "
                f"Time: {processing_time:.3f}s"
            )
            raise

        processing_time = time.time() - start_time
        self._log_response(response, request_id, processing_time)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}s"
        return response

    def _log_request(self, request: Request, request_id: str):
        client_host = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent", "unknown")
        headers = [k for k in request.headers.keys() if k.lower() not in self.sensitive_headers]

        logger.info(
            f"Request {request_id} started | "
            f"Method: {request.method} | URL: {request.url} | "
            f"Client: {client_host} | Agent: {user_agent[:50]} | "
            f"Headers: {len(headers)} | Body: {request.headers.get('content-length', '0')} bytes"
        )

    def _log_response(self, response: Response, request_id: str, processing_time: float):
        logger.info(
            f"Request {request_id} completed | "
            f"Status: {response.status_code} | "
            f"Time: {processing_time:.3f}s"
        )

        if processing_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request detected: {request_id} | "
                f"Processing time: {processing_time:.3f}s"
            )

"""
Request tracking middleware for the menu layout API
"""
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

import logging

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an ID and logs how long layout requests take"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        path = request.url.path
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(f"Request failed: {request.method} {path} - Error: {str(e)} - Duration: {duration_ms}ms - Request ID: {request_id}")
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        if not path.endswith('/health'):
            logger.info(f"{request.method} {path} - Status: {response.status_code} - Duration: {duration_ms}ms - Request ID: {request_id}")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)
        return response

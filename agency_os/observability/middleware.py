"""
ASGI middleware for correlation ID tracking.
"""

import logging

from .context import RequestContext, generate_request_id

logger = logging.getLogger(__name__)

HEADER = b"x-request-id"


class CorrelationIdMiddleware:
    """
    Reads X-Request-ID (or generates one), binds it for every log line
    written while the request is handled, and echoes it on the response.

    Usage in api/server.py:
        app.add_middleware(CorrelationIdMiddleware)
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = None
        for key, value in scope.get("headers", []):
            if key.lower() == HEADER:
                try:
                    request_id = value.decode("utf-8")
                except UnicodeDecodeError as e:
                    logger.warning(f"Could not decode X-Request-ID header: {e}")
                break

        if not request_id:
            request_id = generate_request_id()

        async def send_with_request_id(message):
            if message["type"] == "http.response.start":
                headers_list = list(message.get("headers", []))
                headers_list.append((HEADER, request_id.encode("utf-8")))
                message["headers"] = headers_list
            await send(message)

        with RequestContext(request_id=request_id):
            await self.app(scope, receive, send_with_request_id)

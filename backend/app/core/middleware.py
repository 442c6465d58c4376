# backend/app/core/middleware.py
"""
Open CORS for the embeddable /api/public/* family.

Runs outside the regular CORSMiddleware so its headers win on every public
response, errors included, and answers preflight requests itself.

Starlette renders unhandled exceptions in ServerErrorMiddleware, which sits
outside every user middleware; public routes render their own 500 here so
that response carries the CORS headers as well.
"""

from __future__ import annotations

from starlette.datastructures import MutableHeaders
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.core.logging import get_logger

logger = get_logger(__name__)

PUBLIC_PREFIX = "/api/public"

PUBLIC_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Requested-With",
    "Access-Control-Max-Age": "86400",
}


class PublicCORSMiddleware:
    def __init__(self, app: ASGIApp, prefix: str = PUBLIC_PREFIX) -> None:
        self.app = app
        self.prefix = prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not scope["path"].startswith(self.prefix):
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=PUBLIC_CORS_HEADERS)
            await response(scope, receive, send)
            return

        started = False

        async def send_with_cors(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
                headers = MutableHeaders(scope=message)
                for key in [k for k in headers.keys() if k.startswith("access-control-")]:
                    del headers[key]
                for key, value in PUBLIC_CORS_HEADERS.items():
                    headers[key] = value
            await send(message)

        try:
            await self.app(scope, receive, send_with_cors)
        except Exception:
            # too late for a JSON error once the body is on the wire
            if started:
                raise
            logger.error(
                "unhandled_exception",
                path=scope["path"],
                method=scope["method"],
                exc_info=True,
            )
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers=PUBLIC_CORS_HEADERS,
            )
            await response(scope, receive, send)

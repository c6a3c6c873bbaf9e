from __future__ import annotations

import logging
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from marketing_studio.config import DEFAULT_BODY_MAX_BYTES

logger = logging.getLogger("marketing-studio.body-guard")


class BodyGuardMiddleware(BaseHTTPMiddleware):
    """拦截超大的请求体，在进入路由之前返回 413。"""

    def __init__(self, app, *, max_bytes: int = DEFAULT_BODY_MAX_BYTES) -> None:
        super().__init__(app)
        self.max_bytes = max_bytes

    def _reject(self, request: Request, size: int) -> JSONResponse:
        logger.warning(
            "[guard] rejected oversized body",
            extra={"path": request.url.path, "body_bytes": size, "limit_bytes": self.max_bytes},
        )
        return JSONResponse(
            status_code=413,
            content={"detail": "Payload exceeds limit.", "limit_bytes": self.max_bytes},
        )

    async def dispatch(self, request: Request, call_next: Callable):
        if not self.max_bytes or request.method not in ("POST", "PUT", "PATCH"):
            return await call_next(request)

        length_header = request.headers.get("content-length")
        if length_header:
            try:
                if int(length_header) > self.max_bytes:
                    return self._reject(request, int(length_header))
            except ValueError:
                # malformed header; measure the body instead
                pass

        body = await request.body()
        if len(body) > self.max_bytes:
            return self._reject(request, len(body))
        return await call_next(request)


__all__ = ["BodyGuardMiddleware"]

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from marketing_studio.config import Settings, get_settings
from marketing_studio.db import init_db
from marketing_studio.middlewares import BodyGuardMiddleware
from marketing_studio.routers import assets, auth, generate, history

SERVICE_NAME = "marketing-studio"

log = logging.getLogger(SERVICE_NAME)


def configure_logging(level: str) -> None:
    # uvicorn 日志级别统一
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", SERVICE_NAME):
        logging.getLogger(name).setLevel(level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("database ready")
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Marketing Studio API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(BodyGuardMiddleware, max_bytes=settings.guard.max_body_bytes)
    allow_all = "*" in settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.allowed_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    log.info("starting environment=%s CORS allow_origins=%s", settings.environment, settings.allowed_origins)

    @app.middleware("http")
    async def request_id(request: Request, call_next):
        trace = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        request.state.trace_id = trace
        response = await call_next(request)
        response.headers["X-Request-ID"] = trace
        return response

    # 首页：GET/HEAD 200，供平台探活
    @app.get("/", include_in_schema=False)
    def root() -> dict[str, Any]:
        return {"service": SERVICE_NAME, "ok": True}

    @app.head("/", include_in_schema=False)
    def root_head() -> Response:
        return Response(status_code=200)

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    app.include_router(auth.router)
    app.include_router(generate.router)
    app.include_router(history.router)
    app.include_router(assets.router)
    return app


app = create_app()

"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from find_unused.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="find-unused", version="0.1.0")
    app.include_router(router)
    return app

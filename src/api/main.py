"""FastAPI application."""

from __future__ import annotations

import os

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import health, webhook
from webhook_speaker.config import AppConfig, build_classifier, load_config
from webhook_speaker.store import NotificationStore, build_store


def create_app(config: AppConfig | None = None, store: NotificationStore | None = None) -> FastAPI:
    config = config if config is not None else load_config()
    app = FastAPI(title="Webhook Speaker", version="0.1.0")
    app.state.config = config
    app.state.classifier = build_classifier(config)
    app.state.store = store if store is not None else build_store(
        os.environ.get("REDIS_URL"), key=config.queue.redis_key, max_size=config.queue.max_size,
    )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        # Verbs outside ROUTED_METHODS are rejected by the router itself
        if exc.status_code == 405:
            return webhook.method_not_allowed()
        return await http_exception_handler(request, exc)

    app.include_router(health.router)
    app.include_router(webhook.router)
    return app


app = create_app()

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from prometheus_fastapi_instrumentator import Instrumentator

from imagepost.api.exception_handlers import register_exception_handlers
from imagepost.api.routes.posts import router as posts_router
from imagepost.services.key_builder import KeyBuilder
from imagepost.services.post_service import PostService
from imagepost.services.storage import ObjectStorage, S3ObjectStorage
from imagepost.settings import Settings

logger = logging.getLogger(__name__)


def build_post_service(
    settings: Settings,
    *,
    storage: Optional[ObjectStorage] = None,
    key_builder: Optional[KeyBuilder] = None,
) -> PostService:
    sibling = settings.caption_layout == "sibling"
    if storage is None:
        storage = S3ObjectStorage(settings.bucket, region=settings.aws_region)
    if key_builder is None:
        key_builder = KeyBuilder(
            embed_caption=not sibling,
            max_caption_length=settings.max_caption_length,
            require_caption=settings.require_caption,
        )
    return PostService(storage, key_builder, sibling_caption=sibling)


def create_app(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[ObjectStorage] = None,
    key_builder: Optional[KeyBuilder] = None,
) -> FastAPI:
    """
    Build the upload gateway.

    Without explicit settings they are read from the environment, so
    `uvicorn imagepost.main:create_app --factory` works as well.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(title="imagepost")
    app.state.settings = settings
    app.state.post_service = build_post_service(settings, storage=storage, key_builder=key_builder)

    register_exception_handlers(app)
    app.include_router(posts_router)

    # ------------------------------------------------------------------
    # Health Check
    # ------------------------------------------------------------------
    @app.get("/healthcheck")
    def health_check():
        return {"status": "healthy"}

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------
    FastAPIInstrumentor.instrument_app(app)
    if settings.metrics_enabled:
        Instrumentator().instrument(app).expose(app)

    logger.info(
        "Upload gateway ready: bucket=%s caption_layout=%s max_caption_length=%s",
        settings.bucket,
        settings.caption_layout,
        settings.max_caption_length,
    )
    return app

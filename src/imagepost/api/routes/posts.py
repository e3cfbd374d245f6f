from __future__ import annotations

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, File, Form, UploadFile
from opentelemetry import trace
from pydantic import BaseModel
from starlette.datastructures import UploadFile as StarletteUploadFile

from imagepost.api.dependencies.services import get_post_service
from imagepost.exceptions import MissingImageError
from imagepost.services.post_service import PostService

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

router = APIRouter(
    prefix="/v1",
    tags=["Posts"],
)


class PostCreated(BaseModel):
    id: str


@router.post("/list", response_model=PostCreated)
def create_post(
    image: Union[UploadFile, str, None] = File(None),
    caption: str = Form(""),
    service: PostService = Depends(get_post_service),
):
    """
    Store an uploaded image and its caption, returning the generated key.

    Declared sync so the blocking storage writes run in the threadpool.
    """
    # a plain text field named "image" counts as a missing file
    if not isinstance(image, StarletteUploadFile):
        raise MissingImageError("image form field is required")

    contents = image.file.read()
    logger.info("Post upload handler start: filename=%s size=%d", image.filename, len(contents))

    with tracer.start_as_current_span("api.create_post") as span:
        span.set_attribute("file.size", len(contents))
        key = service.create_new(
            caption,
            contents,
            image.filename or "",
            content_type=image.content_type,
        )
        span.set_attribute("post.key", key)

    return PostCreated(id=key)


@router.get("/list", response_model=List[str])
def list_posts(service: PostService = Depends(get_post_service)):
    return service.list_posts()

# src/imagepost/services/post_service.py

from __future__ import annotations

import logging
from typing import List, Optional

from opentelemetry import trace

from imagepost.exceptions import ImagePostError
from imagepost.metrics import post_create_failures_total, post_create_total
from imagepost.services.key_builder import KeyBuilder, caption_key, image_key
from imagepost.services.storage import ObjectStorage

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

CAPTION_CONTENT_TYPE = "text/plain; charset=utf-8"


class PostService:
    """Stores posts (one image plus its caption) in object storage."""

    def __init__(self, storage: ObjectStorage, key_builder: KeyBuilder, *, sibling_caption: bool = False):
        self.storage = storage
        self.key_builder = key_builder
        self.sibling_caption = sibling_caption

    def create_new(
        self,
        caption: str,
        image: bytes,
        filename: str,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Store a new post and return its key.

        With sibling captions the caption is written to `<key>/post.txt`
        before the image. A failed image write leaves that object in place.
        """
        with tracer.start_as_current_span("service.create_post") as span:
            span.set_attribute("filename", filename or "")
            span.set_attribute("file.size", len(image))
            span.set_attribute("caption.length", len(caption))

            try:
                key = self.key_builder.build(caption)
                span.set_attribute("post.key", key)

                if self.sibling_caption:
                    self.storage.put_object(
                        caption_key(key),
                        caption.encode("utf-8"),
                        content_type=CAPTION_CONTENT_TYPE,
                    )
                    logger.info("Stored caption: key=%s", key)

                self.storage.put_object(image_key(key, filename), image, content_type=content_type)
            except ImagePostError as exc:
                post_create_failures_total.labels(reason=type(exc).__name__).inc()
                raise

        post_create_total.inc()
        logger.info("Created post: key=%s filename=%s size=%d", key, filename, len(image))
        return key

    def list_posts(self) -> List[str]:
        # No listing contract is defined for posts.
        raise NotImplementedError("listing posts is not implemented")

# src/imagepost/services/key_builder.py

"""
Derivation of post keys.

A key is `YYYY-MM-DD/<uuid>` (UTC date) and, when the caption is folded into
the key, `YYYY-MM-DD/<uuid>/<base64url caption, unpadded>`. Objects of a post
live under the key: `<key>/image<ext>` and, for sibling captions,
`<key>/post.txt`.
"""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID, uuid4

from imagepost.exceptions import (
    CaptionRequiredError,
    CaptionTooLongError,
    KeyGenerationError,
)
from imagepost.utils.filename_utils import get_file_extension

logger = logging.getLogger(__name__)

CAPTION_OBJECT_NAME = "post.txt"
IMAGE_OBJECT_STEM = "image"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def encode_caption(caption: str) -> str:
    """URL-safe base64 of the UTF-8 caption, padding stripped."""
    encoded = base64.urlsafe_b64encode(caption.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=")


def image_key(key: str, filename: str) -> str:
    return f"{key}/{IMAGE_OBJECT_STEM}{get_file_extension(filename)}"


def caption_key(key: str) -> str:
    return f"{key}/{CAPTION_OBJECT_NAME}"


class KeyBuilder:
    """Builds a fresh, unique key per call from the clock and a random id."""

    def __init__(
        self,
        *,
        embed_caption: bool = True,
        max_caption_length: Optional[int] = 256,
        require_caption: bool = False,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], UUID] = uuid4,
    ):
        self.embed_caption = embed_caption
        self.max_caption_length = max_caption_length
        self.require_caption = require_caption
        self.clock = clock
        self.id_factory = id_factory

    def validate_caption(self, caption: str) -> None:
        if self.require_caption and not caption:
            raise CaptionRequiredError("caption is required")
        if self.max_caption_length is not None and len(caption) > self.max_caption_length:
            raise CaptionTooLongError(
                f"caption cannot be longer than {self.max_caption_length} characters: {len(caption)}",
                details={"length": str(len(caption))},
            )

    def build(self, caption: str) -> str:
        self.validate_caption(caption)

        try:
            post_id = self.id_factory()
        except Exception as exc:
            raise KeyGenerationError(f"failed to generate post id: {exc}") from exc

        now = self.clock().astimezone(timezone.utc)
        key = f"{now:%Y-%m-%d}/{post_id}"

        if self.embed_caption and caption:
            key = f"{key}/{encode_caption(caption)}"

        logger.debug("Built post key: %s", key)
        return key

# src/imagepost/settings.py

from __future__ import annotations

import os
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from imagepost.exceptions import ConfigurationError

DEFAULT_PORT = 8080
DEFAULT_MAX_CAPTION_LENGTH = 256

CaptionLayout = Literal["embedded", "sibling"]

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """
    Process configuration, built once at startup and handed to the app factory.

    caption_layout decides where the caption lives:
    - "embedded": base64 caption folded into the key, only the image is written
    - "sibling": caption stored next to the image as post.txt
    """

    bucket: str
    host: str = "0.0.0.0"
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    aws_region: Optional[str] = None
    caption_layout: CaptionLayout = "embedded"
    max_caption_length: Optional[int] = Field(DEFAULT_MAX_CAPTION_LENGTH, ge=1)
    require_caption: bool = False
    log_level: str = "INFO"
    metrics_enabled: bool = True

    @field_validator("bucket")
    @classmethod
    def _bucket_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("bucket name is required")
        return value

    @field_validator("max_caption_length", mode="before")
    @classmethod
    def _zero_disables_cap(cls, value: Any) -> Any:
        if value in (0, "0", ""):
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """
        Build settings from the environment (and a local .env file).

        Keyword overrides, typically parsed command-line flags, win over the
        environment. Overrides set to None are ignored.

        Raises:
            ConfigurationError: bucket is missing or a value is invalid.
        """
        load_dotenv()

        payload: dict[str, Any] = {}

        bucket = os.getenv("BUCKET_NAME")
        if bucket:
            payload["bucket"] = bucket
        if os.getenv("HOST"):
            payload["host"] = os.environ["HOST"]
        if os.getenv("PORT"):
            payload["port"] = os.environ["PORT"]
        if os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION"):
            payload["aws_region"] = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
        if os.getenv("CAPTION_LAYOUT"):
            payload["caption_layout"] = os.environ["CAPTION_LAYOUT"].lower()
        if "MAX_CAPTION_LENGTH" in os.environ:
            payload["max_caption_length"] = os.environ["MAX_CAPTION_LENGTH"].strip()
        if os.getenv("REQUIRE_CAPTION"):
            payload["require_caption"] = os.environ["REQUIRE_CAPTION"].lower() in _TRUE_VALUES
        if os.getenv("LOG_LEVEL"):
            payload["log_level"] = os.environ["LOG_LEVEL"]
        if os.getenv("METRICS_ENABLED"):
            payload["metrics_enabled"] = os.environ["METRICS_ENABLED"].lower() in _TRUE_VALUES

        payload.update({k: v for k, v in overrides.items() if v is not None})

        if not payload.get("bucket"):
            raise ConfigurationError(
                "bucket name is required: pass --bucket or set BUCKET_NAME"
            )

        try:
            return cls(**payload)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


__all__ = ["Settings", "CaptionLayout", "DEFAULT_PORT", "DEFAULT_MAX_CAPTION_LENGTH"]

"""Exception hierarchy for the imagepost service."""

from __future__ import annotations


class ImagePostError(Exception):
    """Base exception for all imagepost errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ImagePostError):
    """Raised when startup configuration is missing or invalid."""
    pass


class PostValidationError(ImagePostError):
    """Base class for client input errors on post creation."""
    pass


class MissingImageError(PostValidationError):
    """Raised when the submitted form has no image file."""
    pass


class CaptionTooLongError(PostValidationError):
    """Raised when a caption exceeds the configured length cap."""
    pass


class CaptionRequiredError(PostValidationError):
    """Raised when captions are required and none was submitted."""
    pass


class KeyGenerationError(ImagePostError):
    """Raised when a post key cannot be derived (random source failure)."""
    pass


class StorageError(ImagePostError):
    """Raised when writing to or listing the object store fails."""
    pass


__all__ = [
    "ImagePostError",
    "ConfigurationError",
    "PostValidationError",
    "MissingImageError",
    "CaptionTooLongError",
    "CaptionRequiredError",
    "KeyGenerationError",
    "StorageError",
]

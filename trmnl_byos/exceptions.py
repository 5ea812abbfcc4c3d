"""
Application exceptions.

Each exception maps to one HTTP status in `main.register_exception_handlers`:

    ByosError (base)
    ├── InvalidContentTypeError  -> 400
    ├── InvalidScreenIdError     -> 400
    ├── ImageNotFoundError       -> 404
    └── ImageStorageError        -> 500
"""

from typing import Any, Dict, Optional


class ByosError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Client-safe error description.
        context: Extra debug info; logged, never returned to the client.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidContentTypeError(ByosError):
    """Raised when an upload declares a Content-Type outside image/*."""

    def __init__(self, content_type: Optional[str] = None):
        super().__init__(
            message="Content-Type must be image/*",
            context={"content_type": content_type},
        )
        self.content_type = content_type


class InvalidScreenIdError(ByosError):
    """Raised when a screen id cannot be used as a file name."""

    def __init__(self, screen_id: str):
        super().__init__(
            message=f"Invalid screen id '{screen_id}'",
            context={"screen_id": screen_id},
        )
        self.screen_id = screen_id


class ImageNotFoundError(ByosError):
    """Raised when no stored image exists for a screen."""

    def __init__(self, screen_id: str, extension: Optional[str] = None):
        name = f"{screen_id}.{extension}" if extension else screen_id
        super().__init__(
            message=f"No image stored for '{name}'",
            context={"screen_id": screen_id, "extension": extension},
        )
        self.screen_id = screen_id
        self.extension = extension


class ImageStorageError(ByosError):
    """Raised when reading, writing or deleting an image file fails."""

    def __init__(
        self,
        message: str = "Image storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

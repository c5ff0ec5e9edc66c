"""Error types raised by the catalog services."""

from __future__ import annotations

from enum import Enum


class ShopAppError(Exception):
    """Base class for catalog errors. ``str(error)`` is the client-facing message."""


class DataNotFoundError(ShopAppError):
    """A referenced category or product does not exist."""


class InvalidParamError(ShopAppError):
    """A business rule rejected the request, e.g. the image cap is reached."""


class ProductCacheError(ShopAppError):
    """The product listing cache could not be read or written."""


class UploadRejection(str, Enum):
    """Reasons an image upload batch is refused before anything is stored."""

    TOO_MANY_FILES = "too_many_files"
    FILE_TOO_LARGE = "file_too_large"
    NOT_AN_IMAGE = "not_an_image"


class UploadRejectedError(ShopAppError):
    """An upload batch violated the count, size or media type constraints."""

    def __init__(self, reason: UploadRejection, filename: str | None = None) -> None:
        self.reason = reason
        self.filename = filename
        detail = reason.value if filename is None else f"{reason.value}: {filename}"
        super().__init__(detail)

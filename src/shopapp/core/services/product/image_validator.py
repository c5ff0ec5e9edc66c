"""Upload-time checks on product image batches."""

from collections.abc import Sequence

from fastapi import UploadFile
from loguru import logger

from src.shopapp.core.errors import UploadRejectedError, UploadRejection
from src.shopapp.runtime.context import get_config


def is_image_content_type(content_type: str | None) -> bool:
    return content_type is not None and content_type.lower().startswith("image/")


def upload_size(upload: UploadFile) -> int:
    """Size of an uploaded file in bytes, measured when the client did not send it."""
    if upload.size is not None:
        return upload.size
    position = upload.file.tell()
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(position)
    return size


class ImageUploadValidator:
    """Validate a whole upload batch before any file is stored.

    The batch is rejected as a unit: either every file passes and the
    non-empty ones are returned, or ``UploadRejectedError`` is raised.
    """

    def __init__(
        self,
        max_files: int | None = None,
        max_file_size_bytes: int | None = None,
    ) -> None:
        uploads = get_config().uploads
        self.max_files = max_files if max_files is not None else uploads.max_files_per_upload
        self.max_file_size_bytes = (
            max_file_size_bytes
            if max_file_size_bytes is not None
            else uploads.max_file_size_bytes
        )

    def validate(self, files: Sequence[UploadFile]) -> list[UploadFile]:
        if len(files) > self.max_files:
            logger.info("Rejected upload of {} files (max {})", len(files), self.max_files)
            raise UploadRejectedError(UploadRejection.TOO_MANY_FILES)

        accepted = []
        for upload in files:
            size = upload_size(upload)
            if size == 0:
                continue
            if size > self.max_file_size_bytes:
                logger.info("Rejected {}: {} bytes", upload.filename, size)
                raise UploadRejectedError(UploadRejection.FILE_TOO_LARGE, upload.filename)
            if not is_image_content_type(upload.content_type):
                logger.info("Rejected {}: content type {}", upload.filename, upload.content_type)
                raise UploadRejectedError(UploadRejection.NOT_AN_IMAGE, upload.filename)
            accepted.append(upload)
        return accepted

"""Local disk storage for product images."""

import shutil
import uuid
from pathlib import Path

from fastapi import UploadFile
from loguru import logger

from src.shopapp.core.services.product.image_validator import is_image_content_type
from src.shopapp.runtime.context import get_config

PLACEHOLDER_IMAGE = Path(__file__).parent / "static" / "notfound.jpeg"


class LocalFileStorage:
    """Store uploaded images in a directory and resolve them back by name."""

    def __init__(
        self,
        directory: Path | str | None = None,
        fallback_image: str | None = None,
    ) -> None:
        uploads = get_config().uploads
        self._directory = Path(directory if directory is not None else uploads.directory)
        self._fallback_image = fallback_image or uploads.fallback_image

    @property
    def directory(self) -> Path:
        return self._directory

    def new_file_name(self, upload: UploadFile) -> str:
        """Generate the stored name ``<uuid>_<original filename>`` for an upload.

        Raises:
            OSError: If the declared content type is not an image.
        """
        if not upload.filename or not is_image_content_type(upload.content_type):
            raise OSError("Invalid image format")
        return f"{uuid.uuid4().hex}_{Path(upload.filename).name}"

    def store_file(self, upload: UploadFile, name: str | None = None) -> str:
        """Persist the upload and return its stored name.

        A name from ``new_file_name`` can be passed in when the caller needs
        it before the bytes are written; otherwise one is generated.

        Raises:
            OSError: If the declared content type is not an image.
        """
        unique_name = name or self.new_file_name(upload)

        self._directory.mkdir(parents=True, exist_ok=True)
        destination = self._directory / unique_name
        upload.file.seek(0)
        with open(destination, "wb") as f:
            f.write(upload.file.read())

        logger.info("Stored image {} as {}", upload.filename, unique_name)
        return unique_name

    def delete_file(self, name: str) -> None:
        """Remove a stored image; a missing file is not an error."""
        root = self._directory.resolve()
        target = (root / name).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"Invalid image name: {name}")
        target.unlink(missing_ok=True)
        logger.info("Removed stored image {}", name)

    def install_fallback_image(self, source: Path = PLACEHOLDER_IMAGE) -> Path:
        """Copy the placeholder image into the directory unless one is there."""
        self._directory.mkdir(parents=True, exist_ok=True)
        destination = self._directory / self._fallback_image
        if not destination.exists():
            shutil.copyfile(source, destination)
            logger.info("Installed placeholder image {}", destination)
        return destination

    def load_image(self, name: str) -> Path:
        """Resolve a stored image, falling back to the placeholder image.

        Raises:
            FileNotFoundError: If the name escapes the storage directory or
                neither the image nor the placeholder exists.
        """
        root = self._directory.resolve()
        candidate = (root / name).resolve()
        if not candidate.is_relative_to(root):
            raise FileNotFoundError(f"Invalid image name: {name}")

        if candidate.is_file():
            return candidate

        fallback = root / self._fallback_image
        if fallback.is_file():
            logger.debug("Image {} not found, serving {}", name, self._fallback_image)
            return fallback

        raise FileNotFoundError(f"Image not found: {name}")

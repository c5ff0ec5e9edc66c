"""Product controller: input validation and outcome-to-status mapping."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from fastapi import UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import FileResponse, JSONResponse, Response
from loguru import logger
from pydantic import ValidationError

from src.shopapp.core.errors import (
    InvalidParamError,
    UploadRejectedError,
    UploadRejection,
)
from src.shopapp.core.models.product import (
    PageRequest,
    ProductDTO,
    ProductImageDTO,
    ProductListResponse,
    ProductResponse,
)
from src.shopapp.core.services import (
    ImageUploadValidator,
    LocalFileStorage,
    Localizer,
    MessageKeys,
    ProductService,
)
from src.shopapp.core.storage import ProductListCache
from src.shopapp.entities.catalog import MAXIMUM_IMAGES_PER_PRODUCT

# Upload rejections are answered with their own status and localized message
UPLOAD_REJECTION_RESPONSES: dict[UploadRejection, tuple[HTTPStatus, str]] = {
    UploadRejection.TOO_MANY_FILES: (
        HTTPStatus.BAD_REQUEST,
        MessageKeys.UPLOAD_IMAGES_MAX_5,
    ),
    UploadRejection.FILE_TOO_LARGE: (
        HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
        MessageKeys.UPLOAD_IMAGES_FILE_LARGE,
    ),
    UploadRejection.NOT_AN_IMAGE: (
        HTTPStatus.UNSUPPORTED_MEDIA_TYPE,
        MessageKeys.UPLOAD_IMAGES_FILE_MUST_BE_IMAGE,
    ),
}


def _ok(body: Any) -> JSONResponse:
    return JSONResponse(status_code=HTTPStatus.OK, content=jsonable_encoder(body))


def _bad_request(error: Exception) -> JSONResponse:
    logger.warning("Product request failed: {}: {}", type(error).__name__, error)
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=str(error))


def _validation_failed(error: ValidationError) -> JSONResponse:
    messages = [detail["msg"] for detail in error.errors()]
    logger.info("Product payload rejected: {}", messages)
    return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content=messages)


def parse_ids(ids: str) -> list[int]:
    """Parse a comma separated id list such as ``"1,2,3"``."""
    return [int(part) for part in (piece.strip() for piece in ids.split(",")) if part]


class ProductController:
    """HTTP-facing orchestration of the product catalog.

    Every method returns a finished response. Errors raised by the service
    are reported as 400 with the error message, except for the upload
    rejections and image lookups, which have their own statuses. Listing
    cache errors are not caught here.
    """

    def __init__(
        self,
        product_service: ProductService,
        product_cache: ProductListCache,
        localizer: Localizer,
        file_storage: LocalFileStorage,
        image_validator: ImageUploadValidator,
    ) -> None:
        self._products = product_service
        self._cache = product_cache
        self._localizer = localizer
        self._files = file_storage
        self._validator = image_validator

    def create_product(self, payload: Any) -> Response:
        try:
            dto = ProductDTO.model_validate(payload)
        except ValidationError as e:
            return _validation_failed(e)

        try:
            return _ok(self._products.create_product(dto))
        except Exception as e:
            return _bad_request(e)

    def get_product_by_id(self, product_id: int) -> Response:
        try:
            product = self._products.get_product_by_id(product_id)
            return _ok(ProductResponse.from_product(product))
        except Exception as e:
            return _bad_request(e)

    def get_products_by_ids(self, ids: str) -> Response:
        try:
            return _ok(self._products.find_products_by_ids(parse_ids(ids)))
        except Exception as e:
            return _bad_request(e)

    def update_product(self, product_id: int, payload: Any) -> Response:
        try:
            dto = ProductDTO.model_validate(payload)
        except ValidationError as e:
            return _validation_failed(e)

        try:
            return _ok(self._products.update_product(product_id, dto))
        except Exception as e:
            return _bad_request(e)

    def delete_product(self, product_id: int) -> Response:
        try:
            self._products.delete_product(product_id)
        except Exception as e:
            return _bad_request(e)
        return _ok(f"Product with id = {product_id} deleted successfully")

    def upload_images(
        self,
        product_id: int,
        files: list[UploadFile] | None,
        accept_language: str | None = None,
    ) -> Response:
        """Store a batch of images and attach them to the product.

        The whole batch is validated before the first file is written, and
        the image records are saved together. When saving fails the files
        written for this batch are removed again.
        """
        try:
            product = self._products.get_product_by_id(product_id)

            try:
                accepted = self._validator.validate(files or [])
            except UploadRejectedError as e:
                status, message_key = UPLOAD_REJECTION_RESPONSES[e.reason]
                language = self._localizer.resolve_language(accept_language)
                return JSONResponse(
                    status_code=status,
                    content=self._localizer.get_localized_message(message_key, language),
                )

            if len(product.product_images) + len(accepted) > MAXIMUM_IMAGES_PER_PRODUCT:
                raise InvalidParamError(
                    f"Number of images must be <= {MAXIMUM_IMAGES_PER_PRODUCT}"
                )

            names = [self._files.new_file_name(upload) for upload in accepted]
            dtos = [ProductImageDTO(image_url=name) for name in names]

            stored: list[str] = []
            try:
                for upload, name in zip(accepted, names):
                    stored.append(self._files.store_file(upload, name))
                images = self._products.create_product_images(product.id, dtos)
            except Exception:
                for name in stored:
                    self._files.delete_file(name)
                raise
            return _ok(images)
        except ValidationError as e:
            return _validation_failed(e)
        except Exception as e:
            return _bad_request(e)

    def view_image(self, image_name: str) -> Response:
        try:
            path = self._files.load_image(image_name)
        except (OSError, ValueError) as e:
            logger.info("Image {} could not be resolved: {}", image_name, e)
            return Response(status_code=HTTPStatus.NOT_FOUND)
        return FileResponse(path, media_type="image/jpeg")

    def get_products(
        self,
        keyword: str | None,
        category_id: int | None,
        page: int,
        limit: int,
    ) -> Response:
        """Cache-aside listing: a cache hit never reaches the product store."""
        page_request = PageRequest(page=page, size=limit)

        products = self._cache.get_all_products(keyword, category_id, page_request)
        if products is None:
            result = self._products.get_all_products(keyword, category_id, page_request)
            total_pages = result.total_pages
            products = [
                product.model_copy(update={"total_pages": total_pages})
                for product in result.content
            ]
            self._cache.save_all_products(products, keyword, category_id, page_request)
        else:
            total_pages = products[0].total_pages if products else 0

        return _ok(ProductListResponse(products=products, total_pages=total_pages))

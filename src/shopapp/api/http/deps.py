"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.shopapp.api.http.app_data import ApplicationDependencies
from src.shopapp.api.http.controllers.product import ProductController
from src.shopapp.core.services import (
    ImageUploadValidator,
    LocalFileStorage,
    Localizer,
    ProductEventPublisher,
    ProductService,
)
from src.shopapp.core.storage import ProductListCache


def _app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request scoped database session."""
    app_deps = _app_dependencies(request)
    with app_deps.database_service.session_scope() as session:
        yield session


def get_product_cache(request: Request) -> ProductListCache:
    """Get the product listing cache."""
    return _app_dependencies(request).product_cache


def get_event_publisher(request: Request) -> ProductEventPublisher:
    """Get the product event publisher."""
    return _app_dependencies(request).event_publisher


def get_localizer(request: Request) -> Localizer:
    """Get the message localizer."""
    return _app_dependencies(request).localizer


def get_file_storage(request: Request) -> LocalFileStorage:
    """Get the image file storage."""
    return _app_dependencies(request).file_storage


def get_image_validator(request: Request) -> ImageUploadValidator:
    """Get the upload batch validator."""
    return _app_dependencies(request).image_validator


def get_product_service(
    db_session: Session = Depends(get_db_session),
    event_publisher: ProductEventPublisher = Depends(get_event_publisher),
) -> ProductService:
    """Get a product service bound to the request session."""
    return ProductService.from_session(db_session, event_publisher)


def get_product_controller(
    product_service: ProductService = Depends(get_product_service),
    product_cache: ProductListCache = Depends(get_product_cache),
    localizer: Localizer = Depends(get_localizer),
    file_storage: LocalFileStorage = Depends(get_file_storage),
    image_validator: ImageUploadValidator = Depends(get_image_validator),
) -> ProductController:
    return ProductController(
        product_service=product_service,
        product_cache=product_cache,
        localizer=localizer,
        file_storage=file_storage,
        image_validator=image_validator,
    )

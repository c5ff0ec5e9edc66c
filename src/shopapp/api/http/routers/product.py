"""Product API router.

Route handlers only bind the request to the controller, which owns the
mapping from outcomes to status codes.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, File, Header, Query, UploadFile
from fastapi.responses import Response

from src.shopapp.api.http.controllers.product import ProductController
from src.shopapp.api.http.deps import get_product_controller

router = APIRouter(tags=["products"])


@router.get("/")
def get_products(
    keyword: str = Query(default=""),
    category_id: int = Query(default=0),
    page: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1),
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """List products page by page, served from the listing cache when warm."""
    return controller.get_products(keyword, category_id, page, limit)


@router.post("/")
def create_product(
    payload: Any = Body(...),
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Create a new product."""
    return controller.create_product(payload)


@router.get("/by-ids")
def get_products_by_ids(
    ids: str = Query(...),
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Get the products whose ids are listed, e.g. ``?ids=1,3,5``."""
    return controller.get_products_by_ids(ids)


@router.get("/images/{image_name}")
def view_image(
    image_name: str,
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Serve a stored product image, or the placeholder image."""
    return controller.view_image(image_name)


@router.post("/uploads/{product_id}")
def upload_images(
    product_id: int,
    files: list[UploadFile] = File(default=[]),
    accept_language: str | None = Header(default=None),
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Attach a batch of uploaded images to a product."""
    return controller.upload_images(product_id, files, accept_language)


@router.get("/{product_id}")
def get_product_by_id(
    product_id: int,
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Get a product and its images."""
    return controller.get_product_by_id(product_id)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    payload: Any = Body(...),
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Update a product."""
    return controller.update_product(product_id, payload)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    controller: ProductController = Depends(get_product_controller),
) -> Response:
    """Delete a product."""
    return controller.delete_product(product_id)

"""Seller dashboard routes: manage one's own products."""
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.product_schema import (
    InventoryStats,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from data.database.profile_model import UserProfile
from src.routes.dependencies import raise_for_result, require_seller
from src.services import product_service

router = APIRouter(prefix="/artisan/products", tags=["artisan"])


@router.get("", response_model=List[ProductResponse], summary="My products")
def get_my_products(profile: UserProfile = Depends(require_seller), db: Session = Depends(get_db)):
    return raise_for_result(product_service.get_artisan_products(db, profile.id))["products"]


@router.get("/inventory", response_model=InventoryStats, summary="Inventory counters")
def get_inventory(profile: UserProfile = Depends(require_seller), db: Session = Depends(get_db)):
    result = raise_for_result(product_service.get_artisan_products(db, profile.id))
    return product_service.get_inventory_stats(result["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product"
)
def create_product(
    product: ProductCreate,
    profile: UserProfile = Depends(require_seller),
    db: Session = Depends(get_db)
):
    result = raise_for_result(product_service.create_product(db, profile.id, product.model_dump()))
    return result["product"]


@router.post("/images", summary="Upload a product image")
async def upload_image(
    file: UploadFile = File(...),
    profile: UserProfile = Depends(require_seller)
):
    """
    Store an image and return its public URL.

    The URL is then sent as ``image_url`` when creating or updating a product.
    """
    content = await file.read()
    result = raise_for_result(product_service.upload_product_image(
        profile.id, file.filename or "image.jpg", file.content_type, content
    ))
    return {"image_url": result["image_url"], "message": result["message"]}


@router.put("/{product_id}", response_model=ProductResponse, summary="Update a product")
def update_product(
    product_id: str,
    product_update: ProductUpdate,
    profile: UserProfile = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Update only the provided fields."""
    result = raise_for_result(product_service.update_product(
        db, product_id, profile.id, product_update.model_dump(exclude_unset=True)
    ))
    return result["product"]


@router.patch("/{product_id}", response_model=ProductResponse, summary="Partially update a product")
def patch_product(
    product_id: str,
    product_update: ProductUpdate,
    profile: UserProfile = Depends(require_seller),
    db: Session = Depends(get_db)
):
    """Partially update a product (same as PUT)."""
    return update_product(product_id, product_update, profile, db)


@router.delete("/{product_id}", summary="Delete a product")
def delete_product(
    product_id: str,
    profile: UserProfile = Depends(require_seller),
    db: Session = Depends(get_db)
):
    return raise_for_result(product_service.delete_product(db, product_id, profile.id))

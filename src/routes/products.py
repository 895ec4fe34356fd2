"""Public catalogue routes."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.product_schema import (
    CatalogueStats,
    ProductDetailResponse,
    ProductListResponse,
    ProductResponse,
)
from data.database.review_schema import ReviewListResponse, ReviewResponse, ReviewStats
from src.routes.dependencies import raise_for_result
from src.services import product_service, review_service

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductListResponse, summary="Browse the catalogue")
def list_products(
    db: Session = Depends(get_db),
    search: Optional[str] = Query(None, description="Search in title, description and category"),
    category: Optional[str] = Query(None, description="Filter by category"),
    price_range: Optional[str] = Query(None, description="under-25, 25-50, 50-100, over-100 or all"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price filter"),
    sort: str = Query("newest", description="newest, price_asc, price_desc or rating"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, description="Number of items per page")
):
    """
    Catalogue search with filters and pagination.

    Returns:
        Paginated list of products matching the criteria
    """
    result = raise_for_result(product_service.list_products(
        db,
        search=search,
        category=category,
        price_range=price_range,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        page=page,
        page_size=page_size
    ))
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in result["products"]],
        total=result["total"],
        page=result["page"],
        page_size=result["page_size"]
    )


@router.get("/categories", response_model=List[str], summary="Available categories")
def get_categories(db: Session = Depends(get_db)):
    return product_service.get_product_categories(db)


@router.get("/stats", response_model=CatalogueStats, summary="Catalogue totals")
def get_stats(db: Session = Depends(get_db)):
    return product_service.get_catalogue_stats(db)


@router.get("/{product_id}", response_model=ProductDetailResponse, summary="Product with its artisan")
def get_product(product_id: str, db: Session = Depends(get_db)):
    result = raise_for_result(product_service.get_product(db, product_id))
    return ProductDetailResponse.model_validate(result["product"])


@router.get("/{product_id}/reviews", response_model=ReviewListResponse, summary="Reviews for a product")
def get_reviews(
    product_id: str,
    db: Session = Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    order_by: str = Query("created_at", description="created_at or rating"),
    ascending: bool = Query(False)
):
    result = raise_for_result(review_service.get_product_reviews(
        db, product_id, limit=limit, offset=offset, order_by=order_by, ascending=ascending
    ))
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in result["reviews"]],
        total_count=result["total_count"],
        has_more=result["has_more"]
    )


@router.get("/{product_id}/reviews/stats", response_model=ReviewStats, summary="Rating distribution")
def get_review_stats(product_id: str, db: Session = Depends(get_db)):
    return raise_for_result(review_service.get_review_stats(db, product_id))["stats"]

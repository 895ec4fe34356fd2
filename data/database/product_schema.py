"""Product schemas for API validation."""
from pydantic import BaseModel, Field, computed_field
from typing import Optional, List
from datetime import datetime

from src.utils.stock import get_stock_status


class ProductBase(BaseModel):
    """Base product schema with common fields.

    Required-field and range checks live in the product service so that the
    API and the maintenance scripts report the same messages.
    """
    title: str = Field(..., max_length=255, description="Product title")
    description: str = Field(..., description="Product description")
    price: float = Field(..., description="Product price")
    category: str = Field(..., max_length=100, description="Product category")
    stock: int = Field(0, description="Available stock quantity")
    image_url: Optional[str] = Field(None, max_length=500, description="Public image URL")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(BaseModel):
    """Schema for updating a product (all fields optional)."""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = Field(None, max_length=100)
    stock: Optional[int] = None
    image_url: Optional[str] = Field(None, max_length=500)


class ArtisanSummary(BaseModel):
    """Seller details shown on a product page."""
    id: str
    full_name: Optional[str] = None
    shop_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    is_verified: bool = False

    class Config:
        from_attributes = True


class ProductResponse(BaseModel):
    """Schema for product response."""
    id: str
    artisan_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    price: float
    category: str
    stock: int
    image_url: Optional[str] = None
    rating: float
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def stock_status(self) -> str:
        return get_stock_status(self.stock)["label"]

    class Config:
        from_attributes = True


class ProductDetailResponse(ProductResponse):
    """Product with its seller."""
    artisan: Optional[ArtisanSummary] = None


class ProductListResponse(BaseModel):
    """Paginated catalogue page."""
    products: List[ProductResponse]
    total: int
    page: int
    page_size: int


class CatalogueStats(BaseModel):
    total_products: int
    categories_count: int
    average_price: int


class InventoryStats(BaseModel):
    total: int
    in_stock: int
    out_of_stock: int
    total_value: float

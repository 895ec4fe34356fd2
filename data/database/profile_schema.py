"""User profile schemas for API validation."""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProfileUpdate(BaseModel):
    """Editable profile fields; first/last name are merged into full_name."""
    first_name: Optional[str] = Field(None, max_length=120)
    last_name: Optional[str] = Field(None, max_length=120)
    bio: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    website_url: Optional[str] = Field(None, max_length=500)
    username: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=500)


class ArtisanApplication(BaseModel):
    """Request to turn a buyer account into a seller account."""
    shop_name: str = Field(..., max_length=255)
    shop_description: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)


class ShopUpdate(BaseModel):
    shop_name: Optional[str] = Field(None, max_length=255)
    shop_description: Optional[str] = None
    instagram_handle: Optional[str] = Field(None, max_length=100)
    facebook_url: Optional[str] = Field(None, max_length=500)


class ProfileStats(BaseModel):
    total_products: int


class ProfileResponse(BaseModel):
    """Profile as returned to clients, including the mapped convenience fields."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    username: Optional[str] = None
    role: str
    bio: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    website_url: Optional[str] = None
    shop_name: Optional[str] = None
    shop_description: Optional[str] = None
    instagram_handle: Optional[str] = None
    facebook_url: Optional[str] = None
    is_verified: bool = False
    is_artisan: bool = False
    artisan_verified: bool = False
    profile_image_url: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    stats: Optional[ProfileStats] = None
    product_count: Optional[int] = None

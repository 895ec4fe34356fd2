"""Review schemas for API validation."""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


class ReviewCreate(BaseModel):
    """Schema for submitting a review; the signed-in user is attached by the route."""
    product_id: str = Field(..., description="Reviewed product")
    reviewer_name: str = Field(..., max_length=255, description="Name shown with the review")
    rating: int = Field(..., description="Star rating from 1 to 5")
    comment: str = Field(..., description="Review text")


class ReviewResponse(BaseModel):
    """Schema for review response."""
    id: str
    product_id: str
    user_id: Optional[str] = None
    reviewer_name: str
    rating: int
    comment: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    total_count: int
    has_more: bool


class ReviewStats(BaseModel):
    total_reviews: int
    average_rating: float
    rating_distribution: Dict[int, int]
    rating_percentages: Dict[int, int]

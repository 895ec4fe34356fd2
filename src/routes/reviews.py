"""Review routes."""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.profile_model import UserProfile
from data.database.review_schema import ReviewCreate, ReviewResponse
from src.routes.dependencies import get_current_profile, get_optional_profile, raise_for_result
from src.services import review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Submit a review")
def create_review(
    review: ReviewCreate,
    profile: Optional[UserProfile] = Depends(get_optional_profile),
    db: Session = Depends(get_db)
):
    """
    Anyone may review; signed-in users are limited to one review per product.

    Returns:
        The created review and the product's new average rating
    """
    review_data = review.model_dump()
    review_data["user_id"] = profile.id if profile else None
    result = raise_for_result(review_service.create_product_review(db, review_data))
    return {
        "review": ReviewResponse.model_validate(result["review"]),
        "new_rating": result["new_rating"],
        "message": result["message"]
    }


@router.get("/mine/{product_id}", summary="My review for a product")
def get_my_review(
    product_id: str,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    result = review_service.get_user_review_for_product(db, profile.id, product_id)
    review = result["review"]
    return {
        "has_reviewed": result["has_reviewed"],
        "review": ReviewResponse.model_validate(review) if review else None
    }


@router.delete("/{review_id}", summary="Delete a review")
def delete_review(
    review_id: str,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Authors delete their own reviews; artisans moderate anonymous reviews of their products."""
    return raise_for_result(review_service.delete_review(db, review_id, profile.id))

"""Product reviews and the average rating they drive."""
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from data.database.product_model import Product
from data.database.review_model import ProductReview
from src.logging_config import get_logger
from src.utils.rating import (
    compute_average_rating,
    is_valid_rating,
    rating_distribution,
    rating_percentages,
)

logger = get_logger("reviews")

ORDERABLE_FIELDS = ("created_at", "rating")


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def create_product_review(db: Session, review_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a review and refresh the product's average rating.

    Args:
        db: Database session
        review_data: product_id, reviewer_name, rating (1-5), comment and
            an optional user_id for signed-in reviewers

    Returns:
        Dictionary with the created ``review`` or an ``error``
    """
    logger.info("Creating review for product %s", review_data.get("product_id"))

    if not review_data.get("product_id"):
        return {"success": False, "error": "Product ID is required"}
    if _is_blank(review_data.get("reviewer_name")):
        return {"success": False, "error": "Reviewer name is required"}
    if _is_blank(review_data.get("comment")):
        return {"success": False, "error": "Comment is required"}
    if not is_valid_rating(review_data.get("rating")):
        return {"success": False, "error": "Rating must be between 1 and 5"}

    product_id = review_data["product_id"]
    user_id = review_data.get("user_id") or None

    if db.query(Product.id).filter(Product.id == product_id).first() is None:
        return {"success": False, "error": "Product not found."}
    if user_id and get_user_review_for_product(db, user_id, product_id)["has_reviewed"]:
        return {"success": False, "error": "You have already reviewed this product."}

    review = ProductReview(
        product_id=product_id,
        user_id=user_id,
        reviewer_name=review_data["reviewer_name"].strip(),
        rating=int(review_data["rating"]),
        comment=review_data["comment"].strip(),
    )
    try:
        db.add(review)
        db.commit()
        db.refresh(review)
    except IntegrityError as e:
        db.rollback()
        logger.warning("Review rejected by constraints: %s", e)
        return {"success": False, "error": "You have already reviewed this product."}
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Create review error: %s", e)
        return {"success": False, "error": "Failed to submit review. Please try again."}

    rating_result = update_product_average_rating(db, product_id)
    logger.info("Review %s created", review.id)
    return {
        "success": True,
        "review": review,
        "new_rating": rating_result.get("new_rating"),
        "message": "Review submitted successfully!"
    }


def get_product_reviews(
    db: Session,
    product_id: str,
    limit: Optional[int] = 50,
    offset: int = 0,
    order_by: str = "created_at",
    ascending: bool = False
) -> Dict[str, Any]:
    """
    Page through a product's reviews.

    Returns:
        Dictionary with ``reviews``, ``total_count`` and ``has_more``
    """
    if order_by not in ORDERABLE_FIELDS:
        return {"success": False, "reviews": [], "total_count": 0, "error": f"Cannot order by '{order_by}'"}

    column = getattr(ProductReview, order_by)
    query = db.query(ProductReview).filter(ProductReview.product_id == product_id)
    try:
        total_count = query.count()
        query = query.order_by(column.asc() if ascending else column.desc(), ProductReview.id)
        if limit:
            query = query.offset(offset).limit(limit)
        reviews = query.all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Get reviews error: %s", e)
        return {"success": False, "reviews": [], "total_count": 0, "error": "Failed to load reviews"}

    return {
        "success": True,
        "reviews": reviews,
        "total_count": total_count,
        "has_more": total_count > offset + len(reviews)
    }


def update_product_average_rating(db: Session, product_id: str) -> Dict[str, Any]:
    """
    Recompute a product's rating as the mean of its reviews (one decimal).

    Returns:
        Dictionary with ``new_rating`` and ``review_count``
    """
    try:
        ratings = [
            row[0] for row in
            db.query(ProductReview.rating).filter(ProductReview.product_id == product_id).all()
        ]
        new_rating = compute_average_rating(ratings)
        updated = db.query(Product).filter(Product.id == product_id).update(
            {Product.rating: new_rating}, synchronize_session="fetch"
        )
        if not updated:
            db.rollback()
            return {"success": False, "error": "Product not found"}
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Update rating error: %s", e)
        return {"success": False, "error": "Failed to update product rating"}

    logger.info("Product %s rating updated to %s", product_id, new_rating)
    return {"success": True, "new_rating": new_rating, "review_count": len(ratings)}


def delete_review(db: Session, review_id: str, user_id: Optional[str]) -> Dict[str, Any]:
    """
    Delete a review and refresh the product rating.

    Reviews written while signed in can only be deleted by their author.
    Anonymous reviews can be removed by the artisan who owns the product.
    """
    review = db.query(ProductReview).filter(ProductReview.id == review_id).first()
    if not review:
        return {"success": False, "error": "Review not found", "not_found": True}
    if review.user_id:
        allowed = review.user_id == user_id
    else:
        allowed = user_id is not None and review.product.artisan_id == user_id
    if not allowed:
        return {
            "success": False,
            "error": "You do not have permission to delete this review",
            "forbidden": True
        }

    product_id = review.product_id
    try:
        db.delete(review)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete review error: %s", e)
        return {"success": False, "error": "Failed to delete review"}

    update_product_average_rating(db, product_id)
    return {"success": True, "message": "Review deleted successfully"}


def get_user_review_for_product(db: Session, user_id: Optional[str], product_id: str) -> Dict[str, Any]:
    """Whether ``user_id`` has already reviewed ``product_id``."""
    if not user_id:
        return {"success": True, "has_reviewed": False, "review": None}

    review = (
        db.query(ProductReview)
        .filter(ProductReview.user_id == user_id, ProductReview.product_id == product_id)
        .first()
    )
    return {"success": True, "has_reviewed": review is not None, "review": review}


def get_review_stats(db: Session, product_id: str) -> Dict[str, Any]:
    """Review count, average and per-star distribution for a product."""
    try:
        ratings = [
            row[0] for row in
            db.query(ProductReview.rating).filter(ProductReview.product_id == product_id).all()
        ]
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Get review stats error: %s", e)
        return {"success": False, "stats": None, "error": "Failed to calculate review statistics"}

    distribution = rating_distribution(ratings)
    return {
        "success": True,
        "stats": {
            "total_reviews": len(ratings),
            "average_rating": compute_average_rating(ratings),
            "rating_distribution": distribution,
            "rating_percentages": rating_percentages(distribution),
        }
    }

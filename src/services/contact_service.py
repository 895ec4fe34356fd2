"""Buyer-to-seller messaging and seller account removal."""
import re
from typing import Any, Dict, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from data.database.auth_models import AuthUser
from data.database.connection import utcnow
from data.database.contact_models import ContactMessage
from data.database.product_model import Product
from data.database.profile_model import UserProfile
from src.logging_config import get_logger
from src.utils.storage import (
    PRODUCTS_BUCKET,
    PROFILES_BUCKET,
    ImageStorage,
    StorageError,
    get_storage,
    object_path_from_url,
)

logger = get_logger("contact")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_MESSAGE_LENGTH = 2000
ACCOUNT_DELETION_PHRASE = "DELETE MY ACCOUNT"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def send_contact_message(db: Session, message_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate and store a message for a seller.

    Args:
        db: Database session
        message_data: seller_id, sender_name, sender_email, subject, message
            and an optional sender_id for signed-in senders

    Returns:
        Dictionary with ``message_id`` or an ``error``
    """
    if not message_data.get("seller_id"):
        return {"success": False, "error": "Seller ID is required"}
    if _is_blank(message_data.get("sender_name")):
        return {"success": False, "error": "Your name is required"}
    if _is_blank(message_data.get("sender_email")):
        return {"success": False, "error": "Your email is required"}
    if not is_valid_email(message_data["sender_email"].strip()):
        return {"success": False, "error": "Please enter a valid email address"}
    if _is_blank(message_data.get("subject")):
        return {"success": False, "error": "Subject is required"}
    if _is_blank(message_data.get("message")):
        return {"success": False, "error": "Message content is required"}
    if len(message_data["message"]) > MAX_MESSAGE_LENGTH:
        return {"success": False, "error": f"Message is too long (maximum {MAX_MESSAGE_LENGTH} characters)"}

    seller = db.query(UserProfile.id).filter(UserProfile.id == message_data["seller_id"]).first()
    if seller is None:
        return {"success": False, "error": "Seller not found. Please try again."}

    message = ContactMessage(
        seller_id=message_data["seller_id"],
        sender_id=message_data.get("sender_id") or None,
        sender_name=message_data["sender_name"].strip(),
        sender_email=message_data["sender_email"].strip().lower(),
        subject=message_data["subject"].strip(),
        message=message_data["message"].strip(),
        is_read=False,
    )
    try:
        db.add(message)
        db.commit()
        db.refresh(message)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Send contact message error: %s", e)
        return {"success": False, "error": "Failed to send message. Please try again."}

    logger.info("Contact message %s sent to seller %s", message.id, message.seller_id)
    return {
        "success": True,
        "message": "Thank you for reaching out! Your message has been sent successfully.",
        "message_id": message.id
    }


def get_seller_messages(db: Session, seller_id: str, unread_only: bool = False, limit: Optional[int] = None) -> Dict[str, Any]:
    """A seller's inbox, newest first."""
    query = (
        db.query(ContactMessage)
        .filter(ContactMessage.seller_id == seller_id)
        .order_by(ContactMessage.created_at.desc())
    )
    if unread_only:
        query = query.filter(ContactMessage.is_read.is_(False))
    if limit:
        query = query.limit(limit)

    try:
        messages = query.all()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Get seller messages error: %s", e)
        return {"success": False, "messages": [], "error": "Failed to load messages"}

    return {"success": True, "messages": messages, "count": len(messages)}


def _get_owned_message(db: Session, message_id: str, seller_id: str) -> Optional[ContactMessage]:
    return (
        db.query(ContactMessage)
        .filter(ContactMessage.id == message_id, ContactMessage.seller_id == seller_id)
        .first()
    )


def mark_message_as_read(db: Session, message_id: str, seller_id: str) -> Dict[str, Any]:
    message = _get_owned_message(db, message_id, seller_id)
    if not message:
        return {"success": False, "error": "Failed to mark message as read", "not_found": True}

    message.is_read = True
    message.read_at = utcnow()
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Mark as read error: %s", e)
        return {"success": False, "error": "Failed to mark message as read"}
    return {"success": True, "message": "Message marked as read"}


def get_unread_message_count(db: Session, seller_id: str) -> Dict[str, Any]:
    count = (
        db.query(func.count(ContactMessage.id))
        .filter(ContactMessage.seller_id == seller_id, ContactMessage.is_read.is_(False))
        .scalar()
    )
    return {"success": True, "count": count or 0}


def delete_message(db: Session, message_id: str, seller_id: str) -> Dict[str, Any]:
    message = _get_owned_message(db, message_id, seller_id)
    if not message:
        return {"success": False, "error": "Failed to delete message", "not_found": True}

    try:
        db.delete(message)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete message error: %s", e)
        return {"success": False, "error": "Failed to delete message"}
    return {"success": True, "message": "Message deleted successfully"}


def delete_seller_account(
    db: Session,
    user_id: str,
    confirmation_text: str,
    storage: Optional[ImageStorage] = None
) -> Dict[str, Any]:
    """
    Permanently delete an account and everything it owns.

    Requires ``confirmation_text`` to be exactly ``DELETE MY ACCOUNT``.
    Stored images are removed on a best-effort basis; the profile, its
    products (and their reviews), its messages and its credentials are
    deleted in one transaction.
    """
    if confirmation_text != ACCOUNT_DELETION_PHRASE:
        return {"success": False, "error": "Confirmation text does not match. Account deletion cancelled."}

    profile = db.query(UserProfile).filter(UserProfile.id == user_id).first()
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}

    storage = storage or get_storage()
    if profile.profile_image_url:
        try:
            storage.remove(PROFILES_BUCKET, [object_path_from_url(profile.profile_image_url, "avatars")])
        except StorageError as e:
            logger.warning("Could not delete profile image: %s", e)

    image_urls = [
        row[0] for row in
        db.query(Product.image_url).filter(Product.artisan_id == user_id, Product.image_url.isnot(None)).all()
    ]
    if image_urls:
        try:
            storage.remove(PRODUCTS_BUCKET, [object_path_from_url(url, PRODUCTS_BUCKET) for url in image_urls])
        except StorageError as e:
            logger.warning("Could not delete some product images: %s", e)

    try:
        db.query(Product).filter(Product.artisan_id == user_id).delete(synchronize_session=False)
        db.delete(profile)
        auth_user = db.query(AuthUser).filter(AuthUser.id == user_id).first()
        if auth_user:
            db.delete(auth_user)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete seller account error: %s", e)
        return {"success": False, "error": "Failed to delete account. Please try again or contact support."}

    logger.info("Account %s deleted", user_id)
    return {
        "success": True,
        "message": "Your account has been permanently deleted. We're sorry to see you go."
    }

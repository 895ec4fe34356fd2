"""User profiles, seller onboarding and avatars."""
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from data.database.auth_models import AuthUser
from data.database.product_model import Product
from data.database.profile_model import BUYER_ROLE, SELLER_ROLE, SELLER_ROLES, UserProfile
from src.config import settings
from src.logging_config import get_logger
from src.utils.storage import (
    PROFILES_BUCKET,
    ImageStorage,
    StorageError,
    build_object_name,
    get_storage,
    object_path_from_url,
    validate_image,
)

logger = get_logger("profiles")

AVATARS_FOLDER = "avatars"
PROFILE_DIRECT_FIELDS = ("bio", "location", "phone", "website_url", "username")
SHOP_FIELDS = ("shop_name", "shop_description", "instagram_handle", "facebook_url")
PUBLIC_FIELDS = (
    "id", "full_name", "username", "bio", "location", "profile_image_url", "role",
    "shop_name", "shop_description", "website_url", "instagram_handle", "facebook_url",
    "is_verified", "created_at",
)
PRIVATE_FIELDS = PUBLIC_FIELDS + ("email", "phone")


def split_full_name(full_name: Optional[str]):
    """``"Ana Maria Lopez"`` -> ``("Ana", "Maria Lopez")``."""
    parts = (full_name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def map_profile_fields(profile: Optional[UserProfile], fields=PRIVATE_FIELDS) -> Optional[Dict[str, Any]]:
    """Serialise a profile and add the convenience fields clients expect."""
    if profile is None:
        return None
    data = {field: getattr(profile, field) for field in fields}
    first_name, last_name = split_full_name(profile.full_name)
    data.update({
        "first_name": first_name,
        "last_name": last_name,
        "is_artisan": profile.role in SELLER_ROLES,
        "artisan_verified": bool(profile.is_verified),
        "avatar_url": profile.profile_image_url,
    })
    return data


def _get_profile(db: Session, user_id: str) -> Optional[UserProfile]:
    return db.query(UserProfile).filter(UserProfile.id == user_id).first()


def _commit_profile(db: Session, profile: UserProfile, message: str, error_message: str) -> Dict[str, Any]:
    try:
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("%s: %s", error_message, e)
        return {"success": False, "error": error_message}
    return {"success": True, "profile": map_profile_fields(profile), "message": message}


def derive_full_name(auth_user: AuthUser) -> str:
    """Name from sign-up metadata, falling back to the email's local part."""
    metadata = auth_user.user_metadata or {}
    full_name = (metadata.get("full_name") or "").strip()
    if not full_name and metadata.get("first_name"):
        full_name = f"{metadata['first_name']} {metadata.get('last_name') or ''}".strip()
    if not full_name:
        full_name = auth_user.email.split("@")[0]
    return full_name


def ensure_user_profile(db: Session, auth_user: AuthUser) -> Dict[str, Any]:
    """
    Return the profile for ``auth_user``, creating a buyer profile if missing.

    Returns:
        Dictionary with ``profile`` (the model instance) and ``was_created``
    """
    profile = _get_profile(db, auth_user.id)
    if profile:
        return {"success": True, "profile": profile, "was_created": False}

    profile = UserProfile(
        id=auth_user.id,
        email=auth_user.email,
        full_name=derive_full_name(auth_user),
        role=BUYER_ROLE,
        is_active=True,
        is_verified=False,
    )
    try:
        db.add(profile)
        db.commit()
        db.refresh(profile)
    except IntegrityError as e:
        db.rollback()
        logger.error("Error in ensure_user_profile: %s", e)
        return {
            "success": False,
            "profile": None,
            "error": "Profile already exists but query failed. Please try again.",
            "technical_error": str(e)
        }
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error in ensure_user_profile: %s", e)
        return {
            "success": False,
            "profile": None,
            "error": "Failed to ensure user profile",
            "technical_error": str(e)
        }

    logger.info("Profile created for %s", auth_user.email)
    return {
        "success": True,
        "profile": profile,
        "was_created": True,
        "message": "Profile created successfully"
    }


def update_user_profile(db: Session, user_id: str, profile_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Update basic profile information.

    ``first_name``/``last_name`` are merged with the stored full name, and
    ``avatar_url`` is stored as ``profile_image_url``.
    """
    logger.info("Updating profile for user %s", user_id)
    profile = _get_profile(db, user_id)
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}

    update_data = {}
    first_name = profile_data.get("first_name")
    last_name = profile_data.get("last_name")
    if first_name is not None or last_name is not None:
        current_first, current_last = split_full_name(profile.full_name)
        new_first = first_name if first_name is not None else current_first
        new_last = last_name if last_name is not None else current_last
        update_data["full_name"] = f"{new_first} {new_last}".strip()

    for field in PROFILE_DIRECT_FIELDS:
        if profile_data.get(field) is not None:
            update_data[field] = profile_data[field]

    if profile_data.get("avatar_url") is not None:
        update_data["profile_image_url"] = profile_data["avatar_url"]

    if not update_data:
        return {"success": False, "error": "No data provided to update"}

    for field, value in update_data.items():
        setattr(profile, field, value)
    return _commit_profile(db, profile, "Profile updated successfully!", "Failed to update profile. Please try again.")


def become_artisan(db: Session, user_id: str, artisan_data: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a buyer into an unverified seller with a named shop."""
    shop_name = artisan_data.get("shop_name")
    if not shop_name or not shop_name.strip():
        return {"success": False, "error": "Shop name is required to become an artisan"}

    profile = _get_profile(db, user_id)
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}

    profile.role = SELLER_ROLE
    profile.is_verified = False
    profile.shop_name = shop_name.strip()
    for field in ("shop_description", "bio", "location"):
        if artisan_data.get(field):
            setattr(profile, field, artisan_data[field])

    return _commit_profile(
        db, profile,
        "Congratulations! You are now an artisan. Your profile is pending verification.",
        "Failed to convert to artisan. Please try again."
    )


def update_shop_info(db: Session, user_id: str, shop_data: Dict[str, Any]) -> Dict[str, Any]:
    """Update shop fields; only sellers have a shop."""
    profile = _get_profile(db, user_id)
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}
    if profile.role not in SELLER_ROLES:
        return {"success": False, "error": "Only artisans can update shop information", "forbidden": True}

    changes = {field: shop_data[field] for field in SHOP_FIELDS if shop_data.get(field) is not None}
    if not changes:
        return {"success": False, "error": "No shop data provided to update"}

    for field, value in changes.items():
        setattr(profile, field, value)
    return _commit_profile(
        db, profile,
        "Shop information updated successfully!",
        "Failed to update shop information. Please try again."
    )


def upload_profile_image(
    db: Session,
    user_id: str,
    filename: str,
    content_type: Optional[str],
    content: bytes,
    storage: Optional[ImageStorage] = None
) -> Dict[str, Any]:
    """Validate and store an avatar, then point the profile at it."""
    error = validate_image(content_type, content, settings.max_profile_image_bytes)
    if error:
        return {"success": False, "error": error}

    profile = _get_profile(db, user_id)
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}

    storage = storage or get_storage()
    object_path = f"{AVATARS_FOLDER}/{build_object_name(user_id, filename)}"
    try:
        storage.upload(PROFILES_BUCKET, object_path, content, upsert=False)
    except StorageError as e:
        logger.error("Upload profile image error: %s", e)
        message = "Failed to upload image. Please try again."
        if "Bucket not found" in str(e):
            message = "Storage bucket not configured. Please contact support."
        return {"success": False, "error": message}

    public_url = storage.get_public_url(PROFILES_BUCKET, object_path)
    profile.profile_image_url = public_url
    result = _commit_profile(
        db, profile,
        "Profile image uploaded successfully!",
        "Failed to upload image. Please try again."
    )
    if result["success"]:
        result["image_url"] = public_url
    return result


def delete_profile_image(db: Session, user_id: str, storage: Optional[ImageStorage] = None) -> Dict[str, Any]:
    """Remove the stored avatar (best effort) and clear the profile URL."""
    profile = _get_profile(db, user_id)
    if not profile:
        return {"success": False, "error": "Profile not found", "not_found": True}

    if profile.profile_image_url:
        storage = storage or get_storage()
        try:
            storage.remove(PROFILES_BUCKET, [object_path_from_url(profile.profile_image_url, AVATARS_FOLDER)])
        except StorageError as e:
            logger.warning("Error deleting file from storage: %s", e)

    profile.profile_image_url = None
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Delete profile image error: %s", e)
        return {"success": False, "error": "Failed to delete profile image. Please try again."}
    return {"success": True, "message": "Profile image deleted successfully"}


def _count_products(db: Session, artisan_id: str) -> int:
    return db.query(func.count(Product.id)).filter(Product.artisan_id == artisan_id).scalar() or 0


def get_public_profile(db: Session, user_id: str) -> Dict[str, Any]:
    """Public view of an active profile; sellers include their product count."""
    profile = (
        db.query(UserProfile)
        .filter(UserProfile.id == user_id, UserProfile.is_active.is_(True))
        .first()
    )
    if not profile:
        return {"success": False, "error": "Profile not found or inactive", "not_found": True}

    mapped = map_profile_fields(profile, fields=PUBLIC_FIELDS)
    if profile.role in SELLER_ROLES:
        mapped["stats"] = {"total_products": _count_products(db, profile.id)}
    return {"success": True, "profile": mapped}


def list_sellers(db: Session) -> List[Dict[str, Any]]:
    """Active sellers, verified first then alphabetical, with product counts."""
    sellers = (
        db.query(UserProfile)
        .filter(UserProfile.role.in_(SELLER_ROLES), UserProfile.is_active.is_(True))
        .order_by(UserProfile.is_verified.desc(), UserProfile.full_name.asc())
        .all()
    )
    results = []
    for seller in sellers:
        mapped = map_profile_fields(seller, fields=PUBLIC_FIELDS)
        mapped["product_count"] = _count_products(db, seller.id)
        results.append(mapped)
    return results


def verify_artisan(db: Session, user_id: str) -> Dict[str, Any]:
    """Mark a seller as verified; buyers cannot be verified."""
    profile = _get_profile(db, user_id)
    if not profile or profile.role not in SELLER_ROLES:
        return {"success": False, "error": "Failed to verify artisan. Please try again.", "not_found": True}

    profile.is_verified = True
    return _commit_profile(db, profile, "Artisan verified successfully!", "Failed to verify artisan. Please try again.")

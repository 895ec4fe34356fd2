"""Shared route dependencies: authentication and result translation."""
import hmac
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.profile_model import SELLER_ROLES, UserProfile
from src.config import settings
from src.services import auth_service


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    Returns:
        The token, or None when the header is missing or malformed
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_optional_profile(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db)
) -> Optional[UserProfile]:
    """Profile of the signed-in user, or None for anonymous requests."""
    if not token:
        return None
    result = auth_service.get_current_user(db, token)
    return result["profile"] if result["success"] else None


def get_current_profile(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db)
) -> UserProfile:
    """Profile of the signed-in user; 401 when not signed in."""
    result = auth_service.get_current_user(db, token)
    if not result["success"] or result["profile"] is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return result["profile"]


def require_seller(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
    """Signed-in seller; 403 for buyers."""
    if profile.role not in SELLER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only artisans can manage products"
        )
    return profile


def require_admin(x_admin_token: Optional[str] = Header(None)) -> None:
    """Guard for maintenance endpoints; compares against ADMIN_TOKEN."""
    if not settings.admin_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured"
        )
    if not hmac.compare_digest((x_admin_token or "").encode(), settings.admin_token.encode()):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token"
        )


def raise_for_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn a failed service result into an HTTPException.

    Returns:
        The result unchanged when it succeeded
    """
    if result.get("success"):
        return result
    if result.get("not_found"):
        code = status.HTTP_404_NOT_FOUND
    elif result.get("forbidden"):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=code, detail=result.get("error", "Request failed"))

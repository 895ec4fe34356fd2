"""Account registration, password sign-in and bearer sessions."""
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from data.database.auth_models import AuthSession, AuthUser
from data.database.connection import utcnow
from src.config import settings
from src.logging_config import get_logger
from src.services.contact_service import is_valid_email
from src.services.profile_service import ensure_user_profile

logger = get_logger("auth")

MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 260_000
HASH_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``."""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), PBKDF2_ITERATIONS)
    return f"{HASH_ALGORITHM}${PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _normalise_email(email: str) -> str:
    return (email or "").strip().lower()


def sign_up(db: Session, first_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
    """
    Register a new account and create its buyer profile.

    Returns:
        Dictionary with ``user`` or an ``error``
    """
    email = _normalise_email(email)
    if not is_valid_email(email):
        return {"success": False, "error": "Please enter a valid email address."}
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        return {"success": False, "error": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."}
    if db.query(AuthUser.id).filter(AuthUser.email == email).first():
        return {
            "success": False,
            "error": "This email is already registered. Please use a different email or try signing in."
        }

    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    user = AuthUser(
        email=email,
        password_hash=hash_password(password),
        user_metadata={
            "first_name": first_name,
            "last_name": last_name,
            "full_name": f"{first_name} {last_name}".strip(),
        },
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        return {
            "success": False,
            "error": "This email is already registered. Please use a different email or try signing in."
        }
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Registration error: %s", e)
        return {"success": False, "error": "Registration failed. Please try again."}

    profile_result = ensure_user_profile(db, user)
    if not profile_result["success"]:
        logger.warning("Profile creation error for %s: %s", email, profile_result["error"])

    logger.info("Registered %s", email)
    return {"success": True, "user": user, "message": "Registration successful!"}


def sign_in(db: Session, email: str, password: str) -> Dict[str, Any]:
    """
    Check credentials and open a session.

    Returns:
        Dictionary with ``user``, ``session`` and ``profile``, or an ``error``
    """
    email = _normalise_email(email)
    user = db.query(AuthUser).filter(AuthUser.email == email).first()
    if not user or not verify_password(password or "", user.password_hash):
        logger.info("Failed sign-in for %s", email)
        return {
            "success": False,
            "error": "Invalid email or password. Please check your credentials and try again."
        }

    session = AuthSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=utcnow() + timedelta(hours=settings.session_ttl_hours),
    )
    try:
        db.add(session)
        db.commit()
        db.refresh(session)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Login error: %s", e)
        return {"success": False, "error": "Login failed. Please try again."}

    profile_result = ensure_user_profile(db, user)
    return {
        "success": True,
        "user": user,
        "session": session,
        "profile": profile_result.get("profile"),
        "message": "Login successful!"
    }


def sign_out(db: Session, token: str) -> Dict[str, Any]:
    """Revoke a session token; unknown tokens are treated as already signed out."""
    try:
        db.query(AuthSession).filter(AuthSession.token == token).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Logout error: %s", e)
        return {"success": False, "error": "Failed to logout. Please try again."}
    return {"success": True, "message": "Logout successful!"}


def get_session(db: Session, token: Optional[str]) -> Dict[str, Any]:
    """Look up a live session; expired sessions are deleted."""
    if not token:
        return {"success": False, "session": None}

    session = db.query(AuthSession).filter(AuthSession.token == token).first()
    if session is None:
        return {"success": False, "session": None}
    if _as_aware(session.expires_at) <= utcnow():
        db.delete(session)
        db.commit()
        return {"success": False, "session": None, "error": "Session expired"}
    return {"success": True, "session": session}


def get_current_user(db: Session, token: Optional[str]) -> Dict[str, Any]:
    """Resolve a bearer token to its user and profile."""
    session_result = get_session(db, token)
    if not session_result["success"]:
        return {"success": False, "user": None, "profile": None}

    user = session_result["session"].user
    profile_result = ensure_user_profile(db, user)
    return {"success": True, "user": user, "profile": profile_result.get("profile")}


def reset_password(db: Session, email: str) -> Dict[str, Any]:
    """
    Record a password-reset request.

    The response is the same whether or not the address is registered.
    """
    email = _normalise_email(email)
    if not is_valid_email(email):
        return {"success": False, "error": "Failed to send reset email. Please try again."}

    if db.query(AuthUser.id).filter(AuthUser.email == email).first():
        logger.info("Password reset requested for %s", email)
    else:
        logger.info("Password reset requested for unknown address")
    return {"success": True, "message": "Password reset email sent! Please check your inbox."}

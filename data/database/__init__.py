"""Database data layer package."""
from .connection import engine, SessionLocal, get_db, Base, init_db
from .auth_models import AuthUser, AuthSession
from .contact_models import ContactMessage
from .product_model import Product
from .profile_model import UserProfile
from .review_model import ProductReview

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "init_db",
    "AuthUser",
    "AuthSession",
    "ContactMessage",
    "Product",
    "UserProfile",
    "ProductReview",
]

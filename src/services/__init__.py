"""Marketplace services: each function maps one user action to database work."""
from . import auth_service, contact_service, product_service, profile_service, review_service

__all__ = [
    "auth_service",
    "contact_service",
    "product_service",
    "profile_service",
    "review_service"
]

"""User profile model (one row per authenticated user)."""
from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from data.database.connection import Base, utcnow

BUYER_ROLE = "buyer"
SELLER_ROLE = "seller"
# Older rows used "artisan" for sellers
SELLER_ROLES = (SELLER_ROLE, "artisan")


class UserProfile(Base):
    """Public and shop information for a buyer or seller."""

    __tablename__ = "user_profiles"

    # Mirrors AuthUser.id
    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255), nullable=True)
    username = Column(String(100), nullable=True)
    role = Column(String(20), default=BUYER_ROLE, nullable=False, index=True)

    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    website_url = Column(String(500), nullable=True)

    # Shop metadata (sellers)
    shop_name = Column(String(255), nullable=True)
    shop_description = Column(Text, nullable=True)
    instagram_handle = Column(String(100), nullable=True)
    facebook_url = Column(String(500), nullable=True)

    is_verified = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    profile_image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    products = relationship("Product", back_populates="artisan", passive_deletes=True)
    messages = relationship(
        "ContactMessage",
        back_populates="seller",
        cascade="all, delete-orphan",
        passive_deletes=True,
        foreign_keys="ContactMessage.seller_id",
    )

    @property
    def is_seller(self) -> bool:
        return self.role in SELLER_ROLES

    def __repr__(self):
        return f"<UserProfile(id={self.id}, email='{self.email}', role='{self.role}')>"

"""Product model for the Handcrafted Haven marketplace."""
from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from data.database.connection import Base, new_uuid, utcnow


class Product(Base):
    """A handmade item listed by an artisan."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=new_uuid)
    # Seeded catalogue rows have no owning artisan
    artisan_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=False, index=True)
    stock = Column(Integer, default=0, nullable=False)

    image_url = Column(String(500), nullable=True)
    # Mean of review ratings, one decimal place; maintained by the review service
    rating = Column(Numeric(3, 2), default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    artisan = relationship("UserProfile", back_populates="products")
    reviews = relationship("ProductReview", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Product(id={self.id}, title='{self.title}', category='{self.category}')>"

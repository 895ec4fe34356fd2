"""Buyer-to-seller contact messages."""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from data.database.connection import Base, new_uuid, utcnow


class ContactMessage(Base):
    """Message sent to a seller from the contact form."""

    __tablename__ = "contact_messages"

    id = Column(String(36), primary_key=True, default=new_uuid)
    seller_id = Column(String(36), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    sender_id = Column(String(36), nullable=True)  # Set when the sender is signed in
    sender_name = Column(String(255), nullable=False)
    sender_email = Column(String(255), nullable=False)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    seller = relationship("UserProfile", back_populates="messages", foreign_keys=[seller_id])

    def __repr__(self):
        return f"<ContactMessage(id={self.id}, seller_id={self.seller_id}, is_read={self.is_read})>"

"""Authentication models: credentials and bearer sessions."""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from data.database.connection import Base, new_uuid, utcnow


class AuthUser(Base):
    """Credentials for a registered account."""

    __tablename__ = "auth_users"

    id = Column(String(36), primary_key=True, default=new_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    user_metadata = Column(JSON, nullable=True)  # {"first_name", "last_name", "full_name"}
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<AuthUser(id={self.id}, email='{self.email}')>"


class AuthSession(Base):
    """Opaque bearer token issued at sign-in."""

    __tablename__ = "auth_sessions"

    token = Column(String(128), primary_key=True)
    user_id = Column(String(36), ForeignKey("auth_users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("AuthUser", back_populates="sessions")

    def __repr__(self):
        return f"<AuthSession(user_id={self.user_id}, expires_at={self.expires_at})>"

"""Contact message schemas for API validation."""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ContactMessageCreate(BaseModel):
    """Schema for the contact-seller form."""
    seller_id: str
    sender_name: str = Field(..., max_length=255)
    sender_email: str = Field(..., max_length=255)
    subject: str = Field(..., max_length=255)
    message: str


class ContactMessageResponse(BaseModel):
    id: str
    seller_id: str
    sender_id: Optional[str] = None
    sender_name: str
    sender_email: str
    subject: str
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AccountDeletionRequest(BaseModel):
    confirmation_text: str = Field(..., description="Must be exactly 'DELETE MY ACCOUNT'")

"""Authentication schemas for API validation."""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class SignUpRequest(BaseModel):
    first_name: str = Field(..., max_length=120)
    last_name: str = Field("", max_length=120)
    email: str = Field(..., max_length=255)
    password: str


class SignInRequest(BaseModel):
    email: str = Field(..., max_length=255)
    password: str


class PasswordResetRequest(BaseModel):
    email: str = Field(..., max_length=255)


class AuthUserResponse(BaseModel):
    id: str
    email: str
    user_metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    """Bearer token plus the signed-in user."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: AuthUserResponse

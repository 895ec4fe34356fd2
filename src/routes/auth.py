"""Authentication routes."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from data.database.auth_schema import (
    AuthUserResponse,
    PasswordResetRequest,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)
from data.database.connection import get_db
from src.routes.dependencies import get_bearer_token, raise_for_result
from src.services import auth_service
from src.services.profile_service import map_profile_fields

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sign-up",
    response_model=AuthUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account"
)
def sign_up(request: SignUpRequest, db: Session = Depends(get_db)):
    """Register with email and password; a buyer profile is created alongside."""
    result = raise_for_result(auth_service.sign_up(
        db,
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password
    ))
    return result["user"]


@router.post("/sign-in", response_model=SessionResponse, summary="Sign in with email and password")
def sign_in(request: SignInRequest, db: Session = Depends(get_db)):
    """Exchange credentials for a bearer token."""
    result = auth_service.sign_in(db, request.email, request.password)
    if not result["success"]:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result["error"])

    session = result["session"]
    return SessionResponse(
        access_token=session.token,
        expires_at=session.expires_at,
        user=AuthUserResponse.model_validate(result["user"])
    )


@router.post("/sign-out", summary="Revoke the current token")
def sign_out(token: Optional[str] = Depends(get_bearer_token), db: Session = Depends(get_db)):
    if not token:
        return {"success": True, "message": "Logout successful!"}
    return raise_for_result(auth_service.sign_out(db, token))


@router.get("/session", summary="Inspect the current session")
def get_session(token: Optional[str] = Depends(get_bearer_token), db: Session = Depends(get_db)):
    """Returns ``session: null`` for anonymous or expired tokens."""
    result = auth_service.get_session(db, token)
    session = result["session"]
    if session is None:
        return {"session": None}
    return {
        "session": {
            "user_id": session.user_id,
            "created_at": session.created_at,
            "expires_at": session.expires_at
        }
    }


@router.get("/me", summary="Current user and profile")
def get_me(token: Optional[str] = Depends(get_bearer_token), db: Session = Depends(get_db)):
    result = auth_service.get_current_user(db, token)
    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return {
        "user": AuthUserResponse.model_validate(result["user"]),
        "profile": map_profile_fields(result["profile"])
    }


@router.post("/reset-password", summary="Request a password reset")
def reset_password(request: PasswordResetRequest, db: Session = Depends(get_db)):
    return raise_for_result(auth_service.reset_password(db, request.email))

"""Contact-the-seller messages and account removal."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.contact_schema import (
    AccountDeletionRequest,
    ContactMessageCreate,
    ContactMessageResponse,
)
from data.database.profile_model import UserProfile
from src.routes.dependencies import get_current_profile, get_optional_profile, raise_for_result
from src.services import contact_service

router = APIRouter(prefix="/messages", tags=["messages"])
account_router = APIRouter(prefix="/account", tags=["account"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Contact a seller")
def send_message(
    message: ContactMessageCreate,
    profile: Optional[UserProfile] = Depends(get_optional_profile),
    db: Session = Depends(get_db)
):
    message_data = message.model_dump()
    message_data["sender_id"] = profile.id if profile else None
    result = raise_for_result(contact_service.send_contact_message(db, message_data))
    return {"message_id": result["message_id"], "message": result["message"]}


@router.get("", response_model=List[ContactMessageResponse], summary="My inbox")
def get_messages(
    unread_only: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1, le=500),
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    result = raise_for_result(contact_service.get_seller_messages(
        db, profile.id, unread_only=unread_only, limit=limit
    ))
    return result["messages"]


@router.get("/unread-count", summary="Number of unread messages")
def get_unread_count(profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    return {"count": contact_service.get_unread_message_count(db, profile.id)["count"]}


@router.post("/{message_id}/read", summary="Mark a message as read")
def mark_as_read(
    message_id: str,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    return raise_for_result(contact_service.mark_message_as_read(db, message_id, profile.id))


@router.delete("/{message_id}", summary="Delete a message")
def delete_message(
    message_id: str,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    return raise_for_result(contact_service.delete_message(db, message_id, profile.id))


@account_router.delete("", summary="Permanently delete my account")
def delete_account(
    request: AccountDeletionRequest,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    """Requires ``confirmation_text`` to be exactly ``DELETE MY ACCOUNT``."""
    return raise_for_result(contact_service.delete_seller_account(db, profile.id, request.confirmation_text))

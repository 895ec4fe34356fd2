"""Profile routes: own profile, seller onboarding, public pages."""
from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.profile_model import UserProfile
from data.database.profile_schema import (
    ArtisanApplication,
    ProfileResponse,
    ProfileUpdate,
    ShopUpdate,
)
from src.routes.dependencies import get_current_profile, raise_for_result
from src.services import profile_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse, summary="My profile")
def get_my_profile(profile: UserProfile = Depends(get_current_profile)):
    return profile_service.map_profile_fields(profile)


@router.put("/me", response_model=ProfileResponse, summary="Update my profile")
def update_my_profile(
    profile_update: ProfileUpdate,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    result = raise_for_result(profile_service.update_user_profile(
        db, profile.id, profile_update.model_dump(exclude_unset=True)
    ))
    return result["profile"]


@router.post("/me/become-artisan", response_model=ProfileResponse, summary="Open a shop")
def become_artisan(
    application: ArtisanApplication,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    result = raise_for_result(profile_service.become_artisan(db, profile.id, application.model_dump()))
    return result["profile"]


@router.put("/me/shop", response_model=ProfileResponse, summary="Update shop information")
def update_shop(
    shop_update: ShopUpdate,
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    result = raise_for_result(profile_service.update_shop_info(
        db, profile.id, shop_update.model_dump(exclude_unset=True)
    ))
    return result["profile"]


@router.post("/me/avatar", summary="Upload a profile image")
async def upload_avatar(
    file: UploadFile = File(...),
    profile: UserProfile = Depends(get_current_profile),
    db: Session = Depends(get_db)
):
    content = await file.read()
    result = raise_for_result(profile_service.upload_profile_image(
        db, profile.id, file.filename or "avatar.jpg", file.content_type, content
    ))
    return {"image_url": result["image_url"], "message": result["message"]}


@router.delete("/me/avatar", summary="Remove the profile image")
def delete_avatar(profile: UserProfile = Depends(get_current_profile), db: Session = Depends(get_db)):
    return raise_for_result(profile_service.delete_profile_image(db, profile.id))


@router.get("/sellers", response_model=List[ProfileResponse], summary="Browse artisans")
def list_sellers(db: Session = Depends(get_db)):
    return profile_service.list_sellers(db)


@router.get("/{user_id}", response_model=ProfileResponse, summary="Public profile")
def get_public_profile(user_id: str, db: Session = Depends(get_db)):
    return raise_for_result(profile_service.get_public_profile(db, user_id))["profile"]

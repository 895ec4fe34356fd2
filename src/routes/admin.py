"""Admin routes for artisan moderation."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from data.database.connection import get_db
from data.database.profile_schema import ProfileResponse
from src.routes.dependencies import raise_for_result, require_admin
from src.services import profile_service

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post(
    "/artisans/{user_id}/verify",
    response_model=ProfileResponse,
    summary="Verify an artisan",
    description="Mark a seller profile as verified. Requires the X-Admin-Token header."
)
def verify_artisan(user_id: str, db: Session = Depends(get_db)):
    """Verify a seller; buyers and unknown ids give 404."""
    result = raise_for_result(profile_service.verify_artisan(db, user_id))
    return result["profile"]

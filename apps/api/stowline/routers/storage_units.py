"""Public storage availability."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from stowline.core.deps import get_db
from stowline.schemas.storage import AvailableCountResponse
from stowline.services import storage_unit_service

router = APIRouter()


@router.get("/available-count", response_model=AvailableCountResponse)
def get_available_count(db: Session = Depends(get_db)):
    """Units that can still be booked: empty minus already reserved."""
    return AvailableCountResponse(available_count=storage_unit_service.get_available_count(db))

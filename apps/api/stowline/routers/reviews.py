"""Public reviews route."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from stowline.core.deps import get_db
from stowline.schemas.review import ReviewsResponse
from stowline.services import review_service

router = APIRouter()


@router.get("", response_model=ReviewsResponse)
async def get_reviews(response: Response, db: Session = Depends(get_db)):
    """Reviews from the database, the Places API, or the static fallback list."""
    result = await review_service.get_reviews(db)
    response.headers["Cache-Control"] = result.cache_control
    return ReviewsResponse(reviews=result.reviews, source=result.source)

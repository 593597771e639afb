"""Customer reviews with a three-tier fallback: database → Places API → static list."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from sqlalchemy.orm import Session

from stowline.core.config import settings
from stowline.db.enums import ReviewSource
from stowline.db.models import GoogleReview

logger = logging.getLogger(__name__)

LIVE_CACHE_CONTROL = "public, s-maxage=86400, stale-while-revalidate=43200"
FALLBACK_CACHE_CONTROL = "public, s-maxage=3600"

FALLBACK_REVIEWS: tuple[dict[str, Any], ...] = (
    {
        "author_name": "Sarah M.",
        "rating": 5,
        "text": "The crew showed up on time, wrapped everything carefully and had our unit loaded in under an hour. Getting items back was just as easy.",
        "relative_time_description": "2 months ago",
        "profile_photo_url": None,
    },
    {
        "author_name": "David L.",
        "rating": 5,
        "text": "Way cheaper than renting a truck and a unit across town. Booking online took five minutes.",
        "relative_time_description": "3 months ago",
        "profile_photo_url": None,
    },
    {
        "author_name": "Priya K.",
        "rating": 5,
        "text": "We stored furniture during a remodel. Clear pricing, friendly movers and the text updates were great.",
        "relative_time_description": "4 months ago",
        "profile_photo_url": None,
    },
    {
        "author_name": "Marcus T.",
        "rating": 4,
        "text": "Smooth pickup and delivery. Had to reschedule once and support handled it quickly.",
        "relative_time_description": "5 months ago",
        "profile_photo_url": None,
    },
)


@dataclass
class ReviewsResult:
    reviews: list[dict[str, Any]]
    source: ReviewSource

    @property
    def cache_control(self) -> str:
        if self.source == ReviewSource.FALLBACK:
            return FALLBACK_CACHE_CONTROL
        return LIVE_CACHE_CONTROL


def _serialize(review: GoogleReview) -> dict[str, Any]:
    return {
        "author_name": review.author_name,
        "rating": review.rating,
        "text": review.text,
        "relative_time_description": review.relative_time_description,
        "profile_photo_url": review.profile_photo_url,
    }


def get_database_reviews(db: Session, limit: int) -> list[dict[str, Any]]:
    rows = (
        db.query(GoogleReview)
        .order_by(GoogleReview.review_time.desc(), GoogleReview.created_at.desc())
        .limit(limit)
        .all()
    )
    return [_serialize(r) for r in rows]


async def fetch_places_reviews() -> list[dict[str, Any]]:
    """
    Fetch reviews straight from the Places details API.

    Returns an empty list when not configured or on any failure.
    """
    if not (settings.GOOGLE_PLACES_API_KEY and settings.GOOGLE_PLACE_ID):
        return []

    params = {
        "place_id": settings.GOOGLE_PLACE_ID,
        "fields": "reviews",
        "key": settings.GOOGLE_PLACES_API_KEY,
    }
    try:
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            response = await client.get(settings.GOOGLE_PLACES_API_URL, params=params)
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Places reviews fetch failed: %s", e)
        return []

    if body.get("status") not in (None, "OK"):
        logger.warning("Places API returned status %s", body.get("status"))
        return []

    reviews = body.get("result", {}).get("reviews") or []
    return [
        {
            "author_name": r.get("author_name", ""),
            "rating": r.get("rating", 0),
            "text": r.get("text", ""),
            "relative_time_description": r.get("relative_time_description"),
            "profile_photo_url": r.get("profile_photo_url"),
        }
        for r in reviews
    ]


async def get_reviews(db: Session, limit: int | None = None) -> ReviewsResult:
    limit = limit or settings.REVIEWS_LIMIT

    stored = get_database_reviews(db, limit)
    if stored:
        return ReviewsResult(reviews=stored, source=ReviewSource.DATABASE)

    live = await fetch_places_reviews()
    if live:
        return ReviewsResult(reviews=live[:limit], source=ReviewSource.GOOGLE)

    return ReviewsResult(
        reviews=[dict(r) for r in FALLBACK_REVIEWS],
        source=ReviewSource.FALLBACK,
    )

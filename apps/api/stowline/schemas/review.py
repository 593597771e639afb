"""Review schemas."""

from pydantic import BaseModel

from stowline.db.enums import ReviewSource


class ReviewRead(BaseModel):
    author_name: str
    rating: int
    text: str
    relative_time_description: str | None = None
    profile_photo_url: str | None = None


class ReviewsResponse(BaseModel):
    reviews: list[ReviewRead]
    source: ReviewSource

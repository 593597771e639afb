"""Review source enum."""

from enum import Enum


class ReviewSource(str, Enum):
    """Which tier of the review chain produced a response."""

    DATABASE = "database"
    GOOGLE = "google"
    FALLBACK = "fallback"

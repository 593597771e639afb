"""Upload schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
    content_type: str
    size: int

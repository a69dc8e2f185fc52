"""Pydantic schemas for pictures."""

from datetime import datetime

from pydantic import BaseModel


class Picture(BaseModel):
    """Schema for picture response."""

    id: int
    user_id: int
    request_id: int | None = None
    image_url: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class PictureList(BaseModel):
    pictures: list[Picture]

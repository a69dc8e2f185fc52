"""Pydantic schemas for photo requests."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class RequestCreate(BaseModel):
    """Schema for creating a photo request."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    place_name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)

    @field_validator("place_name", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be blank")
        return v


class Request(BaseModel):
    """Schema for request response."""

    id: int
    user_id: int
    lat: float
    lng: float
    status: str
    place_name: str
    description: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class RequestWithDistance(Request):
    """Request annotated with distance in metres from the query point."""

    distance: float | None = None


class RequestList(BaseModel):
    requests: list[RequestWithDistance]

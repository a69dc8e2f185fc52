"""Photo request model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from kokopic.constants import RequestStatus
from kokopic.database import Base

if TYPE_CHECKING:
    from kokopic.models.picture import Picture
    from kokopic.models.user import User


class PhotoRequest(Base):
    """A request for a photo taken at a geographic point."""

    __tablename__ = "requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'in-progress', 'completed')",
            name="requests_status_check",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    lat: Mapped[float] = mapped_column(Float)
    lng: Mapped[float] = mapped_column(Float)
    status: Mapped[str] = mapped_column(String(50), default=RequestStatus.OPEN, index=True)
    place_name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="requests")
    pictures: Mapped[list["Picture"]] = relationship(
        back_populates="request", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<PhotoRequest(id={self.id}, place_name='{self.place_name}')>"

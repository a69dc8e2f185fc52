"""Picture model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from kokopic.database import Base

if TYPE_CHECKING:
    from kokopic.models.request import PhotoRequest
    from kokopic.models.user import User


class Picture(Base):
    """Uploaded photo, optionally answering a photo request."""

    __tablename__ = "pictures"
    __table_args__ = (
        UniqueConstraint("user_id", "request_id", name="pictures_user_request_unique"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    request_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("requests.id", ondelete="CASCADE"), index=True
    )
    image_url: Mapped[str] = mapped_column(String(1024))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="pictures")
    request: Mapped["PhotoRequest | None"] = relationship(back_populates="pictures")

    def __repr__(self) -> str:
        return f"<Picture(id={self.id}, user_id={self.user_id})>"

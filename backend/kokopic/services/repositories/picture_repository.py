"""Picture data access layer."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from kokopic.models import Picture
from kokopic.services.repositories.exceptions import DuplicateError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence


class PictureRepository:
    """Centralized picture data access.

    Naming conventions:
    - find_* : Query that may return None or empty list
    - get_* : Query that raises exception if missing
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, user_id: int, image_url: str, request_id: int | None = None) -> Picture:
        """Insert a picture row; one per (user, request)."""
        picture = Picture(
            user_id=user_id,
            request_id=request_id,
            image_url=image_url,
            created_at=datetime.now(UTC),
        )
        self._db.add(picture)
        try:
            self._db.flush()
        except IntegrityError as e:
            raise DuplicateError("Picture", "user_id, request_id") from e
        return picture

    def find_by_id(self, picture_id: int) -> Picture | None:
        """Find picture by primary key."""
        return self._db.query(Picture).filter(Picture.id == picture_id).first()

    def get_by_id(self, picture_id: int) -> Picture:
        """Get picture by primary key or raise NotFoundError."""
        picture = self.find_by_id(picture_id)
        if picture is None:
            raise NotFoundError("Picture", picture_id)
        return picture

    def find_by_user_and_request(self, user_id: int, request_id: int) -> Picture | None:
        """Find the picture a user submitted for a request."""
        return (
            self._db.query(Picture)
            .filter(Picture.user_id == user_id, Picture.request_id == request_id)
            .first()
        )

    def find_all(self) -> "Sequence[Picture]":
        """Find all pictures, newest first."""
        return (
            self._db.query(Picture)
            .order_by(Picture.created_at.desc(), Picture.id.desc())
            .all()
        )

    def delete(self, picture: Picture) -> None:
        """Delete a picture row."""
        self._db.delete(picture)
        self._db.flush()

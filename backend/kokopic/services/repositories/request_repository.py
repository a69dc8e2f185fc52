"""Photo request data access layer."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from kokopic.constants import RequestStatus
from kokopic.models import PhotoRequest
from kokopic.services.repositories.exceptions import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence


class RequestRepository:
    """Centralized photo request data access.

    Naming conventions:
    - find_* : Query that may return None or empty list
    - get_* : Query that raises exception if missing
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def create(
        self,
        user_id: int,
        lat: float,
        lng: float,
        place_name: str,
        description: str,
    ) -> PhotoRequest:
        """Insert an open request."""
        request = PhotoRequest(
            user_id=user_id,
            lat=lat,
            lng=lng,
            status=RequestStatus.OPEN,
            place_name=place_name,
            description=description,
            created_at=datetime.now(UTC),
        )
        self._db.add(request)
        self._db.flush()
        return request

    def find_by_id(self, request_id: int) -> PhotoRequest | None:
        """Find request by primary key."""
        return self._db.query(PhotoRequest).filter(PhotoRequest.id == request_id).first()

    def get_by_id(self, request_id: int) -> PhotoRequest:
        """Get request by primary key or raise NotFoundError."""
        request = self.find_by_id(request_id)
        if request is None:
            raise NotFoundError("PhotoRequest", request_id)
        return request

    def find_all(self) -> "Sequence[PhotoRequest]":
        """Find all requests, newest first."""
        return (
            self._db.query(PhotoRequest)
            .order_by(PhotoRequest.created_at.desc(), PhotoRequest.id.desc())
            .all()
        )

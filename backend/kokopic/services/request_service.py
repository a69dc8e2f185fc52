"""Photo request business logic."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from kokopic.models import PhotoRequest
from kokopic.services.exceptions import ResourceNotFoundError
from kokopic.services.geo import haversine_distance
from kokopic.services.repositories.exceptions import NotFoundError
from kokopic.services.repositories.request_repository import RequestRepository

logger = logging.getLogger(__name__)


@dataclass
class RequestWithDistance:
    """A request plus its distance in metres from the caller's point, if known."""

    request: PhotoRequest
    distance: float | None = None


class RequestService:
    """Create, fetch and rank photo requests."""

    def __init__(self, db: Session) -> None:
        self._db = db
        self._requests = RequestRepository(db)

    def create_request(
        self,
        user_id: int,
        lat: float,
        lng: float,
        place_name: str,
        description: str,
    ) -> PhotoRequest:
        request = self._requests.create(user_id, lat, lng, place_name, description)
        self._db.commit()
        logger.info(f"Request {request.id} created by user {user_id} at ({lat}, {lng})")
        return request

    def get_request(self, request_id: int) -> PhotoRequest:
        try:
            return self._requests.get_by_id(request_id)
        except NotFoundError as e:
            raise ResourceNotFoundError("Request not found") from e

    def list_requests(
        self, lat: float | None = None, lng: float | None = None
    ) -> list[RequestWithDistance]:
        """List all requests.

        With both ``lat`` and ``lng`` the result is sorted nearest first and
        every entry carries its distance; otherwise newest first without
        distances.
        """
        requests = self._requests.find_all()
        if lat is None or lng is None:
            return [RequestWithDistance(request=r) for r in requests]

        ranked = [
            RequestWithDistance(request=r, distance=haversine_distance(lat, lng, r.lat, r.lng))
            for r in requests
        ]
        ranked.sort(key=lambda item: item.distance)
        return ranked

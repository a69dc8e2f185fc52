"""Photo requests API router."""

from fastapi import APIRouter, Depends, Query

from kokopic.dependencies.auth import get_current_claims
from kokopic.dependencies.services import get_request_service
from kokopic.schemas.request import Request as RequestSchema
from kokopic.schemas.request import RequestCreate, RequestList, RequestWithDistance
from kokopic.services.auth.session_tokens import SessionClaims
from kokopic.services.request_service import RequestService

router = APIRouter(prefix="/api/v1/requests", tags=["requests"])


@router.get("", response_model=RequestList)
def list_requests(
    lat: float | None = Query(None, ge=-90, le=90, description="Latitude of the viewer"),
    lng: float | None = Query(None, ge=-180, le=180, description="Longitude of the viewer"),
    service: RequestService = Depends(get_request_service),
):
    """
    List photo requests.

    With both ``lat`` and ``lng`` the list is ordered nearest first and every
    item has ``distance`` in metres; otherwise newest first.
    """
    items = [
        RequestWithDistance.model_validate(item.request).model_copy(
            update={"distance": item.distance}
        )
        for item in service.list_requests(lat, lng)
    ]
    return RequestList(requests=items)


@router.post("", response_model=RequestSchema)
def create_request(
    data: RequestCreate,
    claims: SessionClaims = Depends(get_current_claims),
    service: RequestService = Depends(get_request_service),
):
    """Create a photo request owned by the signed-in account."""
    return service.create_request(
        claims.user_id, data.lat, data.lng, data.place_name, data.description
    )


@router.get("/{request_id}", response_model=RequestSchema)
def get_request(
    request_id: int,
    service: RequestService = Depends(get_request_service),
):
    """Get a photo request by ID."""
    return service.get_request(request_id)

"""Pictures API router."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from kokopic.dependencies.auth import get_current_claims
from kokopic.dependencies.services import get_picture_service
from kokopic.schemas.auth import MessageResponse
from kokopic.schemas.picture import Picture as PictureSchema
from kokopic.schemas.picture import PictureList
from kokopic.services.auth.session_tokens import SessionClaims
from kokopic.services.picture_service import PictureService

router = APIRouter(prefix="/api/v1/pictures", tags=["pictures"])


@router.get("", response_model=PictureList)
def list_pictures(service: PictureService = Depends(get_picture_service)):
    """List all pictures, newest first."""
    return PictureList(
        pictures=[PictureSchema.model_validate(p) for p in service.list_pictures()]
    )


@router.post("", response_model=PictureSchema)
def upload_picture(
    file: UploadFile = File(...),
    request_id: int | None = Form(None),
    claims: SessionClaims = Depends(get_current_claims),
    service: PictureService = Depends(get_picture_service),
):
    """Upload a picture, optionally answering a photo request."""
    data = file.file.read()
    return service.upload_picture(
        user_id=claims.user_id,
        data=data,
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        request_id=request_id,
    )


@router.delete("/{picture_id}", response_model=MessageResponse)
def delete_picture(
    picture_id: int,
    claims: SessionClaims = Depends(get_current_claims),
    service: PictureService = Depends(get_picture_service),
):
    """Delete one of the signed-in account's pictures."""
    service.delete_picture(picture_id, claims.user_id)
    return {"message": "Picture deleted"}

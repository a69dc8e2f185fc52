"""Picture upload and deletion."""

import logging
import os
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kokopic.models import Picture
from kokopic.services.exceptions import (
    ConflictError,
    ForbiddenError,
    InternalError,
    ResourceNotFoundError,
    ValidationError,
)
from kokopic.services.repositories.exceptions import DuplicateError
from kokopic.services.repositories.picture_repository import PictureRepository
from kokopic.services.repositories.request_repository import RequestRepository
from kokopic.services.storage_service import StorageService

logger = logging.getLogger(__name__)


def build_picture_key(user_id: int, filename: str) -> str:
    """Storage key for an upload: ``pictures/{user_id}/{uuid}_{filename}``."""
    safe_name = os.path.basename(filename.replace("\\", "/")) or "upload"
    return f"pictures/{user_id}/{uuid4()}_{safe_name}"


class PictureService:
    """Pictures live in the blob store; rows keep their public URL."""

    def __init__(self, db: Session, storage: StorageService) -> None:
        self._db = db
        self._storage = storage
        self._pictures = PictureRepository(db)
        self._requests = RequestRepository(db)

    def list_pictures(self) -> list[Picture]:
        return list(self._pictures.find_all())

    def upload_picture(
        self,
        user_id: int,
        data: bytes,
        filename: str,
        content_type: str,
        request_id: int | None = None,
    ) -> Picture:
        """Store an uploaded image and record it.

        Raises:
            ValidationError: Empty upload.
            ResourceNotFoundError: ``request_id`` does not exist.
            ConflictError: The user already answered this request.
            InternalError: The picture row could not be recorded; the blob is removed.
        """
        if not data:
            raise ValidationError("Uploaded file is empty")

        if request_id is not None:
            if self._requests.find_by_id(request_id) is None:
                raise ResourceNotFoundError("Request not found")
            if self._pictures.find_by_user_and_request(user_id, request_id) is not None:
                raise ConflictError("You have already uploaded a picture for this request")

        key = build_picture_key(user_id, filename)
        url = self._storage.save(key, data, content_type)

        try:
            picture = self._pictures.create(user_id, url, request_id)
            self._db.commit()
        except DuplicateError as e:
            self._db.rollback()
            self._storage.delete(key)
            raise ConflictError("You have already uploaded a picture for this request") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            self._storage.delete(key)
            logger.exception(f"Failed to record picture {key} for user {user_id}")
            raise InternalError() from e

        logger.info(f"Picture {picture.id} uploaded by user {user_id} ({len(data)} bytes)")
        return picture

    def delete_picture(self, picture_id: int, user_id: int) -> None:
        """Delete a picture owned by ``user_id`` together with its blob.

        Raises:
            ResourceNotFoundError: No such picture.
            ForbiddenError: The picture belongs to someone else.
        """
        picture = self._pictures.find_by_id(picture_id)
        if picture is None:
            raise ResourceNotFoundError("Picture not found")
        if picture.user_id != user_id:
            raise ForbiddenError("You can only delete your own pictures")

        key = self._storage.extract_key_from_url(picture.image_url)
        if key:
            self._storage.delete(key)
        else:
            logger.warning(f"Picture {picture_id} URL does not map to a storage key: {picture.image_url}")

        self._pictures.delete(picture)
        self._db.commit()
        logger.info(f"Picture {picture_id} deleted by user {user_id}")

"""
Blob storage for uploaded pictures.

Two backends, selected by ``STORAGE_BACKEND``:
  - "local" (default): files under ``LOCAL_UPLOAD_DIR``, served below ``PUBLIC_BASE_URL``
  - "s3": any S3-compatible store (AWS, MinIO, R2, Supabase) via boto3

Objects are addressed by key (``pictures/7/<uuid>_cat.jpg``); ``save`` returns
the public URL stored on the picture row and ``extract_key_from_url`` maps it
back so the object can be deleted later.

Local::

    STORAGE_BACKEND=local
    LOCAL_UPLOAD_DIR=/tmp/kokopic-uploads
    PUBLIC_BASE_URL=http://localhost:8000/uploads

S3-compatible (path-style URLs when an endpoint is set)::

    STORAGE_BACKEND=s3
    S3_BUCKET=koko-pic
    S3_ENDPOINT=http://rustfs:9000
    S3_PUBLIC_ENDPOINT=http://127.0.0.1:9000
    S3_ACCESS_KEY=...
    S3_SECRET_KEY=...
"""

import logging
import os
from typing import Protocol, runtime_checkable

import boto3
from botocore.config import Config

from kokopic.config import settings

logger = logging.getLogger(__name__)


@runtime_checkable
class StorageService(Protocol):
    """Protocol for blob storage backends."""

    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store ``data`` under ``key`` and return its public URL."""
        ...

    def delete(self, key: str) -> None:
        """Delete the object stored at ``key``."""
        ...

    def extract_key_from_url(self, url: str) -> str | None:
        """Return the key behind a URL produced by ``save``, or None if foreign."""
        ...


class LocalStorageService:
    """Stores files on the local filesystem under ``base_dir``."""

    def __init__(
        self,
        base_dir: str = settings.local_upload_dir,
        public_base_url: str = settings.public_base_url,
    ):
        self._base_dir = base_dir
        self._public_base_url = public_base_url.rstrip("/")
        os.makedirs(base_dir, exist_ok=True)

    def _full_path(self, key: str) -> str:
        # Prevent path traversal
        safe_key = os.path.normpath("/" + key).lstrip("/")
        return os.path.join(self._base_dir, safe_key)

    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        path = self._full_path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return f"{self._public_base_url}/{key}"

    def delete(self, key: str) -> None:
        path = self._full_path(key)
        if os.path.exists(path):
            os.remove(path)

    def extract_key_from_url(self, url: str) -> str | None:
        prefix = f"{self._public_base_url}/"
        if url.startswith(prefix):
            return url[len(prefix):]
        return None


class S3StorageService:
    """
    Stores files in an S3-compatible bucket.

    With ``endpoint`` set, requests use path-style addressing and URLs take
    the form ``{public_endpoint or endpoint}/{bucket}/{key}``; otherwise
    ``https://{bucket}.s3.amazonaws.com/{key}``.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint: str | None = None,
        public_endpoint: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client=None,
    ):
        self._bucket = bucket
        self._endpoint = endpoint.rstrip("/") if endpoint else None
        self._public_endpoint = public_endpoint.rstrip("/") if public_endpoint else None

        if client is None:
            kwargs: dict = {
                "region_name": region,
                "config": Config(s3={"addressing_style": "path"}),
            }
            if self._endpoint:
                kwargs["endpoint_url"] = self._endpoint
            if access_key:
                kwargs["aws_access_key_id"] = access_key
                kwargs["aws_secret_access_key"] = secret_key
            client = boto3.client("s3", **kwargs)
        self._s3 = client

    def _url_prefix(self) -> str:
        endpoint = self._public_endpoint or self._endpoint
        if endpoint:
            return f"{endpoint}/{self._bucket}/"
        return f"https://{self._bucket}.s3.amazonaws.com/"

    def save(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        self._s3.put_object(
            Bucket=self._bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info(f"Uploaded {len(data)} bytes to s3://{self._bucket}/{key}")
        return f"{self._url_prefix()}{key}"

    def delete(self, key: str) -> None:
        self._s3.delete_object(Bucket=self._bucket, Key=key)

    def extract_key_from_url(self, url: str) -> str | None:
        prefix = self._url_prefix()
        if url.startswith(prefix):
            return url[len(prefix):]
        return None


def get_storage_service() -> StorageService:
    """
    FastAPI dependency that returns the configured storage backend.

    Example::

        storage: StorageService = Depends(get_storage_service)
    """
    if settings.storage_backend == "s3":
        if not settings.s3_bucket:
            raise RuntimeError("STORAGE_BACKEND=s3 requires S3_BUCKET to be set in environment")
        return S3StorageService(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            endpoint=settings.s3_endpoint,
            public_endpoint=settings.s3_public_endpoint,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
        )
    return LocalStorageService()

"""Tests for the storage service abstraction (local + S3 backends)."""

import os
from unittest.mock import MagicMock, patch

import pytest

from kokopic.services.storage_service import (
    LocalStorageService,
    S3StorageService,
    get_storage_service,
)


class TestLocalStorageService:
    """Tests for LocalStorageService (filesystem backend)."""

    @pytest.fixture
    def storage(self, tmp_path):
        return LocalStorageService(
            base_dir=str(tmp_path), public_base_url="http://localhost:8000/uploads/"
        )

    def test_save_returns_public_url(self, storage, tmp_path):
        url = storage.save("pictures/1/a.jpg", b"jpeg-bytes", "image/jpeg")

        assert url == "http://localhost:8000/uploads/pictures/1/a.jpg"
        with open(tmp_path / "pictures" / "1" / "a.jpg", "rb") as f:
            assert f.read() == b"jpeg-bytes"

    def test_extract_key_round_trip(self, storage):
        url = storage.save("pictures/1/a.jpg", b"data")
        assert storage.extract_key_from_url(url) == "pictures/1/a.jpg"

    def test_extract_key_foreign_url(self, storage):
        assert storage.extract_key_from_url("http://example.com/pictures/1/a.jpg") is None

    def test_delete_removes_file(self, storage, tmp_path):
        storage.save("pictures/1/a.jpg", b"data")
        storage.delete("pictures/1/a.jpg")
        assert not os.path.exists(tmp_path / "pictures" / "1" / "a.jpg")

    def test_delete_nonexistent_file_is_noop(self, storage):
        storage.delete("does_not_exist.jpg")

    def test_path_traversal_is_blocked(self, storage, tmp_path):
        storage.save("../../escape.jpg", b"harmless")
        assert os.path.exists(tmp_path / "escape.jpg")


class TestS3StorageService:
    """Tests for S3StorageService with a mocked boto3 client."""

    def test_save_uses_path_style_url_with_endpoint(self):
        client = MagicMock()
        storage = S3StorageService(
            bucket="dev", endpoint="http://localhost:9000", client=client
        )

        url = storage.save("pictures/test.jpg", b"data", "image/jpeg")

        assert url == "http://localhost:9000/dev/pictures/test.jpg"
        client.put_object.assert_called_once_with(
            Bucket="dev", Key="pictures/test.jpg", Body=b"data", ContentType="image/jpeg"
        )

    def test_public_endpoint_wins_for_urls(self):
        storage = S3StorageService(
            bucket="dev",
            endpoint="http://rustfs:9000",
            public_endpoint="http://127.0.0.1:9000",
            client=MagicMock(),
        )

        url = storage.save("pictures/test.jpg", b"data")
        assert url == "http://127.0.0.1:9000/dev/pictures/test.jpg"
        assert storage.extract_key_from_url(url) == "pictures/test.jpg"

    def test_aws_virtual_host_url_without_endpoint(self):
        storage = S3StorageService(bucket="my-bucket", client=MagicMock())

        url = storage.save("uploads/image.png", b"data")
        assert url == "https://my-bucket.s3.amazonaws.com/uploads/image.png"
        assert storage.extract_key_from_url(url) == "uploads/image.png"

    def test_extract_key_from_supabase_endpoint(self):
        storage = S3StorageService(
            bucket="koko-pic",
            endpoint="https://project.storage.supabase.co/storage/v1/s3",
            client=MagicMock(),
        )

        url = "https://project.storage.supabase.co/storage/v1/s3/koko-pic/pictures/7/test.jpg"
        assert storage.extract_key_from_url(url) == "pictures/7/test.jpg"

    def test_extract_key_wrong_bucket(self):
        storage = S3StorageService(
            bucket="dev", endpoint="http://localhost:9000", client=MagicMock()
        )
        assert storage.extract_key_from_url("http://localhost:9000/production/pictures/a.jpg") is None

    def test_delete_calls_client(self):
        client = MagicMock()
        storage = S3StorageService(bucket="dev", client=client)

        storage.delete("pictures/test.jpg")
        client.delete_object.assert_called_once_with(Bucket="dev", Key="pictures/test.jpg")

    def test_builds_boto3_client_with_endpoint_and_credentials(self):
        with patch("kokopic.services.storage_service.boto3") as mock_boto3:
            S3StorageService(
                bucket="dev",
                region="eu-west-1",
                endpoint="http://localhost:9000",
                access_key="key",
                secret_key="secret",
            )

        kwargs = mock_boto3.client.call_args.kwargs
        assert mock_boto3.client.call_args.args == ("s3",)
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["aws_access_key_id"] == "key"
        assert kwargs["aws_secret_access_key"] == "secret"


class TestGetStorageService:
    def test_defaults_to_local(self, tmp_path):
        with patch("kokopic.services.storage_service.settings") as mock_settings:
            mock_settings.storage_backend = "local"
            with patch(
                "kokopic.services.storage_service.LocalStorageService"
            ) as mock_local:
                assert get_storage_service() is mock_local.return_value

    def test_s3_requires_bucket(self):
        with patch("kokopic.services.storage_service.settings") as mock_settings:
            mock_settings.storage_backend = "s3"
            mock_settings.s3_bucket = ""
            with pytest.raises(RuntimeError):
                get_storage_service()

    def test_s3_backend(self):
        with patch("kokopic.services.storage_service.settings") as mock_settings:
            mock_settings.storage_backend = "s3"
            mock_settings.s3_bucket = "dev"
            mock_settings.s3_region = "us-east-1"
            mock_settings.s3_endpoint = "http://localhost:9000"
            mock_settings.s3_public_endpoint = ""
            mock_settings.s3_access_key = "key"
            mock_settings.s3_secret_key = "secret"
            with patch("kokopic.services.storage_service.boto3"):
                storage = get_storage_service()

        assert isinstance(storage, S3StorageService)

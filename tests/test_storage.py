"""Unit tests for poster storage clients."""

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from event_server.config import ConfigurationError, Settings
from event_server.services.storage_service import (
    InMemoryStorageClient,
    S3StorageClient,
    StorageError,
    build_object_key,
    create_storage_client,
)


class TestBuildObjectKey:
    """Test cases for object key generation."""

    def test_key_uses_prefix_and_extension(self):
        key = build_object_key("posters", "image/jpeg")

        prefix, name = key.split("/")
        assert prefix == "posters"
        assert name.endswith(".jpg")
        assert len(name) == 32 + len(".jpg")

    def test_keys_are_unique(self):
        assert build_object_key("posters", "image/png") != build_object_key("posters", "image/png")

    def test_client_filename_is_ignored_for_known_types(self):
        key = build_object_key("posters", "image/png", "../../etc/passwd.png")

        assert ".." not in key
        assert key.startswith("posters/")

    def test_empty_prefix(self):
        assert "/" not in build_object_key("", "image/webp")


class TestInMemoryStorageClient:
    """Test cases for the in-memory client."""

    def test_upload_returns_public_url(self):
        storage = InMemoryStorageClient(base_url="https://cdn.example.com/")

        url = storage.upload_bytes(b"data", "posters/a.png", "image/png")

        assert url == "https://cdn.example.com/posters/a.png"
        assert storage.stored_objects["posters/a.png"] == (b"data", "image/png")


class TestS3StorageClient:
    """Test cases for the boto3 backed client."""

    @pytest.fixture
    def mock_boto_client(self):
        with patch("event_server.services.storage_service.boto3.client") as mock_factory:
            yield mock_factory.return_value

    def test_upload_success(self, mock_boto_client: Mock):
        storage = S3StorageClient(bucket="posters-bucket", region="eu-west-1")

        url = storage.upload_bytes(b"data", "posters/a.png", "image/png")

        mock_boto_client.put_object.assert_called_once_with(
            Bucket="posters-bucket",
            Key="posters/a.png",
            Body=b"data",
            ContentType="image/png",
        )
        assert url == "https://posters-bucket.s3.eu-west-1.amazonaws.com/posters/a.png"

    def test_upload_client_error(self, mock_boto_client: Mock):
        mock_boto_client.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )
        storage = S3StorageClient(bucket="posters-bucket")

        with pytest.raises(StorageError) as exc_info:
            storage.upload_bytes(b"data", "posters/a.png", "image/png")

        assert exc_info.value.status_code == 503
        # Provider details stay out of the message
        assert "AccessDenied" not in exc_info.value.message

    def test_upload_connection_error(self, mock_boto_client: Mock):
        mock_boto_client.put_object.side_effect = EndpointConnectionError(
            endpoint_url="https://s3.example.com"
        )
        storage = S3StorageClient(bucket="posters-bucket")

        with pytest.raises(StorageError):
            storage.upload_bytes(b"data", "posters/a.png", "image/png")

    @pytest.mark.parametrize(
        "kwargs, expected",
        [
            ({"public_base_url": "https://cdn.example.com/"}, "https://cdn.example.com/k.png"),
            ({"endpoint_url": "https://minio.local:9000"}, "https://minio.local:9000/b/k.png"),
            ({}, "https://b.s3.amazonaws.com/k.png"),
        ],
    )
    def test_public_url(self, mock_boto_client: Mock, kwargs: dict, expected: str):
        assert S3StorageClient(bucket="b", **kwargs).public_url("k.png") == expected


class TestCreateStorageClient:
    """Test cases for backend selection."""

    def make_settings(self, **overrides) -> Settings:
        return Settings(database_url="sqlite:///:memory:", jwt_secret="secret", **overrides)

    def test_memory_backend(self):
        storage = create_storage_client(self.make_settings(storage_backend="memory"))

        assert isinstance(storage, InMemoryStorageClient)

    def test_s3_backend(self):
        with patch("event_server.services.storage_service.boto3.client") as mock_factory:
            storage = create_storage_client(
                self.make_settings(storage_backend="s3", storage_bucket="posters-bucket")
            )

        assert isinstance(storage, S3StorageClient)
        assert mock_factory.call_args.args == ("s3",)

    def test_s3_backend_requires_bucket(self):
        with pytest.raises(ConfigurationError):
            create_storage_client(self.make_settings(storage_backend="s3"))

"""Object storage for event posters.

This module provides an S3-compatible storage client (boto3) and an
in-memory client for development and tests. Both hand back the public URL
under which the uploaded object can be fetched.
"""

import mimetypes
import time
import uuid
from dataclasses import dataclass, field
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ConfigurationError, Settings
from ..logging_config import get_logger, log_external_api_call

logger = get_logger("storage_service")

# Extensions for the poster content types accepted on upload
IMAGE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class StorageError(Exception):
    """Raised when an object cannot be stored."""

    def __init__(self, message: str, status_code: int = 503) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload_bytes(self, data: bytes, key: str, content_type: str) -> str:
        ...


def build_object_key(prefix: str, content_type: str, filename: str | None = None) -> str:
    """Build a collision-free object key: ``<prefix>/<uuid4 hex><ext>``.

    The client-supplied filename only contributes its extension when the
    content type has no known one.
    """
    extension = IMAGE_EXTENSIONS.get(content_type) or mimetypes.guess_extension(content_type) or ""
    if not extension and filename and "." in filename:
        extension = "." + filename.rsplit(".", 1)[-1].lower()
    prefix = prefix.strip("/")
    name = f"{uuid.uuid4().hex}{extension}"
    return f"{prefix}/{name}" if prefix else name


@dataclass
class InMemoryStorageClient:
    """Keeps uploaded objects in a dict; for development and tests."""

    base_url: str = "https://storage.example.test"
    stored_objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def upload_bytes(self, data: bytes, key: str, content_type: str) -> str:
        self.stored_objects[key] = (data, content_type)
        logger.debug(f"Stored object in memory: {key}", extra={"key": key, "size": len(data)})
        return f"{self.base_url.rstrip('/')}/{key}"


@dataclass
class S3StorageClient:
    """S3-compatible storage client.

    Works against AWS S3 or any S3-compatible endpoint (MinIO, R2, COS)
    when ``endpoint_url`` is set.
    """

    bucket: str
    region: str | None = None
    endpoint_url: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    public_base_url: str | None = None

    def __post_init__(self) -> None:
        config = Config(signature_version="s3v4", retries={"max_attempts": 1})
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def public_url(self, key: str) -> str:
        """URL under which a stored object is publicly readable."""
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        if self.region:
            return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def upload_bytes(self, data: bytes, key: str, content_type: str) -> str:
        """Upload an object and return its public URL.

        Raises:
            StorageError: If the storage service rejects or fails the upload
        """
        start_time = time.time()
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            log_external_api_call(
                service="object_storage",
                endpoint=f"{self.bucket}/{key}",
                method="PUT",
                duration=time.time() - start_time,
                success=False,
                error=type(e).__name__,
            )
            raise StorageError("Poster upload failed") from e

        log_external_api_call(
            service="object_storage",
            endpoint=f"{self.bucket}/{key}",
            method="PUT",
            duration=time.time() - start_time,
            success=True,
            size=len(data),
        )
        return self.public_url(key)


def create_storage_client(settings: Settings) -> StorageClient:
    """Build the storage client selected by ``settings.storage_backend``.

    Raises:
        ConfigurationError: If the S3 backend is selected without a bucket
    """
    if settings.storage_backend == "memory":
        return InMemoryStorageClient(
            base_url=settings.storage_public_base_url or InMemoryStorageClient.base_url
        )

    if not settings.storage_bucket:
        raise ConfigurationError("storage_bucket must be set when storage_backend is 's3'")

    return S3StorageClient(
        bucket=settings.storage_bucket,
        region=settings.storage_region,
        endpoint_url=settings.storage_endpoint_url,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        public_base_url=settings.storage_public_base_url,
    )

"""Object storage for rendered order documents.

Documents are written with a single PutObject into a bucket that already
exists and are handed out through pre-signed GET links. Provisioning the
bucket is left to the operator: the service never lists, checks or creates
buckets, so credentials limited to object reads and writes are enough.

Works against AWS S3 or any S3-compatible server (MinIO). Failures are
reported through ``StorageOutcome`` rather than raised; the caller decides
whether they are terminal.

Based on MinIO Python SDK:
https://min.io/docs/minio/linux/developers/python/API.html
"""

import io
import logging
from datetime import timedelta

from minio import Minio
from minio.error import S3Error
from pydantic import BaseModel

from services.documents.schema import PDF_MEDIA_TYPE
from services.shared.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


class StorageOutcome(BaseModel):
    """Result of one call against the document bucket.

    Attributes:
        success: Whether the call succeeded
        object_name: Object the call was about
        url: Pre-signed download link (signing only)
        expires_in_seconds: Lifetime of ``url``
        etag: Object ETag after an upload
        size: Uploaded size in bytes
        error: Error message if the call failed
    """

    success: bool
    object_name: str
    url: str | None = None
    expires_in_seconds: int | None = None
    etag: str | None = None
    size: int | None = None
    error: str | None = None


def describe_error(error: Exception) -> str:
    """Short message for a failed storage call."""
    if isinstance(error, S3Error):
        return f"S3 error: {error.code} - {error.message}"
    return str(error)


class StorageService:
    """Writes, signs and removes order documents in one configured bucket."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._client: Minio | None = None

    @property
    def bucket(self) -> str:
        return self.settings.storage_bucket

    def is_available(self) -> bool:
        """Whether access key, secret key and bucket are all configured.

        Only inspects settings; never touches the network.
        """
        return bool(
            self.settings.storage_access_key
            and self.settings.storage_secret_key
            and self.settings.storage_bucket
        )

    def _get_client(self) -> Minio:
        """Get or create the MinIO client.

        Raises:
            ValueError: If storage credentials are not configured
        """
        if self._client is None:
            if not self.settings.storage_access_key:
                raise ValueError(
                    "Storage access key not configured. "
                    "Set APP_STORAGE_ACCESS_KEY environment variable."
                )
            if not self.settings.storage_secret_key:
                raise ValueError(
                    "Storage secret key not configured. "
                    "Set APP_STORAGE_SECRET_KEY environment variable."
                )

            # An explicit region keeps presigning local, without a bucket location lookup.
            self._client = Minio(
                endpoint=self.settings.storage_endpoint,
                access_key=self.settings.storage_access_key,
                secret_key=self.settings.storage_secret_key,
                secure=self.settings.storage_secure,
                region=self.settings.storage_region or DEFAULT_REGION,
            )
            logger.info(f"Storage client ready for {self.settings.storage_endpoint}")

        return self._client

    def put_document(
        self,
        object_name: str,
        content: bytes,
        content_type: str = PDF_MEDIA_TYPE,
    ) -> StorageOutcome:
        """Write a document, replacing any object already stored under the name.

        Args:
            object_name: Key inside the bucket
            content: Document bytes
            content_type: MIME type recorded on the object

        Returns:
            StorageOutcome with the ETag and size on success
        """
        try:
            written = self._get_client().put_object(
                bucket_name=self.bucket,
                object_name=object_name,
                data=io.BytesIO(content),
                length=len(content),
                content_type=content_type,
            )
        except Exception as e:
            logger.error(f"Upload of {object_name} to {self.bucket} failed: {e}")
            return StorageOutcome(success=False, object_name=object_name, error=describe_error(e))

        logger.info(f"Stored {object_name} in {self.bucket} ({len(content)} bytes)")
        return StorageOutcome(
            success=True,
            object_name=object_name,
            etag=written.etag,
            size=len(content),
        )

    def sign_download(self, object_name: str, expires_seconds: int) -> StorageOutcome:
        """Issue a pre-signed GET link for a stored document.

        Signing is computed locally from the credentials; no request is sent.
        """
        try:
            url = self._get_client().presigned_get_object(
                bucket_name=self.bucket,
                object_name=object_name,
                expires=timedelta(seconds=expires_seconds),
            )
        except Exception as e:
            logger.error(f"Signing a link for {object_name} failed: {e}")
            return StorageOutcome(success=False, object_name=object_name, error=describe_error(e))

        return StorageOutcome(
            success=True,
            object_name=object_name,
            url=url,
            expires_in_seconds=expires_seconds,
        )

    def remove(self, object_name: str) -> StorageOutcome:
        """Delete a stored document."""
        try:
            self._get_client().remove_object(bucket_name=self.bucket, object_name=object_name)
        except Exception as e:
            logger.warning(f"Removing {object_name} from {self.bucket} failed: {e}")
            return StorageOutcome(success=False, object_name=object_name, error=describe_error(e))

        logger.info(f"Removed {object_name} from {self.bucket}")
        return StorageOutcome(success=True, object_name=object_name)

"""Cloud Storage client for product images.

Images live in a GCS bucket that is served publicly through a CDN. Callers
only ever see CDN URLs: upload returns one and delete takes the same URL back.
"""

from google.api_core.exceptions import GoogleAPIError, NotFound
from google.cloud import storage
from google.cloud.storage import Bucket

from storefront.config import settings
from storefront.core.errors import BlobStoreError
from storefront.infra.logging import get_logger

logger = get_logger(__name__)


class StorageClient:
    """Cloud Storage client addressing blobs by their public CDN URL."""

    def __init__(self, bucket_name: str | None = None, cdn_base_url: str | None = None) -> None:
        """Initialize storage client.

        Args:
            bucket_name: GCS bucket name. Defaults to settings.gcs_bucket.
            cdn_base_url: Public URL prefix of the bucket. Defaults to settings.cdn_base_url.
        """
        self._client: storage.Client | None = None
        self._bucket: Bucket | None = None
        self._bucket_name = bucket_name or settings.gcs_bucket
        self._cdn_base_url = (cdn_base_url or settings.cdn_base_url).rstrip("/")

    @property
    def client(self) -> storage.Client:
        """Lazy-load the GCS client."""
        if self._client is None:
            self._client = storage.Client()
            logger.info("GCS client initialized")
        return self._client

    @property
    def bucket(self) -> Bucket:
        """Get the configured bucket."""
        if self._bucket is None:
            self._bucket = self.client.bucket(self._bucket_name)
            logger.info("GCS bucket configured", bucket=self._bucket_name)
        return self._bucket

    def public_url(self, blob_path: str) -> str:
        """Get the CDN URL for a blob path."""
        return f"{self._cdn_base_url}/{blob_path.lstrip('/')}"

    def blob_path_from_url(self, url: str) -> str | None:
        """Extract the blob path from a CDN URL.

        Returns:
            Blob path, or None if the URL is not served from this bucket
        """
        prefix = f"{self._cdn_base_url}/"
        if not url.startswith(prefix):
            return None
        path = url[len(prefix):]
        return path or None

    async def upload_bytes(
        self,
        data: bytes,
        blob_path: str,
        content_type: str = "image/jpeg",
    ) -> str:
        """Upload bytes to GCS.

        Args:
            data: File content
            blob_path: Destination blob path
            content_type: MIME type

        Returns:
            Public CDN URL of the uploaded blob

        Raises:
            BlobStoreError: If the upload fails
        """
        blob = self.bucket.blob(blob_path)

        try:
            blob.upload_from_string(data, content_type=content_type)
        except GoogleAPIError as e:
            logger.error("Blob upload failed", blob_path=blob_path, error=str(e))
            raise BlobStoreError(f"Failed to upload {blob_path}: {e}") from e

        logger.info("Uploaded blob", blob_path=blob_path, size=len(data))
        return self.public_url(blob_path)

    async def delete_url(self, url: str) -> bool:
        """Delete the blob behind a CDN URL.

        A blob that is already gone counts as deleted. Other failures are
        logged and reported as False so the image record can still be removed.

        Args:
            url: Public CDN URL previously returned by upload_bytes

        Returns:
            True if the blob is gone, False if the URL was foreign or the delete failed
        """
        blob_path = self.blob_path_from_url(url)
        if blob_path is None:
            logger.warning("Not a CDN URL for this bucket, skipping blob delete", url=url)
            return False

        try:
            self.bucket.blob(blob_path).delete()
            logger.info("Deleted blob", blob_path=blob_path)
        except NotFound:
            logger.warning("Blob already missing", blob_path=blob_path)
        except GoogleAPIError as e:
            logger.error("Blob delete failed", blob_path=blob_path, error=str(e))
            return False

        return True


# Singleton instance
_storage_client: StorageClient | None = None


def get_storage_client() -> StorageClient:
    """Get the singleton storage client."""
    global _storage_client
    if _storage_client is None:
        _storage_client = StorageClient()
    return _storage_client

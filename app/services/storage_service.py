from google.cloud import storage
from google.oauth2 import service_account
from fastapi import HTTPException, status
import base64
import binascii
import io
import logging
import os
from datetime import timedelta
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_URL_EXPIRES_IN = int(os.getenv("QR_URL_EXPIRES_IN", "3600"))
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class StorageError(Exception):
    pass


class InvalidImageError(StorageError):
    pass


class StorageService:
    def __init__(self, bucket=None):
        """
        Args:
            bucket: an already-built bucket object; when omitted the bucket is
                created from GCS_CREDENTIALS_PATH and GCS_BUCKET_NAME
        """
        if bucket is not None:
            self.bucket = bucket
            self.bucket_name = getattr(bucket, "name", None)
            return

        credentials_path = os.getenv("GCS_CREDENTIALS_PATH")
        self.bucket_name = os.getenv("GCS_BUCKET_NAME")

        if not credentials_path or not self.bucket_name:
            raise ValueError("GCS configuration missing in .env file")

        # Make path absolute if it's relative
        if not os.path.isabs(credentials_path):
            credentials_path = os.path.join(os.getcwd(), credentials_path)

        if not os.path.exists(credentials_path):
            raise ValueError(f"GCS credentials file not found at: {credentials_path}")

        credentials = service_account.Credentials.from_service_account_file(
            credentials_path
        )
        self.client = storage.Client(credentials=credentials)
        self.bucket = self.client.bucket(self.bucket_name)

    def upload_bytes(
        self,
        key: str,
        data: bytes,
        content_type: str = "image/png",
        metadata: Optional[dict] = None
    ) -> str:
        """
        Upload raw bytes under an exact key (existing objects are overwritten)

        Args:
            key: Object key, e.g. public/qrcodes/Customer/<id>.png
            data: File content
            content_type: MIME type stored with the object
            metadata: Custom metadata stored with the object

        Returns:
            The key that was written
        """
        if not data:
            raise StorageError("Refusing to upload an empty file")
        try:
            blob = self.bucket.blob(key)
            if metadata:
                blob.metadata = {k: str(v) for k, v in metadata.items() if v is not None}
            blob.upload_from_string(data, content_type=content_type)
            logger.info(f"Uploaded {len(data)} bytes to {key}")
            return key
        except Exception as e:
            logger.error(f"Failed to upload {key}: {str(e)}")
            raise StorageError(f"Failed to upload file: {str(e)}") from e

    def upload_base64_image(
        self,
        base64_data: str,
        key: str,
        metadata: Optional[dict] = None
    ) -> str:
        """
        Upload a base64 encoded PNG snapshot

        Args:
            base64_data: Base64 encoded image string (with or without data URI prefix)
            key: Object key to write
            metadata: Custom metadata stored with the object

        Returns:
            The key that was written
        """
        # Remove data URI prefix if present (e.g., "data:image/png;base64,")
        if "," in base64_data and base64_data.startswith("data:"):
            base64_data = base64_data.split(",", 1)[1]

        try:
            image_bytes = base64.b64decode(base64_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidImageError(f"Invalid base64 image data: {str(e)}") from e

        if not image_bytes.startswith(PNG_SIGNATURE):
            raise InvalidImageError("Snapshot is not a PNG image")

        logger.info(f"Decoded snapshot size: {len(image_bytes)} bytes")
        return self.upload_bytes(key, image_bytes, content_type="image/png", metadata=metadata)

    @staticmethod
    def _optimize_image(file_content: bytes, max_size: Tuple[int, int] = (1024, 1024)) -> bytes:
        """Flatten to RGB, shrink to max_size and re-encode as JPEG"""
        try:
            image = Image.open(io.BytesIO(file_content))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidImageError("File is not a readable image") from e

        # Convert RGBA to RGB if needed
        if image.mode == 'RGBA':
            background = Image.new('RGB', image.size, (255, 255, 255))
            background.paste(image, mask=image.split()[3])
            image = background
        elif image.mode != 'RGB':
            image = image.convert('RGB')

        image.thumbnail(max_size, Image.Resampling.LANCZOS)

        output = io.BytesIO()
        image.save(output, format='JPEG', quality=85, optimize=True)
        return output.getvalue()

    def upload_image(self, file_content: bytes, key: str, metadata: Optional[dict] = None) -> str:
        """
        Optimize and upload a logo or catalog photo

        Args:
            file_content: Raw image bytes in any format Pillow can read
            key: Object key without extension; ".jpg" is appended

        Returns:
            The key that was written
        """
        optimized = self._optimize_image(file_content)
        logger.info(f"Image optimized from {len(file_content)} to {len(optimized)} bytes")
        return self.upload_bytes(f"{key}.jpg", optimized, content_type="image/jpeg", metadata=metadata)

    def get_url(self, key: str, expires_in: int = DEFAULT_URL_EXPIRES_IN) -> str:
        """Signed, time-limited GET URL for an object"""
        if not key:
            raise StorageError("A storage key is required")
        try:
            blob = self.bucket.blob(key)
            return blob.generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in),
                method="GET"
            )
        except Exception as e:
            logger.error(f"Failed to sign URL for {key}: {str(e)}")
            raise StorageError(f"Failed to get URL for {key}") from e

    def delete(self, key: str) -> bool:
        """Delete an object; returns False when there was nothing to delete"""
        if not key:
            return False
        try:
            blob = self.bucket.blob(key)
            if not blob.exists():
                return False
            blob.delete()
            logger.info(f"Deleted {key}")
            return True
        except Exception as e:
            logger.error(f"Failed to delete {key}: {str(e)}")
            raise StorageError(f"Failed to delete {key}") from e


# Singleton instance - initialized when first imported
try:
    storage_service = StorageService()
except Exception as e:
    logger.warning(f"StorageService disabled: {str(e)}")
    logger.warning("Set GCS_CREDENTIALS_PATH and GCS_BUCKET_NAME in .env to enable QR code uploads")
    storage_service = None


def get_storage_service() -> StorageService:
    """FastAPI dependency; 503 when object storage is not configured"""
    if storage_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Object storage is not configured. Set GCS_CREDENTIALS_PATH and GCS_BUCKET_NAME."
        )
    return storage_service

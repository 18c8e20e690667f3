"""S3-backed image storage for content media.

Uploads arrive as base64 payloads from the admin console and come back
as a public URL plus object key. Deletes accept either.
"""

import asyncio
import base64
import binascii
import uuid
from dataclasses import asdict, dataclass

from content_service.config.settings import get_settings
from content_service.errors import MediaError

ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
}

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


@dataclass
class StoredMedia:
    url: str
    key: str
    filename: str
    size: int
    contentType: str

    def to_dict(self) -> dict:
        return asdict(self)


def check_image(content_type: str, size: int, max_bytes: int) -> str | None:
    """Reason the image is rejected, or None if acceptable."""
    if content_type not in ALLOWED_CONTENT_TYPES:
        allowed = ", ".join(sorted(ALLOWED_CONTENT_TYPES))
        return f"Invalid file type: {content_type}. Allowed types: {allowed}"
    if size > max_bytes:
        return (
            f"File size too large: {size / 1024 / 1024:.2f}MB. "
            f"Maximum size is {max_bytes / 1024 / 1024:.0f}MB."
        )
    return None


class S3MediaStorage:
    """Stores images in one bucket under a per-folder prefix."""

    def __init__(self, bucket: str, base_url: str, region: str = "us-east-1", max_bytes: int = 5 * 1024 * 1024):
        self._bucket = bucket
        self._base_url = base_url.rstrip("/")
        self._region = region
        self._max_bytes = max_bytes
        self._client = None

    @classmethod
    def from_settings(cls) -> "S3MediaStorage":
        settings = get_settings()
        return cls(
            bucket=settings.media_bucket,
            base_url=settings.media_base_url,
            region=settings.aws_region,
            max_bytes=settings.media_max_bytes,
        )

    def _get_client(self):
        """Lazy-init boto3 S3 client."""
        if self._client is None:
            import boto3

            self._client = boto3.client("s3", region_name=self._region)
        return self._client

    async def upload(self, file_b64: str, filename: str, content_type: str, folder: str = "uploads") -> StoredMedia:
        try:
            data = base64.b64decode(file_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MediaError("File is not valid base64") from e

        reason = check_image(content_type, len(data), self._max_bytes)
        if reason:
            raise MediaError(reason)

        folder = folder.strip("/") or "uploads"
        key = f"{folder}/{uuid.uuid4().hex}.{_EXTENSIONS[content_type]}"

        await asyncio.to_thread(
            self._get_client().put_object,
            Bucket=self._bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return StoredMedia(
            url=f"{self._base_url}/{key}",
            key=key,
            filename=filename,
            size=len(data),
            contentType=content_type,
        )

    async def delete(self, url: str = "", key: str = "") -> str:
        """Delete by key, or by a URL under this bucket's base URL. Returns the key."""
        key = key or self.key_for_url(url)
        if not key:
            raise MediaError("A media url or key is required")
        await asyncio.to_thread(self._get_client().delete_object, Bucket=self._bucket, Key=key)
        return key

    def key_for_url(self, url: str) -> str:
        prefix = self._base_url + "/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return ""

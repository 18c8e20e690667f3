"""Image handling for the admin console: local validation, then upload through the API."""

import base64
from dataclasses import dataclass

from content_service.admin.client import ContentApiClient
from content_service.config.settings import get_settings
from content_service.errors import ContentApiError, MediaError
from content_service.media.storage import check_image


@dataclass
class ImageFile:
    """A file picked in the admin form."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def validate_image_file(image: ImageFile, max_bytes: int | None = None) -> None:
    """Raise MediaError if the file's type or size is not accepted."""
    if max_bytes is None:
        max_bytes = get_settings().media_max_bytes
    reason = check_image(image.content_type, image.size, max_bytes)
    if reason:
        raise MediaError(reason)


class MediaUploader:
    def __init__(self, client: ContentApiClient):
        self.client = client

    async def upload(self, image: ImageFile, folder: str) -> str:
        """Validate and upload; returns the public URL."""
        validate_image_file(image)
        encoded = base64.b64encode(image.data).decode("ascii")
        try:
            stored = await self.client.upload_image(encoded, image.filename, image.content_type, folder)
        except ContentApiError as e:
            raise MediaError(f"Failed to upload image: {e}") from e
        return stored["url"]

    async def delete(self, url: str) -> None:
        try:
            await self.client.delete_image(url=url)
        except ContentApiError as e:
            raise MediaError(f"Failed to delete image: {e}") from e

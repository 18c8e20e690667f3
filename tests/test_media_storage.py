"""Tests for content_service/media/storage.py: S3 media storage."""

import base64
from unittest.mock import MagicMock, patch

import pytest

from content_service.errors import MediaError
from content_service.media.storage import S3MediaStorage, check_image


@pytest.fixture
def mock_s3():
    """Mock boto3 S3 client."""
    return MagicMock()


@pytest.fixture
def storage(mock_s3):
    """S3MediaStorage with pre-injected mock client."""
    s = S3MediaStorage(bucket="media", base_url="https://media.example.com/", max_bytes=1024)
    s._client = mock_s3
    return s


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


class TestCheckImage:

    @pytest.mark.parametrize("content_type", [
        "image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp", "image/svg+xml",
    ])
    def test_allowed_types(self, content_type):
        assert check_image(content_type, 10, 100) is None

    def test_rejects_type(self):
        assert check_image("text/html", 10, 100).startswith("Invalid file type")

    def test_rejects_size(self):
        assert check_image("image/png", 101, 100).startswith("File size too large")


class TestUpload:

    async def test_puts_object_and_returns_location(self, storage, mock_s3):
        stored = await storage.upload(_b64(b"gif-bytes"), "logo.gif", "image/gif", folder="/events/")

        assert stored.key.startswith("events/")
        assert stored.key.endswith(".gif")
        assert stored.url == f"https://media.example.com/{stored.key}"
        assert stored.to_dict()["contentType"] == "image/gif"
        assert stored.filename == "logo.gif"
        mock_s3.put_object.assert_called_once_with(
            Bucket="media", Key=stored.key, Body=b"gif-bytes", ContentType="image/gif",
        )

    async def test_keys_are_unique(self, storage):
        a = await storage.upload(_b64(b"a"), "a.png", "image/png")
        b = await storage.upload(_b64(b"a"), "a.png", "image/png")
        assert a.key != b.key

    async def test_invalid_base64(self, storage, mock_s3):
        with pytest.raises(MediaError, match="base64"):
            await storage.upload("not base64!!", "x.png", "image/png")
        mock_s3.put_object.assert_not_called()

    async def test_too_large(self, storage, mock_s3):
        with pytest.raises(MediaError, match="File size too large"):
            await storage.upload(_b64(b"x" * 2048), "x.png", "image/png")
        mock_s3.put_object.assert_not_called()


class TestDelete:

    async def test_by_key(self, storage, mock_s3):
        assert await storage.delete(key="about/a.png") == "about/a.png"
        mock_s3.delete_object.assert_called_once_with(Bucket="media", Key="about/a.png")

    async def test_by_url(self, storage, mock_s3):
        await storage.delete(url="https://media.example.com/about/a.png")
        mock_s3.delete_object.assert_called_once_with(Bucket="media", Key="about/a.png")

    async def test_foreign_url_rejected(self, storage, mock_s3):
        with pytest.raises(MediaError):
            await storage.delete(url="https://elsewhere.com/a.png")
        mock_s3.delete_object.assert_not_called()


class TestClientInit:

    def test_lazy_client(self):
        s = S3MediaStorage(bucket="media", base_url="https://m", region="eu-west-1")
        with patch("boto3.client") as mock_client:
            s._get_client()
            s._get_client()
        mock_client.assert_called_once_with("s3", region_name="eu-west-1")

    def test_from_settings(self, override_settings):
        override_settings(MEDIA_BUCKET="site", MEDIA_PUBLIC_BASE_URL="https://cdn.site", MEDIA_MAX_BYTES="10")
        s = S3MediaStorage.from_settings()
        assert s.key_for_url("https://cdn.site/a/b.png") == "a/b.png"
        assert s._max_bytes == 10

"""Shared fixtures for the content service test suite."""

import base64
import json

import pytest

from content_service.config.settings import get_settings
from content_service.store.database import ContentStore


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(ROUTE_PREFIX="/api", MEDIA_BUCKET="test-bucket")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()


@pytest.fixture
async def store(tmp_path):
    """Opened ContentStore on a throwaway SQLite file with the schema created."""
    s = ContentStore(f"sqlite+aiosqlite:///{tmp_path / 'content.db'}")
    await s.open()
    await s.create_schema()
    yield s
    await s.close()


def make_event(method: str, path: str, body=None, headers: dict | None = None, path_params: dict | None = None) -> dict:
    """API Gateway REST (v1) proxy event."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return {
        "httpMethod": method,
        "path": path,
        "headers": headers or {"Content-Type": "application/json"},
        "pathParameters": path_params,
        "queryStringParameters": None,
        "body": body,
        "isBase64Encoded": False,
    }


def make_v2_event(method: str, raw_path: str, body=None, base64_body: bool = False) -> dict:
    """API Gateway HTTP API (v2) proxy event."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    if body is not None and base64_body:
        body = base64.b64encode(body.encode("utf-8")).decode("ascii")
    return {
        "version": "2.0",
        "rawPath": raw_path,
        "headers": {"content-type": "application/json"},
        "requestContext": {"http": {"method": method, "path": raw_path}},
        "body": body,
        "isBase64Encoded": base64_body,
    }


def body_of(result: dict) -> dict:
    """Parsed JSON body of a Lambda proxy result."""
    return json.loads(result["body"])

"""Request/response types and the JSON envelope used by every endpoint.

Envelope: {"success": bool, "message"?: str, "data"?: any, "error"?: str}
"""

import base64
import json
from dataclasses import dataclass, field
from typing import Any

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
}

_UNSET = object()


class InvalidBody(ValueError):
    """The request body is not valid JSON."""


@dataclass
class ApiRequest:
    method: str
    path: str  # normalized, prefix stripped
    path_params: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def json(self) -> Any:
        """Parsed body; an empty body reads as {}."""
        if not self.body:
            return {}
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise InvalidBody(f"Invalid JSON body: {e}") from e

    @classmethod
    def from_event(cls, event: dict, path: str) -> "ApiRequest":
        """Build from an API Gateway proxy event (REST v1 or HTTP API v2)."""
        body = event.get("body") or ""
        if body and event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")
        return cls(
            method=event_method(event),
            path=path,
            path_params=dict(event.get("pathParameters") or {}),
            query=dict(event.get("queryStringParameters") or {}),
            headers={k.lower(): v for k, v in (event.get("headers") or {}).items()},
            body=body,
        )


@dataclass
class ApiResponse:
    status_code: int
    body: dict | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def to_lambda(self) -> dict:
        """Lambda proxy integration result with CORS headers attached."""
        headers = {**self.headers, **CORS_HEADERS}
        if self.body is None:
            return {"statusCode": self.status_code, "headers": headers, "body": ""}
        headers.setdefault("Content-Type", "application/json")
        return {
            "statusCode": self.status_code,
            "headers": headers,
            "body": json.dumps(self.body, default=str),
        }


def _http_context(event: dict) -> dict:
    """HTTP API v2 `requestContext.http`, or {} when absent or null."""
    return (event.get("requestContext") or {}).get("http") or {}


def event_method(event: dict) -> str:
    method = event.get("httpMethod") or _http_context(event).get("method")
    return (method or "GET").upper()


def event_path(event: dict) -> str:
    path = event.get("path")
    if isinstance(path, str):
        return path
    path = _http_context(event).get("path") or event.get("rawPath")
    return path if isinstance(path, str) else ""


def envelope(success: bool, message: str | None = None, data: Any = _UNSET, error: str | None = None) -> dict:
    body: dict[str, Any] = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not _UNSET:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def success(data: Any = None, message: str | None = None, status_code: int = 200) -> ApiResponse:
    return ApiResponse(status_code, envelope(True, message, data))


def created(data: Any, message: str) -> ApiResponse:
    return success(data, message, status_code=201)


def bad_request(message: str, errors: list[dict] | None = None) -> ApiResponse:
    body = envelope(False, message)
    if errors:
        body["errors"] = errors
    return ApiResponse(400, body)


def not_found(message: str) -> ApiResponse:
    return ApiResponse(404, envelope(False, message))


def server_error(message: str, error: Exception | str) -> ApiResponse:
    return ApiResponse(500, envelope(False, message, error=str(error)))


def preflight() -> ApiResponse:
    """CORS preflight: headers only, empty body."""
    return ApiResponse(200, None, {"Access-Control-Allow-Credentials": "false"})


def endpoint_not_found() -> ApiResponse:
    return not_found("Endpoint not found")

"""HTTP client the admin console uses to talk to the content API."""

from typing import Any

import httpx

from content_service.config.settings import get_settings
from content_service.errors import ContentApiError


class ContentApiClient:
    """Unwraps the API envelope: returns `data` on success, raises ContentApiError otherwise."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.admin_api_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.admin_request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=10.0),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, self.base_url + path, json=json)
        except httpx.ConnectError:
            raise ContentApiError(502, "Cannot reach content API")
        except httpx.TimeoutException:
            raise ContentApiError(504, "Content API timed out")
        except httpx.HTTPError as e:
            raise ContentApiError(502, f"Content API error: {e}")

        try:
            body = response.json()
        except ValueError:
            raise ContentApiError(response.status_code, f"Unexpected response: {response.text[:200]}")

        if not isinstance(body, dict):
            raise ContentApiError(response.status_code, "Unexpected response envelope")
        if response.is_error or not body.get("success", False):
            message = body.get("error") or body.get("message") or f"HTTP {response.status_code}"
            raise ContentApiError(response.status_code, message)
        return body.get("data")

    # --- Reads ---

    async def get_admin_content(self) -> dict:
        return await self._request("GET", "/admin")

    async def get_section_content(self, key: str) -> dict:
        return await self._request("GET", f"/section/{key}")

    # --- Writes ---

    async def update_section(self, section_id: str, data: dict) -> dict:
        return await self._request("PUT", f"/sections/{section_id}", json=data)

    async def create_item(self, data: dict) -> dict:
        return await self._request("POST", "/items", json=data)

    async def update_item(self, item_id: str, data: dict) -> dict:
        return await self._request("PUT", f"/items/{item_id}", json=data)

    async def delete_item(self, item_id: str) -> None:
        await self._request("DELETE", f"/items/{item_id}")

    # --- Media ---

    async def upload_image(self, file_b64: str, filename: str, content_type: str, folder: str) -> dict:
        return await self._request(
            "POST",
            "/media/upload",
            json={"file": file_b64, "filename": filename, "contentType": content_type, "folder": folder},
        )

    async def delete_image(self, url: str = "", key: str = "") -> None:
        await self._request("POST", "/media/delete", json={"url": url, "key": key})

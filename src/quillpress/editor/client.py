"""HTTP sink that sends editor saves to the posts API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from quillpress.core.errors import (
    Forbidden,
    InternalError,
    NotFound,
    QuillError,
    Unauthorized,
    ValidationFailed,
)
from quillpress.core.settings import settings

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[QuillError]] = {
    400: ValidationFailed,
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
}


class ApiDraftSink:
    """`DraftSink` backed by `POST /api/v1/posts/` and `PATCH /api/v1/posts/{id}`."""

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self.timeout_seconds),
                    headers={settings.token_header_name: self.token},
                    transport=self._transport,
                )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        client = await self._ensure_client()
        try:
            response = await client.request(method, path, json=payload)
        except httpx.HTTPError as exc:
            raise InternalError(f"Save request failed: {exc}") from exc

        if response.status_code >= 400:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = None
            error_type = _STATUS_ERRORS.get(response.status_code, InternalError)
            logger.debug("%s %s -> %s", method, path, response.status_code)
            raise error_type(detail if isinstance(detail, str) else None)
        return response.json()

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/api/v1/posts/", payload)

    async def update(self, post_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PATCH", f"/api/v1/posts/{post_id}", payload)

# Overview: Centralized async API client for all server communication.

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from .errors import MESSAGES, MalformedResponseError, NetworkError, application_error


logger = logging.getLogger(__name__)

API_PREFIX = "/api"


class Transport:
    """
    JSON-over-HTTP client.

    Every call returns the decoded reply dict when the server says ok, and
    raises otherwise:
    - NetworkError: connection refused, DNS failure, timeout
    - MalformedResponseError: reply is not JSON / not an object
    - ApplicationError (or subclass): reply is {"ok": false, "error": ...}
      or an HTTP error status carrying a JSON error
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        *,
        params: Optional[dict] = None,
        files: Optional[dict] = None,
    ) -> dict:
        url = f"{API_PREFIX}{path}"
        try:
            response = await self._client.request(
                method,
                url,
                json=body if files is None else None,
                params=params,
                files=files,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out: %s", method, url, e)
            raise NetworkError("Server unreachable. Please check your connection.") from e
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError("Server unreachable. Please check your connection.") from e

        return self._decode(method, url, response)

    def _decode(self, method: str, url: str, response: httpx.Response) -> dict:
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error("Non-JSON response from %s %s: %s", method, url, response.text[:200])
            raise MalformedResponseError("Server returned an invalid response. Please try again.")

        try:
            data: Any = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Undecodable JSON from %s %s", method, url)
            raise MalformedResponseError("Server returned an invalid response. Please try again.") from e

        if not isinstance(data, dict):
            raise MalformedResponseError("Server returned an invalid response. Please try again.")

        if data.get("ok") is False or (response.is_error and not data.get("ok")):
            raise application_error(data, default=MESSAGES["generic"])

        return data

    async def get(self, path: str, params: Optional[dict] = None) -> dict:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Optional[dict] = None, *, params: Optional[dict] = None) -> dict:
        return await self.request("POST", path, body, params=params)

    async def upload(
        self,
        path: str,
        field: str,
        filename: str,
        content: bytes,
        content_type: str,
        *,
        params: Optional[dict] = None,
    ) -> dict:
        """Multipart POST of a single file under `field`."""
        files = {field: (filename, content, content_type)}
        return await self.request("POST", path, params=params, files=files)

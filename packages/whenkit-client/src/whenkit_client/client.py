"""Async client for the datasource resource endpoints.

The datasource plugin exposes its helpers under
``/api/datasources/{id}/resources/<name>``. Only the request/response
contracts are used here; the endpoints themselves live in the plugin backend.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from whenkit_client.errors import (
    AccessDeniedError,
    AuthenticationError,
    ClientError,
    ConfigurationError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    RequestError,
    RequestTimeoutError,
    ServerError,
    error_message_from_body,
)
from whenkit_client.types import NamedItem, ValidateConditionRequest, ValidationResult

logger = logging.getLogger(__name__)

_STATUS_MAP: dict[int, type[RequestError]] = {
    400: InvalidRequestError,
    401: AuthenticationError,
    403: AccessDeniedError,
    404: NotFoundError,
    422: InvalidRequestError,
    500: ServerError,
    502: ServerError,
    503: ServerError,
    504: ServerError,
}


def _wire_condition(condition: Any) -> Any:
    if hasattr(condition, "to_json"):
        return condition.to_json()
    return condition


class DatasourceClient:
    """Talks to one datasource instance through the host's resource proxy."""

    def __init__(
        self,
        base_url: str,
        datasource_id: int | str,
        api_key: str = "",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        if not base_url:
            raise ConfigurationError("A base URL is required")
        self._base_url = base_url.rstrip("/")
        self._datasource_id = datasource_id
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = http_client or httpx.AsyncClient(
            headers=headers, timeout=httpx.Timeout(timeout)
        )

    @classmethod
    def from_env(cls) -> DatasourceClient:
        """Build a client from WHENKIT_* environment variables."""
        base_url = os.environ.get("WHENKIT_GRAFANA_URL", "")
        datasource_id = os.environ.get("WHENKIT_DATASOURCE_ID", "")
        if not base_url or not datasource_id:
            raise ConfigurationError(
                "Set WHENKIT_GRAFANA_URL and WHENKIT_DATASOURCE_ID to reach a datasource."
            )
        return cls(
            base_url=base_url,
            datasource_id=datasource_id,
            api_key=os.environ.get("WHENKIT_API_KEY", ""),
        )

    @property
    def datasource_id(self) -> int | str:
        return self._datasource_id

    def resource_url(self, name: str) -> str:
        return f"{self._base_url}/api/datasources/{self._datasource_id}/resources/{name}"

    async def validate_condition(self, bucket: str, entry: str, condition: Any) -> ValidationResult:
        """Ask the datasource whether ``condition`` is accepted for bucket/entry."""
        body = ValidateConditionRequest(
            bucket=bucket, entry=entry, condition=_wire_condition(condition)
        )
        data = await self._post("validateCondition", body.model_dump())
        try:
            return ValidationResult.model_validate(data)
        except PydanticValidationError as err:
            raise ClientError("Malformed validation response", data=_as_dict(data), cause=err)

    async def list_buckets(self) -> list[str]:
        data = await self._get("listBuckets")
        return [item.name for item in self._parse_names(data)]

    async def list_entries(self, bucket: str) -> list[str]:
        data = await self._post("listEntries", {"bucket": bucket})
        return [item.name for item in self._parse_names(data)]

    async def close(self) -> None:
        await self._client.aclose()

    # -- Transport --

    async def _get(self, name: str) -> Any:
        return await self._send("GET", name)

    async def _post(self, name: str, body: dict[str, Any]) -> Any:
        return await self._send("POST", name, json=body)

    async def _send(self, method: str, name: str, **kwargs: Any) -> Any:
        url = self.resource_url(name)
        logger.debug("%s %s", method, url)
        try:
            http_resp = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as err:
            raise RequestTimeoutError(f"Request to '{name}' timed out", cause=err)
        except httpx.TransportError as err:
            raise NetworkError(f"Request to '{name}' failed: {err}", cause=err)
        if http_resp.status_code >= 400:
            self._raise_error(http_resp)
        try:
            return http_resp.json()
        except ValueError as err:
            raise ClientError(f"Response from '{name}' is not JSON", cause=err)

    def _raise_error(self, http_resp: httpx.Response) -> None:
        try:
            body: Any = http_resp.json()
        except ValueError:
            body = http_resp.text
        message = error_message_from_body(body, f"HTTP {http_resp.status_code}")
        status = http_resp.status_code
        error_cls = _STATUS_MAP.get(status)
        if error_cls is None:
            error_cls = ServerError if status >= 500 else RequestError
        logger.warning("Resource call failed with HTTP %s: %s", status, message)
        raise error_cls(message, status_code=status, data=_as_dict(body))

    @staticmethod
    def _parse_names(data: Any) -> list[NamedItem]:
        if not isinstance(data, list):
            raise ClientError("Expected a list response", data=_as_dict(data))
        try:
            return [NamedItem.model_validate(item) for item in data]
        except PydanticValidationError as err:
            raise ClientError("Malformed list response", cause=err)


def _as_dict(body: Any) -> dict[str, Any] | None:
    return body if isinstance(body, dict) else None

"""Tests for the datasource resource client."""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from whenkit.values import ConditionValue
from whenkit_client import (
    AccessDeniedError,
    AuthenticationError,
    ClientError,
    ConfigurationError,
    DatasourceClient,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    RequestError,
    RequestTimeoutError,
    ServerError,
    ValidationResult,
)

BASE = "http://grafana.local"
RESOURCES = f"{BASE}/api/datasources/3/resources"


@pytest.fixture
def client() -> DatasourceClient:
    return DatasourceClient(BASE, 3, api_key="secret")


class TestConstruction:
    def test_requires_base_url(self):
        with pytest.raises(ConfigurationError):
            DatasourceClient("", 1)

    def test_resource_url_strips_slash(self):
        c = DatasourceClient("http://grafana.local/", "uid-1")
        assert c.resource_url("listBuckets") == "http://grafana.local/api/datasources/uid-1/resources/listBuckets"
        assert c.datasource_id == "uid-1"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WHENKIT_GRAFANA_URL", BASE)
        monkeypatch.setenv("WHENKIT_DATASOURCE_ID", "3")
        monkeypatch.delenv("WHENKIT_API_KEY", raising=False)
        c = DatasourceClient.from_env()
        assert c.resource_url("x") == f"{RESOURCES}/x"

    def test_from_env_missing(self, monkeypatch):
        monkeypatch.setenv("WHENKIT_GRAFANA_URL", BASE)
        monkeypatch.delenv("WHENKIT_DATASOURCE_ID", raising=False)
        with pytest.raises(ConfigurationError):
            DatasourceClient.from_env()


class TestValidateCondition:
    @pytest.mark.asyncio
    async def test_structured_condition(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/validateCondition", json={"valid": True})
        condition = ConditionValue.from_json({"&a": {"$gt": 1}})
        result = await client.validate_condition("b", "e", condition)
        assert result == ValidationResult(valid=True)

        request = httpx_mock.get_requests()[0]
        assert request.method == "POST"
        assert request.headers["authorization"] == "Bearer secret"
        assert json.loads(request.content) == {
            "bucket": "b",
            "entry": "e",
            "condition": {"&a": {"$gt": 1}},
        }

    @pytest.mark.asyncio
    async def test_raw_condition(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=f"{RESOURCES}/validateCondition", json={"valid": False, "error": "Invalid JSON"}
        )
        result = await client.validate_condition("b", "e", "{ broken")
        assert result.valid is False
        assert result.error == "Invalid JSON"
        assert json.loads(httpx_mock.get_requests()[0].content)["condition"] == "{ broken"

    @pytest.mark.asyncio
    async def test_malformed_response(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/validateCondition", json={"ok": True})
        with pytest.raises(ClientError) as exc_info:
            await client.validate_condition("b", "e", "x")
        assert exc_info.value.data == {"ok": True}

    @pytest.mark.asyncio
    async def test_non_json_response(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/validateCondition", text="<html>")
        with pytest.raises(ClientError):
            await client.validate_condition("b", "e", "x")


class TestListing:
    @pytest.mark.asyncio
    async def test_list_buckets(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url=f"{RESOURCES}/listBuckets", json=[{"name": "a"}, {"name": "b", "extra": 1}]
        )
        assert await client.list_buckets() == ["a", "b"]
        assert httpx_mock.get_requests()[0].method == "GET"

    @pytest.mark.asyncio
    async def test_list_entries(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listEntries", json=[{"name": "sensors"}])
        assert await client.list_entries("a") == ["sensors"]
        assert json.loads(httpx_mock.get_requests()[0].content) == {"bucket": "a"}

    @pytest.mark.asyncio
    async def test_non_list_response(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listBuckets", json={"items": []})
        with pytest.raises(ClientError):
            await client.list_buckets()

    @pytest.mark.asyncio
    async def test_malformed_item(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listBuckets", json=[{"title": "a"}])
        with pytest.raises(ClientError):
            await client.list_buckets()


class TestErrorMapping:
    @pytest.mark.parametrize("status,error_cls", [
        (400, InvalidRequestError),
        (401, AuthenticationError),
        (403, AccessDeniedError),
        (404, NotFoundError),
        (422, InvalidRequestError),
        (500, ServerError),
        (503, ServerError),
        (507, ServerError),
        (418, RequestError),
    ])
    @pytest.mark.asyncio
    async def test_status_codes(self, client, httpx_mock: HTTPXMock, status, error_cls):
        httpx_mock.add_response(
            url=f"{RESOURCES}/listBuckets", status_code=status, json={"message": "nope"}
        )
        with pytest.raises(error_cls) as exc_info:
            await client.list_buckets()
        assert exc_info.value.status_code == status
        assert exc_info.value.message == "nope"
        assert exc_info.value.data == {"message": "nope"}

    @pytest.mark.asyncio
    async def test_text_error_body(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listBuckets", status_code=502, text="Bad gateway")
        with pytest.raises(ServerError) as exc_info:
            await client.list_buckets()
        assert exc_info.value.message == "Bad gateway"
        assert exc_info.value.data is None
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_empty_error_body(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listBuckets", status_code=404)
        with pytest.raises(NotFoundError) as exc_info:
            await client.list_buckets()
        assert exc_info.value.message == "HTTP 404"

    @pytest.mark.asyncio
    async def test_timeout(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ReadTimeout("slow"))
        with pytest.raises(RequestTimeoutError) as exc_info:
            await client.list_buckets()
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_connect_error(self, client, httpx_mock: HTTPXMock):
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        with pytest.raises(NetworkError) as exc_info:
            await client.validate_condition("b", "e", "x")
        assert "refused" in exc_info.value.message


class TestInjectedClient:
    @pytest.mark.asyncio
    async def test_uses_given_http_client(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(url=f"{RESOURCES}/listBuckets", json=[])
        async with httpx.AsyncClient() as http:
            c = DatasourceClient(BASE, 3, http_client=http)
            assert await c.list_buckets() == []

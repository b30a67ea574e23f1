"""
Room Catalog Tests - API Client Tests.

Tests for LayoutsApiClient CRUD calls, error mapping and health checks.
"""

from typing import Any, Dict, List
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from room_catalog.api_client import LayoutsApiClient
from room_catalog.exceptions import LayoutNotFoundException, LayoutsApiError
from room_catalog.forms import build_payload


def _response(method: str, url: str, status_code: int = 200, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request(method, url), **kwargs)


@pytest.fixture
def client(api_url: str) -> LayoutsApiClient:
    """
    Create a LayoutsApiClient instance for testing.

    Returns:
        LayoutsApiClient pointed at the test collection URL
    """
    return LayoutsApiClient(base_url=api_url + "/", timeout=2.0)


def test_base_url_is_normalised(client: LayoutsApiClient, api_url: str) -> None:
    assert client.base_url == api_url
    assert client.timeout == 2.0


@pytest.mark.asyncio
async def test_list_layouts(
    client: LayoutsApiClient, api_url: str, raw_layouts: List[Dict[str, Any]]
) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", api_url, json=raw_layouts)

        layouts = await client.list_layouts()

        assert [layout.id for layout in layouts] == ["1", "2", "3", "4"]
        assert layouts[0].room_name == "Master Bedroom"
        assert layouts[2].available is None
        mock_request.assert_awaited_once()
        assert mock_request.await_args.args == ("GET", api_url)


@pytest.mark.asyncio
async def test_get_layout(
    client: LayoutsApiClient, api_url: str, raw_layouts: List[Dict[str, Any]]
) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", f"{api_url}/2", json=raw_layouts[1])

        layout = await client.get_layout("2")

        assert layout.id == "2"
        assert layout.available is False
        assert mock_request.await_args.args == ("GET", f"{api_url}/2")


@pytest.mark.asyncio
async def test_get_layout_not_found(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(
            "GET", f"{api_url}/99", status_code=404, json="Not found"
        )

        with pytest.raises(LayoutNotFoundException) as exc_info:
            await client.get_layout("99")

        assert exc_info.value.layout_id == "99"
        assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_create_layout_posts_payload(
    client: LayoutsApiClient, api_url: str, valid_form: Dict[str, str]
) -> None:
    payload = build_payload(valid_form)
    created = {"id": "17", **payload.to_api()}

    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("POST", api_url, status_code=201, json=created)

        layout = await client.create_layout(payload)

        assert layout.id == "17"
        assert layout.length == 14.5
        assert mock_request.await_args.args == ("POST", api_url)
        assert mock_request.await_args.kwargs["json"] == payload.to_api()


@pytest.mark.asyncio
async def test_update_layout_puts_full_record(
    client: LayoutsApiClient, api_url: str, valid_form: Dict[str, str]
) -> None:
    payload = build_payload(valid_form)

    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response(
            "PUT", f"{api_url}/3", json={"id": "3", **payload.to_api()}
        )

        layout = await client.update_layout("3", payload)

        assert layout.room_name == "Guest Room"
        assert mock_request.await_args.args == ("PUT", f"{api_url}/3")
        assert set(mock_request.await_args.kwargs["json"]) == {
            "roomName",
            "width",
            "length",
            "image",
            "notes",
            "price",
            "discount",
            "available",
        }


@pytest.mark.asyncio
async def test_delete_layout(
    client: LayoutsApiClient, api_url: str, raw_layouts: List[Dict[str, Any]]
) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("DELETE", f"{api_url}/1", json=raw_layouts[0])

        result = await client.delete_layout("1")

        assert result["id"] == "1"
        assert mock_request.await_args.args == ("DELETE", f"{api_url}/1")


@pytest.mark.asyncio
async def test_layout_id_is_percent_encoded(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("DELETE", f"{api_url}/1%3Fx", json={})

        await client.delete_layout("1?x")

        assert mock_request.await_args.args == ("DELETE", f"{api_url}/1%3Fx")


@pytest.mark.asyncio
async def test_request_timeout(client: LayoutsApiClient) -> None:
    with patch(
        "httpx.AsyncClient.request",
        side_effect=httpx.ReadTimeout("Request timeout"),
    ):
        with pytest.raises(LayoutsApiError) as exc_info:
            await client.list_layouts()

        assert "timed out" in exc_info.value.message
        assert exc_info.value.details["error_type"] == "timeout"


@pytest.mark.asyncio
async def test_connection_error(client: LayoutsApiClient) -> None:
    with patch(
        "httpx.AsyncClient.request",
        side_effect=httpx.ConnectError("Connection refused"),
    ):
        with pytest.raises(LayoutsApiError) as exc_info:
            await client.list_layouts()

        assert "connect" in exc_info.value.message.lower()
        assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_server_error(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", api_url, status_code=500, text="boom")

        with pytest.raises(LayoutsApiError) as exc_info:
            await client.list_layouts()

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, LayoutNotFoundException)


@pytest.mark.asyncio
async def test_invalid_json_body(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", api_url, text="<html>oops</html>")

        with pytest.raises(LayoutsApiError) as exc_info:
            await client.list_layouts()

        assert exc_info.value.details["error_type"] == "invalid_body"


@pytest.mark.asyncio
async def test_collection_must_be_a_list(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", api_url, json={"items": []})

        with pytest.raises(LayoutsApiError):
            await client.list_layouts()


@pytest.mark.asyncio
async def test_malformed_record(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.request", new_callable=AsyncMock) as mock_request:
        mock_request.return_value = _response("GET", api_url, json=[{"roomName": "No id"}])

        with pytest.raises(LayoutsApiError) as exc_info:
            await client.list_layouts()

        assert exc_info.value.details["error_type"] == "invalid_record"


@pytest.mark.asyncio
async def test_health_check_healthy(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response("GET", api_url, json=[])

        assert await client.health_check() is True


@pytest.mark.asyncio
async def test_health_check_bad_status(client: LayoutsApiClient, api_url: str) -> None:
    with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = _response("GET", api_url, status_code=503)

        assert await client.health_check() is False


@pytest.mark.asyncio
async def test_health_check_unreachable(client: LayoutsApiClient) -> None:
    with patch("httpx.AsyncClient.get", side_effect=httpx.ConnectError("Connection refused")):
        assert await client.health_check() is False


@pytest.mark.asyncio
async def test_close_releases_client(client: LayoutsApiClient) -> None:
    await client._get_client()
    assert client._client is not None

    await client.close()

    assert client._client is None

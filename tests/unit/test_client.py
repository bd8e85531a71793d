"""Unit tests for RetoolClient, using httpx.MockTransport."""

import json

import httpx
import pytest

from retool_cli.client import RetoolClient, RetoolClientError
from retool_cli.errors import RemoteError


def transport_for(handler, seen=None):
    def record(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    return httpx.MockTransport(record)


@pytest.mark.cli_unit
class TestRetoolClient:
    """Tests for RetoolClient requests and error mapping."""

    @pytest.mark.asyncio
    async def test_auth_headers_and_cookies(self, base_record):
        seen = []
        transport = transport_for(lambda r: httpx.Response(200, json={"resources": []}), seen)

        async with RetoolClient(base_record, transport=transport) as client:
            await client.list_resources()

        request = seen[0]
        assert str(request.url) == "https://my-org.retool.com/api/resources"
        assert request.headers["x-xsrf-token"] == base_record.session_token
        assert f"accessToken={base_record.access_token}" in request.headers["cookie"]
        assert f"xsrfToken={base_record.session_token}" in request.headers["cookie"]

    @pytest.mark.asyncio
    async def test_get_grid_info(self, base_record):
        seen = []
        transport = transport_for(
            lambda r: httpx.Response(200, json={"gridInfo": {"id": "grid-1"}}), seen
        )

        async with RetoolClient(base_record, transport=transport) as client:
            info = await client.get_grid_info("db-uuid-1")

        assert info == {"id": "grid-1"}
        assert seen[0].url.path == "/api/grid/retooldb/db-uuid-1"
        assert seen[0].url.params["env"] == "production"

    @pytest.mark.asyncio
    async def test_grid_action_body(self, base_record):
        seen = []
        transport = transport_for(lambda r: httpx.Response(200, json={"success": True}), seen)

        async with RetoolClient(base_record, transport=transport) as client:
            result = await client.grid_action("grid-1", "DeleteTable", {"table": "orders"})

        assert result == {"success": True}
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/grid/grid-1/action"
        assert json.loads(seen[0].content) == {"kind": "DeleteTable", "payload": {"table": "orders"}}

    @pytest.mark.asyncio
    async def test_delete_page_body(self, base_record):
        seen = []
        transport = transport_for(lambda r: httpx.Response(200), seen)

        async with RetoolClient(base_record, transport=transport) as client:
            result = await client.delete_page(42)

        assert result == {}
        assert seen[0].url.path == "/api/folders/deletePage"
        assert json.loads(seen[0].content) == {"pageId": 42}

    @pytest.mark.asyncio
    async def test_http_error_uses_body_message(self, base_record):
        transport = transport_for(lambda r: httpx.Response(500, json={"message": "grid exploded"}))

        async with RetoolClient(base_record, transport=transport) as client:
            with pytest.raises(RetoolClientError) as exc_info:
                await client.list_tables("grid-1")

        assert exc_info.value.status_code == 500
        assert "grid exploded" in exc_info.value.message
        assert isinstance(exc_info.value, RemoteError)

    @pytest.mark.asyncio
    async def test_unauthorized_suggests_login(self, base_record):
        transport = transport_for(lambda r: httpx.Response(401, text="denied"))

        async with RetoolClient(base_record, transport=transport) as client:
            with pytest.raises(RetoolClientError) as exc_info:
                await client.list_workflows()

        assert exc_info.value.status_code == 401
        assert "retool login" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_connect_error(self, base_record):
        def refuse(request):
            raise httpx.ConnectError("refused", request=request)

        async with RetoolClient(base_record, transport=transport_for(refuse)) as client:
            with pytest.raises(RetoolClientError, match="Cannot connect"):
                await client.list_resources()

    @pytest.mark.asyncio
    async def test_timeout(self, base_record):
        def slow(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with RetoolClient(base_record, timeout=1.0, transport=transport_for(slow)) as client:
            with pytest.raises(RetoolClientError, match="timed out after 1.0s"):
                await client.list_pages()

    @pytest.mark.asyncio
    async def test_requires_context(self, base_record):
        client = RetoolClient(base_record)

        with pytest.raises(RetoolClientError, match="async with"):
            await client.list_resources()

    @pytest.mark.asyncio
    async def test_html_body_is_remote_error(self, base_record):
        """A login page served with 200 is reported, not raised as a decode error."""
        transport = transport_for(
            lambda r: httpx.Response(200, text="<html><body>Sign in</body></html>")
        )

        async with RetoolClient(base_record, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.list_resources()

        assert isinstance(exc_info.value, RetoolClientError)
        assert exc_info.value.status_code == 200
        assert "non-JSON" in exc_info.value.message
        assert "retool login" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error(self, base_record):
        def drop(request):
            raise httpx.ReadError("connection reset", request=request)

        async with RetoolClient(base_record, transport=transport_for(drop)) as client:
            with pytest.raises(RetoolClientError, match="connection reset"):
                await client.list_workflows()

    @pytest.mark.asyncio
    async def test_create_page_body(self, base_record):
        seen = []
        transport = transport_for(
            lambda r: httpx.Response(200, json={"page": {"uuid": "page-9"}}), seen
        )

        async with RetoolClient(base_record, transport=transport) as client:
            result = await client.create_page("Dashboard")

        assert result == {"page": {"uuid": "page-9"}}
        assert seen[0].url.path == "/api/pages/createPage"
        assert json.loads(seen[0].content) == {
            "pageName": "Dashboard",
            "isGlobalWidget": False,
            "isMobileApp": False,
            "multiScreenMobileApp": False,
        }

    @pytest.mark.asyncio
    async def test_export_page_returns_raw_body(self, base_record):
        seen = []
        transport = transport_for(lambda r: httpx.Response(200, content=b'{"page": {}}'), seen)

        async with RetoolClient(base_record, transport=transport) as client:
            body = await client.export_page("page-9")

        assert body == b'{"page": {}}'
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/pages/uuids/page-9/export"

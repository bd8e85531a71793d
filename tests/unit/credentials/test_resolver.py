"""Unit tests for retool_cli.credentials.resolver."""

import pytest

from retool_cli.credentials import resolve_db_credentials
from retool_cli.errors import NotFoundError, RemoteError, RetoolDBNotFoundError


@pytest.mark.cli_unit
class TestResolveDBCredentials:
    """Tests for resolve_db_credentials."""

    @pytest.mark.asyncio
    async def test_no_record_is_noop(self, mock_retool_client, store):
        """Without credentials nothing is fetched or written."""
        result = await resolve_db_credentials(None, mock_retool_client, store)

        assert result is None
        mock_retool_client.list_resources.assert_not_awaited()
        assert store.exists() is False

    @pytest.mark.asyncio
    async def test_resolves_and_persists(self, mock_retool_client, store, base_record):
        """One retool_db resource yields a persisted, merged record."""
        store.persist(base_record)

        result = await resolve_db_credentials(base_record, mock_retool_client, store)

        assert result.retool_db_uuid == "db-uuid-1"
        assert result.grid_id == "grid-1"
        assert result.has_connection_string is True
        assert (result.domain, result.session_token, result.access_token) == (
            base_record.domain,
            base_record.session_token,
            base_record.access_token,
        )
        assert store.load() == result
        mock_retool_client.get_grid_info.assert_awaited_once_with("db-uuid-1", env="production")

    @pytest.mark.asyncio
    async def test_preserves_profile_fields(self, mock_retool_client, store, base_record):
        """Fields set before resolution survive the merge."""
        record = base_record.merge(email="ada@example.com", first_name="Ada")

        result = await resolve_db_credentials(record, mock_retool_client, store)

        assert result.email == "ada@example.com"
        assert result.first_name == "Ada"

    @pytest.mark.asyncio
    async def test_empty_connection_string(self, mock_retool_client, store, base_record):
        """An empty connection string resolves to False."""
        mock_retool_client.get_grid_info.return_value = {"id": "grid-9", "connectionString": ""}

        result = await resolve_db_credentials(base_record, mock_retool_client, store)

        assert result.grid_id == "grid-9"
        assert result.has_connection_string is False

    @pytest.mark.asyncio
    async def test_not_found_leaves_record_untouched(self, mock_retool_client, store, base_record):
        """No retool_db resource raises and persists nothing new."""
        store.persist(base_record)
        mock_retool_client.list_resources.return_value = [{"name": "x", "displayName": "postgres"}]

        with pytest.raises(RetoolDBNotFoundError) as exc_info:
            await resolve_db_credentials(base_record, mock_retool_client, store)

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.count == 0
        assert "https://my-org.retool.com/resources" in exc_info.value.message
        assert store.load() == base_record
        mock_retool_client.get_grid_info.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cached_credentials_skip_fetch(self, mock_retool_client, store, full_record):
        """Already-resolved records are returned as-is unless forced."""
        result = await resolve_db_credentials(full_record, mock_retool_client, store)

        assert result is full_record
        mock_retool_client.list_resources.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_force_refresh_refetches(self, mock_retool_client, store, full_record):
        """force_refresh performs the round trip even when cached."""
        mock_retool_client.get_grid_info.return_value = {"id": "grid-2", "connectionString": "x"}

        result = await resolve_db_credentials(
            full_record, mock_retool_client, store, force_refresh=True
        )

        assert result.grid_id == "grid-2"
        mock_retool_client.list_resources.assert_awaited_once()
        assert store.load().grid_id == "grid-2"

    @pytest.mark.asyncio
    async def test_remote_error_propagates(self, mock_retool_client, store, base_record):
        """Request failures surface to the caller."""
        mock_retool_client.list_resources.side_effect = RemoteError("boom", status_code=500)

        with pytest.raises(RemoteError):
            await resolve_db_credentials(base_record, mock_retool_client, store)

        assert store.exists() is False

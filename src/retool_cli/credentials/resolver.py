"""Derived credential resolution.

After login the CLI only knows the base credentials. Everything that touches
Retool DB also needs the Retool DB resource identifier and the grid id, which
take an extra round trip to discover.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import RetoolDBNotFoundError
from ..shared.logging import get_logger
from .models import CredentialRecord

if TYPE_CHECKING:
    from ..client import RetoolClient
    from .store import CredentialStore

logger = get_logger(__name__)

RETOOL_DB_DISPLAY_NAME = "retool_db"
RETOOL_DB_ENV = "production"


async def resolve_db_credentials(
    record: CredentialRecord | None,
    client: RetoolClient,
    store: CredentialStore,
    force_refresh: bool = False,
) -> CredentialRecord | None:
    """Discover and persist the Retool DB identifiers for ``record``.

    Args:
        record: Current credential record (None if not logged in)
        client: Retool API client for the record's domain
        store: Store the merged record is written to
        force_refresh: Re-fetch even if the record already has DB credentials

    Returns:
        The merged record, ``record`` unchanged when nothing had to be fetched,
        or None when there is no record at all

    Raises:
        RetoolDBNotFoundError: If no resource is named "retool_db"
        RemoteError: If a request fails
    """
    if record is None:
        return None

    if record.has_db_credentials and not force_refresh:
        logger.debug("db_credentials_cached", grid_id=record.grid_id)
        return record

    # 1. Fetch all resources
    resources = await client.list_resources()

    # 2. Filter down to Retool DB
    retool_dbs = [r for r in resources if r.get("displayName") == RETOOL_DB_DISPLAY_NAME]
    if len(retool_dbs) < 1:
        raise RetoolDBNotFoundError(domain=record.domain)

    retool_db_uuid = retool_dbs[0].get("name")

    # 3. Fetch grid info
    grid = await client.get_grid_info(retool_db_uuid, env=RETOOL_DB_ENV)

    merged = record.merge(
        retool_db_uuid=retool_db_uuid,
        grid_id=grid.get("id"),
        has_connection_string=len(grid.get("connectionString") or "") > 0,
    )
    store.persist(merged)

    logger.info("db_credentials_resolved", grid_id=merged.grid_id, retool_db_uuid=retool_db_uuid)
    return merged

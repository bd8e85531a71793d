"""Remote resource services used by the scaffold pipelines.

The orchestrator only depends on the three protocols below. The Retool
implementations translate them into RetoolClient calls and check response
shapes, raising the errors in ``retool_cli.errors``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from ..errors import AmbiguousMatchError, ConflictError, NotFoundError, RemoteError
from ..shared.logging import get_logger
from .plan import PRIMARY_KEY_COLUMN
from .templates import build_crud_workflow, build_sample_rows

if TYPE_CHECKING:
    from ..client import RetoolClient
    from ..credentials.models import CredentialRecord

logger = get_logger(__name__)

# System folder that holds deleted apps
TRASH_FOLDER = "archive"


@dataclass(frozen=True)
class TableDescriptor:
    """A created table: its name, fields in order, and primary key."""

    name: str
    fields: tuple[str, ...]
    primary_key: str = PRIMARY_KEY_COLUMN

    @property
    def search_column(self) -> str:
        """First non-key field, falling back to the primary key."""
        for name in self.fields:
            if name != self.primary_key:
                return name
        return self.primary_key


class TableService(Protocol):
    """Retool DB table operations."""

    async def create_table(
        self, name: str, columns: tuple[str, ...], rows: tuple[dict[str, Any], ...] | None = None
    ) -> TableDescriptor: ...

    async def insert_sample_data(self, name: str) -> None: ...

    async def delete_table(self, name: str) -> None: ...

    async def find_tables_by_name(self, name: str) -> list[dict[str, Any]]: ...


class WorkflowService(Protocol):
    """Workflow operations."""

    async def create_crud_workflow(self, name: str, table_name: str) -> dict[str, Any]: ...

    async def delete_workflow(self, name: str) -> None: ...

    async def find_workflows_by_name(self, name: str) -> list[dict[str, Any]]: ...


class AppService(Protocol):
    """App operations."""

    async def create_app_for_table(
        self, name: str, table_name: str, search_column: str
    ) -> dict[str, Any]: ...

    async def delete_app(self, name: str) -> None: ...

    async def find_apps_by_name(self, name: str) -> list[dict[str, Any]]: ...


def match_single(items: list[dict[str, Any]], name: str, kind: str) -> dict[str, Any]:
    """Return the only item in ``items``.

    Args:
        items: Resources whose name matched ``name``
        name: Name that was searched for
        kind: Resource kind for error messages ("table", "workflow", "app")

    Raises:
        NotFoundError: If there are no items
        AmbiguousMatchError: If there is more than one item
    """
    if len(items) == 0:
        raise NotFoundError(kind=kind, name=name, count=0)
    if len(items) > 1:
        raise AmbiguousMatchError(kind=kind, name=name, count=len(items))
    return items[0]


def _require(value: str | None, what: str) -> str:
    if not value:
        raise RemoteError(f"{what} is not known for this account. Run: retool whoami")
    return value


# -----------------------------------------------------------------------------
# Retool implementations
# -----------------------------------------------------------------------------


class RetoolTableService:
    """Retool DB tables through the grid API."""

    def __init__(self, client: RetoolClient, credentials: CredentialRecord):
        self.client = client
        self.credentials = credentials

    @property
    def grid_id(self) -> str:
        return _require(self.credentials.grid_id, "Retool DB grid id")

    async def find_tables_by_name(self, name: str) -> list[dict[str, Any]]:
        tables = await self.client.list_tables(self.grid_id)
        return [t for t in tables if t.get("name") == name]

    async def create_table(
        self, name: str, columns: tuple[str, ...], rows: tuple[dict[str, Any], ...] | None = None
    ) -> TableDescriptor:
        """Create a table with an auto-incrementing "id" key and text columns.

        Raises:
            ConflictError: If a table with this name exists
            RemoteError: If Retool rejects the request
        """
        if await self.find_tables_by_name(name):
            raise ConflictError(f"Table '{name}' already exists.")

        columns = tuple(c for c in columns if c != PRIMARY_KEY_COLUMN)
        field_info: list[dict[str, Any]] = [
            {
                "name": PRIMARY_KEY_COLUMN,
                "isPrimaryKey": True,
                "generatedColumnType": "ALWAYS",
                "dataType": "bigint",
                "fieldType": "BIGINT",
            }
        ]
        field_info.extend(
            {"name": column, "isPrimaryKey": False, "dataType": "text", "fieldType": "TEXT"}
            for column in columns
        )

        data = [[row.get(column) for column in columns] for row in rows or ()]
        result = await self.client.grid_action(
            self.grid_id,
            "CreateTable",
            {"name": name, "fieldInfo": field_info, "data": data},
        )
        if result.get("success") is False:
            raise RemoteError(result.get("message") or f"Error creating table {name}.")

        return TableDescriptor(name=name, fields=(PRIMARY_KEY_COLUMN, *columns))

    async def insert_sample_data(self, name: str) -> None:
        """Insert a handful of placeholder rows into ``name``."""
        info = await self.client.get_table_info(self.grid_id, name)
        primary_key = info.get("primaryKeyColumn") or PRIMARY_KEY_COLUMN
        fields = [f.get("name") for f in info.get("fields", []) if f.get("name")]
        rows = build_sample_rows(fields, primary_key)
        if not rows or not rows[0]:
            logger.debug("sample_data_skipped", table=name, reason="no non-key columns")
            return

        await self.client.grid_action(
            self.grid_id,
            "InsertRows",
            {"table": name, "fields": [f for f in fields if f != primary_key], "data": rows},
        )
        logger.debug("sample_data_inserted", table=name, rows=len(rows))

    async def delete_table(self, name: str) -> None:
        """Delete table ``name``.

        Raises:
            NotFoundError: If no table has this name
            RemoteError: If Retool rejects the request
        """
        match_single(await self.find_tables_by_name(name), name, "table")
        result = await self.client.grid_action(self.grid_id, "DeleteTable", {"table": name})
        if result.get("success") is False:
            raise RemoteError(result.get("message") or f"Error deleting table {name}.")

    async def describe_table(self, name: str) -> TableDescriptor:
        """Fields and primary key of an existing table.

        Raises:
            NotFoundError: If no table has this name
        """
        match_single(await self.find_tables_by_name(name), name, "table")
        info = await self.client.get_table_info(self.grid_id, name)
        fields = tuple(f["name"] for f in info.get("fields") or [] if f.get("name"))
        if not fields:
            raise RemoteError(f"Table {name} info not found.")
        return TableDescriptor(
            name=name,
            fields=fields,
            primary_key=info.get("primaryKeyColumn") or PRIMARY_KEY_COLUMN,
        )


class RetoolWorkflowService:
    """Workflows through the workflow API."""

    def __init__(self, client: RetoolClient, credentials: CredentialRecord):
        self.client = client
        self.credentials = credentials

    async def find_workflows_by_name(self, name: str) -> list[dict[str, Any]]:
        workflows = await self.client.list_workflows()
        return [w for w in workflows if w.get("name") == name]

    async def create_crud_workflow(self, name: str, table_name: str) -> dict[str, Any]:
        """Create a webhook-triggered CRUD workflow for ``table_name``.

        Returns:
            Dict with the workflow "id" and its "url"
        """
        resource_uuid = _require(self.credentials.retool_db_uuid, "Retool DB resource")
        result = await self.client.create_workflow(
            build_crud_workflow(name, table_name, resource_uuid)
        )
        workflow_id = result.get("id")
        if not workflow_id:
            raise RemoteError(f"Error creating workflow {name}.")
        return {"id": workflow_id, "url": f"{self.credentials.origin}/workflows/{workflow_id}"}

    async def delete_workflow(self, name: str) -> None:
        workflow = match_single(await self.find_workflows_by_name(name), name, "workflow")
        await self.client.delete_workflow(workflow["id"])


class RetoolAppService:
    """Apps through the pages API."""

    def __init__(self, client: RetoolClient, credentials: CredentialRecord):
        self.client = client
        self.credentials = credentials

    async def list_apps_and_folders(self) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """All apps outside the trash, and all folders.

        Returns:
            (apps, folders)
        """
        listing = await self.client.list_pages()
        folders = listing.get("folders") or []
        trash_folder_id = next(
            (
                folder.get("id")
                for folder in folders
                if folder.get("name") == TRASH_FOLDER and folder.get("systemFolder") is True
            ),
            None,
        )
        apps = [
            app
            for app in listing.get("pages") or []
            if trash_folder_id is None or app.get("folderId") != trash_folder_id
        ]
        return apps, folders

    async def find_apps_by_name(self, name: str) -> list[dict[str, Any]]:
        """Apps named ``name``, excluding apps in the trash."""
        apps, _ = await self.list_apps_and_folders()
        return [app for app in apps if app.get("name") == name]

    async def create_app(self, name: str) -> dict[str, Any]:
        """Create an empty app.

        Returns:
            Dict with the app "uuid", its editor "url" and the raw "page"
        """
        result = await self.client.create_page(name)
        page = result.get("page") or {}
        page_uuid = page.get("uuid")
        if not page_uuid:
            raise RemoteError(f"Error creating app {name}.")
        return {
            "uuid": page_uuid,
            "url": f"{self.credentials.origin}/editor/{page_uuid}",
            "page": page,
        }

    async def export_app(self, name: str) -> bytes:
        """Export the definition of the app named ``name``.

        Raises:
            NotFoundError: If zero or several apps have this name
        """
        app = match_single(await self.find_apps_by_name(name), name, "app")
        return await self.client.export_page(app["uuid"])

    async def create_app_for_table(
        self, name: str, table_name: str, search_column: str
    ) -> dict[str, Any]:
        """Generate an app for ``table_name`` with a search bar on ``search_column``.

        Returns:
            Dict with the app "uuid" and its editor "url"
        """
        resource_uuid = _require(self.credentials.retool_db_uuid, "Retool DB resource")
        result = await self.client.autogenerate_page(name, resource_uuid, table_name, search_column)
        page_uuid = result.get("pageUuid")
        if not page_uuid:
            raise RemoteError(f"Error creating app {name}.")
        return {"uuid": page_uuid, "url": f"{self.credentials.origin}/editor/{page_uuid}"}

    async def delete_app(self, name: str) -> None:
        app = match_single(await self.find_apps_by_name(name), name, "app")
        await self.client.delete_page(app["id"])

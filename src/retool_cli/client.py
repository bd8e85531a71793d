"""HTTP client for the Retool REST API.

This module provides the HTTP client the CLI uses to talk to a Retool
instance. It only knows about endpoints and status codes; business rules
(name matching, response shape checks) live in the scaffold services.
"""

from typing import Any

import httpx

from .credentials.models import CredentialRecord
from .errors import RemoteError

GRID_ENV = "production"
USAGE_PATH = "/api/cli/usage"


class RetoolClientError(RemoteError):
    """Error from Retool API client."""


class RetoolClient:
    """HTTP client for the Retool REST API.

    Authenticates with the session cookies captured at login.
    """

    def __init__(
        self,
        credentials: CredentialRecord,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            credentials: Credential record with domain and session tokens
            timeout: Request timeout in seconds (None waits indefinitely)
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.credentials = credentials
        self.base_url = credentials.origin
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "RetoolClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={
                "Content-Type": "application/json",
                "x-xsrf-token": self.credentials.session_token,
            },
            cookies={
                "accessToken": self.credentials.access_token,
                "xsrfToken": self.credentials.session_token,
            },
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure client is initialized."""
        if not self._client:
            raise RetoolClientError("Client not initialized. Use 'async with' context.")
        return self._client

    async def _send(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send an HTTP request to Retool and check its status.

        Args:
            method: HTTP method
            path: API path (e.g., /api/resources)
            json: JSON body for POST
            params: Query parameters

        Returns:
            The successful response

        Raises:
            RetoolClientError: On connection, transport or HTTP errors
        """
        client = self._ensure_client()
        try:
            response = await client.request(method, path, json=json, params=params)
            response.raise_for_status()
        except httpx.ConnectError:
            raise RetoolClientError(
                f"Cannot connect to Retool at {self.base_url}\n"
                "Check the domain with: retool whoami"
            )
        except httpx.HTTPStatusError as e:
            # Try to extract error message from response
            try:
                error_data = e.response.json()
                message = error_data.get("message") or error_data.get("error") or str(e)
            except Exception:
                message = str(e)
            if e.response.status_code in (401, 403):
                message = f"{message}\nYour session may have expired. Log in again with: retool login"
            raise RetoolClientError(message, status_code=e.response.status_code)
        except httpx.TimeoutException:
            raise RetoolClientError(f"Request timed out after {self.timeout}s")
        except httpx.RequestError as e:
            raise RetoolClientError(f"Request to {self.base_url}{path} failed: {e}")

        return response

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make HTTP request to Retool and decode the JSON body.

        Returns:
            Response JSON as dict (empty dict for empty bodies)

        Raises:
            RetoolClientError: On connection or HTTP errors, or a body that is not JSON
        """
        response = await self._send(method, path, json=json, params=params)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            # An expired session can get the HTML login page with status 200
            raise RetoolClientError(
                f"Unexpected non-JSON response from {path} (status {response.status_code}).\n"
                "Your session may have expired. Log in again with: retool login",
                status_code=response.status_code,
            )

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    async def list_resources(self) -> list[dict[str, Any]]:
        """List all resources visible to the account."""
        response = await self._request("GET", "/api/resources")
        return response.get("resources") or []

    async def get_grid_info(self, resource_uuid: str, env: str = GRID_ENV) -> dict[str, Any]:
        """Get Retool DB grid metadata for a resource.

        Args:
            resource_uuid: Retool DB resource identifier
            env: Resource environment

        Returns:
            gridInfo dict (id, connectionString, ...)
        """
        response = await self._request(
            "GET", f"/api/grid/retooldb/{resource_uuid}", params={"env": env}
        )
        return response.get("gridInfo") or {}

    # -------------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------------

    async def list_tables(self, grid_id: str) -> list[dict[str, Any]]:
        """List tables in a grid."""
        response = await self._request("GET", f"/api/grid/{grid_id}/meta")
        return response.get("tables") or []

    async def get_table_info(self, grid_id: str, table_name: str) -> dict[str, Any]:
        """Get fields and primary key of a table."""
        response = await self._request("GET", f"/api/grid/{grid_id}/table/{table_name}/info")
        return response.get("tableInfo") or {}

    async def grid_action(self, grid_id: str, kind: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Run a grid action (CreateTable, DeleteTable, InsertRows).

        Args:
            grid_id: Grid identifier
            kind: Action kind
            payload: Action payload

        Returns:
            Action result dict
        """
        return await self._request(
            "POST", f"/api/grid/{grid_id}/action", json={"kind": kind, "payload": payload}
        )

    # -------------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------------

    async def list_workflows(self) -> list[dict[str, Any]]:
        """List workflow metadata."""
        response = await self._request("GET", "/api/workflow")
        return response.get("workflowsMetadata") or []

    async def create_workflow(self, body: dict[str, Any]) -> dict[str, Any]:
        """Create a workflow from a template body."""
        return await self._request("POST", "/api/workflow", json=body)

    async def delete_workflow(self, workflow_id: str) -> dict[str, Any]:
        """Delete a workflow by id."""
        return await self._request("DELETE", f"/api/workflow/{workflow_id}")

    # -------------------------------------------------------------------------
    # Apps
    # -------------------------------------------------------------------------

    async def list_pages(self) -> dict[str, Any]:
        """List apps ("pages") and folders.

        Returns:
            Dict with "pages" and "folders" lists
        """
        return await self._request("GET", "/api/pages", params={"mobileAppsOnly": "false"})

    async def autogenerate_page(
        self,
        app_name: str,
        resource_name: str,
        table_name: str,
        column_name: str,
    ) -> dict[str, Any]:
        """Generate an app that visualizes a Retool DB table.

        Args:
            app_name: Name of the new app
            resource_name: Retool DB resource identifier
            table_name: Table to visualize
            column_name: Column used by the search bar
        """
        return await self._request(
            "POST",
            "/api/pages/autogeneratePage",
            json={
                "appName": app_name,
                "resourceName": resource_name,
                "tableName": table_name,
                "columnName": column_name,
            },
        )

    async def create_page(self, page_name: str) -> dict[str, Any]:
        """Create an empty web app.

        Returns:
            Dict with the new "page" (uuid, name, ...)
        """
        return await self._request(
            "POST",
            "/api/pages/createPage",
            json={
                "pageName": page_name,
                "isGlobalWidget": False,
                "isMobileApp": False,
                "multiScreenMobileApp": False,
            },
        )

    async def export_page(self, page_uuid: str) -> bytes:
        """Export an app definition as raw JSON bytes."""
        response = await self._send("POST", f"/api/pages/uuids/{page_uuid}/export")
        return response.content

    async def delete_page(self, page_id: Any) -> dict[str, Any]:
        """Delete an app by numeric page id."""
        return await self._request("POST", "/api/folders/deletePage", json={"pageId": page_id})

    # -------------------------------------------------------------------------
    # Telemetry
    # -------------------------------------------------------------------------

    async def log_usage(self, event: dict[str, Any]) -> dict[str, Any]:
        """Record a CLI usage event."""
        return await self._request("POST", USAGE_PATH, json=event)

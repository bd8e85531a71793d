"""Request bodies for scaffolded Retool resources."""

from typing import Any

# CRUD operations exposed by the generated workflow, keyed by webhook "type"
CRUD_QUERIES = {
    "create": (
        "insert into {table} ({{{{ Object.keys(startTrigger.data.data).join(', ') }}}}) "
        "values ({{{{ Object.values(startTrigger.data.data) }}}}) returning *"
    ),
    "read": "select * from {table}",
    "update": (
        "update {table} set {{{{ startTrigger.data.data }}}} "
        "where id = {{{{ startTrigger.data.id }}}} returning *"
    ),
    "destroy": "delete from {table} where id = {{{{ startTrigger.data.id }}}}",
}

SAMPLE_ROW_COUNT = 5


def _query_block(name: str, sql: str, resource_uuid: str, top: int) -> dict[str, Any]:
    return {
        "uuid": name,
        "pluginId": name,
        "top": top,
        "left": 480,
        "environment": "production",
        "editorType": "SqlQueryUnified",
        "resourceName": resource_uuid,
        "options": {"query": sql, "runWhenModelUpdates": False},
        "incomingOnSuccessPlugins": ["router"],
        "blockType": "default",
    }


def build_crud_workflow(name: str, table_name: str, resource_uuid: str) -> dict[str, Any]:
    """Build the create-workflow body for a table's CRUD workflow.

    The workflow starts from a webhook whose JSON body carries ``type`` (one
    of create/read/update/destroy), plus ``id`` and ``data`` where relevant.

    Args:
        name: Workflow name
        table_name: Retool DB table the queries run against
        resource_uuid: Retool DB resource identifier

    Returns:
        JSON body for POST /api/workflow
    """
    router = {
        "uuid": "router",
        "pluginId": "router",
        "top": 48,
        "left": 240,
        "editorType": "JavascriptQuery",
        "options": {
            "query": "return startTrigger.data.type",
        },
        "incomingOnSuccessPlugins": ["startTrigger"],
        "blockType": "branch",
        "branches": [
            {"condition": f"value === '{op}'", "outgoing": op} for op in CRUD_QUERIES
        ],
    }
    blocks = [
        {
            "uuid": "startTrigger",
            "pluginId": "startTrigger",
            "top": 48,
            "left": 0,
            "blockType": "webhook",
            "options": {
                "exampleInput": {"type": "read", "id": 1, "data": {}},
            },
        },
        router,
    ]
    for index, (op, sql) in enumerate(CRUD_QUERIES.items()):
        blocks.append(_query_block(op, sql.format(table=table_name), resource_uuid, 48 + 160 * index))

    return {
        "name": name,
        "description": f"Create, read, update and delete rows of the {table_name} table.",
        "isEnabled": False,
        "templateData": {"blocks": blocks},
        "triggerWebhooks": [{"name": "startTrigger", "enabled": True}],
    }


def build_sample_rows(fields: list[str], primary_key: str) -> list[list[str]]:
    """Generate placeholder rows for every non-key field.

    Returns:
        SAMPLE_ROW_COUNT rows like ["name 1", "email 1"]
    """
    columns = [f for f in fields if f != primary_key]
    return [[f"{column} {n}" for column in columns] for n in range(1, SAMPLE_ROW_COUNT + 1)]

"""Unit tests for retool_cli.scaffold.plan."""

import pytest

from retool_cli.errors import ValidationError
from retool_cli.scaffold import (
    StepKind,
    app_name_for,
    build_create_plan,
    build_delete_plan,
    normalize_identifier,
    split_column_args,
    workflow_name_for,
)


class TestNames:
    """Tests for derived resource names."""

    def test_derived_names(self):
        assert workflow_name_for("orders") == "orders CRUD Workflow"
        assert app_name_for("orders") == "orders App"

    def test_normalize_replaces_whitespace(self):
        assert normalize_identifier("  my  orders ") == "my_orders"

    @pytest.mark.parametrize("name", ["", "   ", "1orders", "orders!", "x" * 64])
    def test_normalize_rejects(self, name):
        with pytest.raises(ValidationError):
            normalize_identifier(name)

    def test_split_column_args(self):
        assert split_column_args(("id,name", "email", " a  b ")) == ["id", "name", "email", "a", "b"]


class TestCreatePlan:
    """Tests for build_create_plan."""

    def test_full_plan(self):
        plan = build_create_plan("orders", ["id", "name"])

        assert plan.kinds() == [
            StepKind.CREATE_TABLE,
            StepKind.INSERT_SAMPLE_DATA,
            StepKind.CREATE_WORKFLOW,
            StepKind.CREATE_APP,
        ]
        assert [s.target for s in plan.steps] == [
            "orders",
            "orders",
            "orders CRUD Workflow",
            "orders App",
        ]
        assert plan.columns == ("id", "name")
        assert plan.requires_confirmation is False

    def test_only_sample_data_is_detached(self):
        plan = build_create_plan("orders", ["name"])

        assert [s.kind for s in plan.steps if s.detached] == [StepKind.INSERT_SAMPLE_DATA]

    def test_without_workflow(self):
        plan = build_create_plan("orders", ["name"], include_workflow=False)

        assert StepKind.CREATE_WORKFLOW not in plan.kinds()
        assert plan.skipped == (StepKind.CREATE_WORKFLOW,)

    def test_rows_skip_sample_data(self):
        plan = build_create_plan("orders", ["name"], rows=[{"name": "a"}])

        assert StepKind.INSERT_SAMPLE_DATA not in plan.kinds()
        assert plan.rows == ({"name": "a"},)

    def test_repeated_columns_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_create_plan("orders", ["name", "Name"])

        assert "repeated" in exc_info.value.message

    def test_no_columns_rejected(self):
        with pytest.raises(ValidationError):
            build_create_plan("orders", [])

    def test_bad_table_name(self):
        with pytest.raises(ValidationError):
            build_create_plan("drop table;", ["name"])


class TestDeletePlan:
    """Tests for build_delete_plan."""

    def test_delete_plan(self):
        plan = build_delete_plan("orders")

        assert plan.kinds() == [StepKind.DELETE_TABLE, StepKind.DELETE_WORKFLOW, StepKind.DELETE_APP]
        assert [s.target for s in plan.steps] == ["orders", "orders CRUD Workflow", "orders App"]
        assert plan.requires_confirmation is True

    def test_force_skips_confirmation(self):
        assert build_delete_plan("orders", force=True).requires_confirmation is False

    def test_blank_name(self):
        with pytest.raises(ValidationError):
            build_delete_plan("  ")

    def test_whitespace_matches_create(self):
        """Deleting "my table" targets what creating "my table" made."""
        plan = build_delete_plan("  my table ")

        assert plan.table_name == build_create_plan("my table", ["name"]).table_name == "my_table"
        assert [s.target for s in plan.steps] == ["my_table", "my_table CRUD Workflow", "my_table App"]

    def test_keeps_names_create_would_reject(self):
        assert build_delete_plan("legacy-table").table_name == "legacy-table"

"""Unit tests for retool_cli.csv_import."""

import pytest

from retool_cli.csv_import import read_csv_table, table_name_for_path
from retool_cli.errors import ValidationError


class TestReadCSVTable:
    """Tests for read_csv_table."""

    def test_reads_header_and_rows(self, tmp_path):
        path = tmp_path / "customer-list.csv"
        path.write_text("name,email\nAda,ada@example.com\n\nGrace,grace@example.com\n")

        table = read_csv_table(path)

        assert table.name == "customer_list"
        assert table.columns == ("name", "email")
        assert table.rows == [
            {"name": "Ada", "email": "ada@example.com"},
            {"name": "Grace", "email": "grace@example.com"},
        ]

    def test_strips_bom(self, tmp_path):
        path = tmp_path / "people.csv"
        path.write_bytes("﻿name\nAda\n".encode("utf-8"))

        assert read_csv_table(path).columns == ("name",)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("")

        with pytest.raises(ValidationError, match="no header"):
            read_csv_table(path)

    def test_bad_column_name(self, tmp_path):
        path = tmp_path / "people.csv"
        path.write_text("full name!,email\n")

        with pytest.raises(ValidationError):
            read_csv_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="Error reading CSV"):
            read_csv_table(tmp_path / "missing.csv")

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes(b"name\n\xff\xfe\xfa\n")

        with pytest.raises(ValidationError, match="not UTF-8"):
            read_csv_table(path)

    def test_table_name_for_path(self, tmp_path):
        assert table_name_for_path(tmp_path / "My Orders.csv") == "My_Orders"

"""Read CSV files into table definitions for ``scaffold --from-csv``."""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ValidationError
from .scaffold.plan import normalize_columns, normalize_identifier


@dataclass(frozen=True)
class CSVTable:
    """A table parsed from a CSV file."""

    name: str
    columns: tuple[str, ...]
    rows: list[dict[str, Any]]


def table_name_for_path(path: Path) -> str:
    """Derive a table name from a CSV file name ("My Orders.csv" -> "My_Orders")."""
    return normalize_identifier(path.stem.replace("-", "_"))


def read_csv_table(path: str | Path) -> CSVTable:
    """Parse a CSV file whose first row holds the column names.

    Args:
        path: CSV file path

    Returns:
        CSVTable named after the file

    Raises:
        ValidationError: If the file cannot be read, has no header, or has
            malformed column names
    """
    csv_path = Path(path)
    try:
        with csv_path.open(newline="", encoding="utf-8-sig") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if not header:
                raise ValidationError(f"CSV file {csv_path} has no header row.")
            columns = normalize_columns(header)
            rows = [
                dict(zip(columns, values))
                for values in reader
                if any(value.strip() for value in values)
            ]
    except OSError as e:
        raise ValidationError(f"Error reading CSV file {csv_path}: {e}")
    except UnicodeDecodeError as e:
        raise ValidationError(f"CSV file {csv_path} is not UTF-8 text: {e}")
    except csv.Error as e:
        raise ValidationError(f"Error parsing CSV file {csv_path}: {e}")

    return CSVTable(name=table_name_for_path(csv_path), columns=columns, rows=rows)

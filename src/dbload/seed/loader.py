"""Load seed data from YAML files.

A seed file maps table names to lists of rows:

    users:
      - id: 1
        name: "'John Doe'"
        password: "bcrypt password123"

Tables keep the order in which they appear in the file.
"""

from pathlib import Path
from typing import Any

import yaml

SeedData = dict[str, list[dict[str, Any]]]


class SeedFileError(Exception):
    """Seed file could not be read or has the wrong shape."""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


def load_seed_file(path: Path | str) -> SeedData:
    """Read and validate a seed file.

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of table name to rows, in file order

    Raises:
        SeedFileError: If the file is unreadable, not YAML, or malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise SeedFileError(path, f"cannot read file: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise SeedFileError(path, f"invalid YAML: {e}") from e

    return parse_seed_data(raw, path)


def parse_seed_data(raw: Any, path: Path | str = "<seed>") -> SeedData:
    """Validate already-parsed YAML content as seed data."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SeedFileError(path, "top level must be a mapping of table names to rows")

    data: SeedData = {}
    for table, rows in raw.items():
        if not isinstance(table, str) or not table:
            raise SeedFileError(path, f"table name must be a non-empty string, got {table!r}")
        if rows is None:
            data[table] = []
            continue
        if not isinstance(rows, list):
            raise SeedFileError(path, f"table '{table}' must be a list of rows")

        for index, row in enumerate(rows):
            if not isinstance(row, dict) or not row:
                raise SeedFileError(
                    path, f"row {index} of table '{table}' must be a non-empty mapping"
                )
            for column, value in row.items():
                if not isinstance(column, str):
                    raise SeedFileError(
                        path, f"column names in table '{table}' must be strings, got {column!r}"
                    )
                if isinstance(value, (dict, list)):
                    raise SeedFileError(
                        path, f"column '{column}' in table '{table}' row {index} must be a scalar"
                    )
        data[table] = rows

    return data

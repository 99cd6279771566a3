"""Seed runner: evaluate cell values and insert rows.

Every string cell is passed through the value evaluator; other scalars
are bound as they came out of YAML. Rows become parameterized INSERT
statements that are executed in a single transaction, so a failing row
leaves the database untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from dbload.seed.functions import register_seed_functions
from dbload.seed.loader import SeedData
from dbload.value import EvaluationError, Evaluator, FunctionRegistry, default_registry

logger = logging.getLogger(__name__)


class SeedError(Exception):
    """A cell value failed to evaluate."""

    def __init__(self, table: str, row_index: int, column: str, cause: EvaluationError):
        self.table = table
        self.row_index = row_index
        self.column = column
        self.cause = cause
        super().__init__(f"table '{table}' row {row_index} column '{column}': {cause}")


@dataclass
class InsertStatement:
    """A single row insert with its bound parameters."""

    table: str
    columns: list[str]
    values: list[Any]

    @property
    def sql(self) -> str:
        placeholders = ", ".join(f":p{i}" for i in range(len(self.columns)))
        return (
            f"INSERT INTO {self.table} ({', '.join(self.columns)}) "
            f"VALUES ({placeholders}) ON CONFLICT DO NOTHING"
        )

    @property
    def params(self) -> dict[str, Any]:
        return {f"p{i}": value for i, value in enumerate(self.values)}

    def describe(self) -> str:
        """Human-readable form for dry runs."""
        return f"{self.sql}\n  params: {self.values!r}"


class SeedRunner:
    """Turns seed data into INSERT statements and executes them.

    Usage:
        runner = SeedRunner()
        statements = runner.prepare(load_seed_file("seed.yaml"))
        runner.execute(engine, statements)
    """

    def __init__(self, registry: FunctionRegistry | None = None):
        self.registry = registry if registry is not None else default_registry
        register_seed_functions(self.registry)
        self.evaluator = Evaluator(self.registry)

    def evaluate_cell(self, table: str, row_index: int, column: str, value: Any) -> Any:
        """Evaluate a cell if it is a string; pass other scalars through."""
        if not isinstance(value, str):
            return value
        try:
            return self.evaluator.evaluate(value)
        except EvaluationError as e:
            raise SeedError(table, row_index, column, e) from e

    def prepare(self, data: SeedData) -> list[InsertStatement]:
        """Evaluate every cell and build statements in file order.

        Raises:
            SeedError: On the first cell that fails to evaluate
        """
        statements: list[InsertStatement] = []
        for table, rows in data.items():
            logger.info("Preparing table %s (%d rows)", table, len(rows))
            for index, row in enumerate(rows):
                columns = list(row.keys())
                values = [
                    self.evaluate_cell(table, index, column, row[column])
                    for column in columns
                ]
                statements.append(InsertStatement(table, columns, values))
        return statements

    def execute(self, engine: Engine, statements: list[InsertStatement]) -> int:
        """Execute statements in one transaction.

        Returns:
            Number of rows actually inserted (conflicts are skipped)
        """
        inserted = 0
        with engine.begin() as conn:
            for statement in statements:
                result = conn.execute(text(statement.sql), statement.params)
                if result.rowcount and result.rowcount > 0:
                    inserted += result.rowcount
                logger.debug("Inserted into %s: %s", statement.table, statement.columns)
        logger.info("Seed complete: %d of %d rows inserted", inserted, len(statements))
        return inserted

    def run(self, engine: Engine, data: SeedData) -> int:
        """Prepare and execute seed data. Returns rows inserted."""
        return self.execute(engine, self.prepare(data))

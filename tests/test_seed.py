"""Tests for seed-file loading, seed functions, and the seed runner."""

import textwrap
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from dbload.config import SeedConfig
from dbload.seed import (
    InsertStatement,
    SeedError,
    SeedFileError,
    SeedRunner,
    load_seed_file,
    parse_seed_data,
)
from dbload.value import FunctionCallError, FunctionRegistry, UnsupportedFunctionError
from dbload.value.hashing import PasswordHasher

HASH_OF_TEST = "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "seed.yaml"
    path.write_text(textwrap.dedent(content))
    return path


@pytest.fixture
def runner():
    """Runner with an isolated registry so seed functions stay local."""
    return SeedRunner(FunctionRegistry.with_builtins())


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'seed.db'}")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, token TEXT)"))
        conn.execute(text("CREATE TABLE products (id INTEGER PRIMARY KEY, sku TEXT, price REAL)"))
    yield engine
    engine.dispose()


# =============================================================================
# Loader Tests
# =============================================================================


class TestLoadSeedFile:
    def test_tables_in_file_order(self, tmp_path):
        path = _write(tmp_path, """
            zebra:
              - id: 1
            alpha:
              - id: 2
            middle:
              - id: 3
        """)
        data = load_seed_file(path)
        assert list(data) == ["zebra", "alpha", "middle"]

    def test_scalars_keep_yaml_types(self, tmp_path):
        path = _write(tmp_path, """
            items:
              - id: 7
                price: 9.5
                active: true
                note: null
                released: 2024-01-31
                name: "'Widget'"
        """)
        row = load_seed_file(path)["items"][0]
        assert row == {
            "id": 7,
            "price": 9.5,
            "active": True,
            "note": None,
            "released": date(2024, 1, 31),
            "name": "'Widget'",
        }

    def test_empty_file(self, tmp_path):
        assert load_seed_file(_write(tmp_path, "")) == {}

    def test_table_without_rows(self, tmp_path):
        assert load_seed_file(_write(tmp_path, "users:\n")) == {"users": []}

    def test_missing_file(self, tmp_path):
        with pytest.raises(SeedFileError, match="cannot read file"):
            load_seed_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(SeedFileError, match="invalid YAML"):
            load_seed_file(_write(tmp_path, "users: [unclosed\n"))

    @pytest.mark.parametrize(
        "raw, message",
        [
            (["a", "b"], "top level must be a mapping"),
            ({"users": {"id": 1}}, "must be a list of rows"),
            ({"users": ["not a row"]}, "must be a non-empty mapping"),
            ({"users": [{}]}, "must be a non-empty mapping"),
            ({"users": [{"tags": ["a"]}]}, "must be a scalar"),
            ({"users": [{1: "x"}]}, "column names"),
            ({1: [{"id": 1}]}, "table name must be"),
        ],
    )
    def test_malformed_structure(self, raw, message):
        with pytest.raises(SeedFileError, match=message):
            parse_seed_data(raw)

    def test_example_file_loads(self):
        example = Path(__file__).parent.parent / "example.yaml"
        data = load_seed_file(example)
        assert list(data) == ["users", "products", "inventory"]


# =============================================================================
# Seed Function Tests
# =============================================================================


class TestSeedFunctions:
    def test_registered_on_runner_registry(self, runner):
        assert runner.registry.is_registered("upper")
        assert runner.registry.is_registered("future")

    def test_existing_functions_kept(self):
        registry = FunctionRegistry.with_builtins()
        custom_upper = lambda args: "custom"
        registry.register("upper", custom_upper)

        runner = SeedRunner(registry)
        assert registry.lookup("upper") is custom_upper
        assert runner.evaluator.evaluate("upper admin") == "custom"
        assert registry.is_registered("future")

    def test_upper(self, runner):
        assert runner.evaluator.evaluate("upper admin") == "ADMIN"
        assert runner.evaluator.evaluate("'electronics'|upper") == "ELECTRONICS"

    def test_upper_arity(self, runner):
        with pytest.raises(FunctionCallError, match="function upper error"):
            runner.evaluator.evaluate("upper a b")

    def test_future(self, runner):
        result = runner.evaluator.evaluate("future 30")
        parsed = datetime.strptime(result, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)
        expected = datetime.now(timezone.utc) + timedelta(days=30)
        assert abs((parsed - expected).total_seconds()) < 5

    def test_future_negative_days(self, runner):
        result = runner.evaluator.evaluate("future -1")
        parsed = datetime.strptime(result, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)
        assert parsed < datetime.now(timezone.utc)

    @pytest.mark.parametrize("expr", ["future", "future soon", "future 1 2", "future 1_0", "future \u0663"])
    def test_future_invalid(self, runner, expr):
        with pytest.raises(FunctionCallError, match="function future error"):
            runner.evaluator.evaluate(expr)


# =============================================================================
# Runner Tests
# =============================================================================


class TestInsertStatement:
    def test_sql_and_params(self):
        statement = InsertStatement("users", ["id", "name"], [1, "John"])
        assert statement.sql == (
            "INSERT INTO users (id, name) VALUES (:p0, :p1) ON CONFLICT DO NOTHING"
        )
        assert statement.params == {"p0": 1, "p1": "John"}

    def test_describe(self):
        statement = InsertStatement("users", ["id"], [1])
        assert "INSERT INTO users" in statement.describe()
        assert "params: [1]" in statement.describe()


class TestSeedRunner:
    def test_prepare_evaluates_strings_only(self, runner):
        data = {"users": [{"id": 1, "name": "'John'", "token": "hash test", "score": 1.5}]}
        [statement] = runner.prepare(data)
        assert statement.table == "users"
        assert statement.columns == ["id", "name", "token", "score"]
        assert statement.values == [1, "John", HASH_OF_TEST, 1.5]

    def test_prepare_keeps_file_order(self, runner):
        data = {
            "b": [{"id": 1}, {"id": 2}],
            "a": [{"id": 3}],
        }
        statements = runner.prepare(data)
        assert [(s.table, s.values) for s in statements] == [
            ("b", [1]),
            ("b", [2]),
            ("a", [3]),
        ]

    def test_prepare_reports_failing_cell(self, runner):
        data = {"users": [{"id": 1, "name": "'ok'"}, {"id": 2, "name": "John Doe"}]}
        with pytest.raises(SeedError) as exc_info:
            runner.prepare(data)

        error = exc_info.value
        assert error.table == "users"
        assert error.row_index == 1
        assert error.column == "name"
        assert isinstance(error.cause, UnsupportedFunctionError)
        assert "unsupported function: John" in str(error)

    def test_run_inserts_rows(self, runner, engine):
        data = {
            "users": [
                {"id": 1, "name": "'John Doe'", "token": "hash test"},
                {"id": 2, "name": "'admin'|upper", "token": "bcrypt secret 4"},
            ],
            "products": [{"id": 101, "sku": "uuid product-101", "price": 999.99}],
        }
        assert runner.run(engine, data) == 3

        with engine.connect() as conn:
            users = conn.execute(text("SELECT id, name, token FROM users ORDER BY id")).all()
            product = conn.execute(text("SELECT sku, price FROM products")).one()

        assert users[0] == (1, "John Doe", HASH_OF_TEST)
        assert users[1][1] == "ADMIN"
        assert PasswordHasher(rounds=4).verify("secret", users[1][2])
        assert product == (runner.evaluator.evaluate("uuid product-101"), 999.99)

    def test_conflicts_are_skipped(self, runner, engine):
        data = {"users": [{"id": 1, "name": "'first'"}]}
        assert runner.run(engine, data) == 1
        assert runner.run(engine, {"users": [{"id": 1, "name": "'second'"}]}) == 0

        with engine.connect() as conn:
            assert conn.execute(text("SELECT name FROM users")).scalar_one() == "first"

    def test_failed_run_writes_nothing(self, runner, engine):
        data = {
            "users": [{"id": 1, "name": "'John'"}],
            "missing_table": [{"id": 1}],
        }
        with pytest.raises(Exception):
            runner.run(engine, data)

        with engine.connect() as conn:
            assert conn.execute(text("SELECT COUNT(*) FROM users")).scalar_one() == 0

    def test_default_registry_used_when_none_given(self):
        from dbload.value import default_registry

        runner = SeedRunner()
        assert runner.registry is default_registry
        assert default_registry.is_registered("upper")


# =============================================================================
# Config Tests
# =============================================================================


class TestSeedConfig:
    def test_from_env_defaults(self, monkeypatch):
        for var in ("DATABASE_URL", "DBLOAD_FILE", "DBLOAD_LOG_LEVEL"):
            monkeypatch.delenv(var, raising=False)
        config = SeedConfig.from_env()
        assert config.seed_file == Path("seed.yaml")
        assert config.database_url is None
        assert config.log_level == "WARNING"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "sqlite:///x.db")
        monkeypatch.setenv("DBLOAD_FILE", "data/seed.yaml")
        monkeypatch.setenv("DBLOAD_LOG_LEVEL", "DEBUG")
        config = SeedConfig.from_env()
        assert config.seed_file == Path("data/seed.yaml")
        assert config.database_url == "sqlite:///x.db"
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
            ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
            ("postgresql+psycopg://u@h/db", "postgresql+psycopg://u@h/db"),
            ("sqlite:///seed.db", "sqlite:///seed.db"),
        ],
    )
    def test_sqlalchemy_url(self, url, expected):
        assert SeedConfig(seed_file=Path("s.yaml"), database_url=url).sqlalchemy_url == expected

    def test_sqlalchemy_url_requires_url(self):
        with pytest.raises(ValueError, match="DATABASE_URL is required"):
            SeedConfig(seed_file=Path("s.yaml")).sqlalchemy_url

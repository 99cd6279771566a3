"""dbload: seed a database from YAML, evaluating cell value expressions."""

__version__ = "0.1.0"

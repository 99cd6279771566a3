"""Seed-file loading and insertion.

This module provides:
- load_seed_file: Reads table rows from YAML
- SeedRunner: Evaluates cell values and inserts rows
- register_seed_functions: Adds the upper and future functions
"""

from dbload.seed.functions import register_seed_functions
from dbload.seed.loader import SeedData, SeedFileError, load_seed_file, parse_seed_data
from dbload.seed.runner import InsertStatement, SeedError, SeedRunner

__all__ = [
    "InsertStatement",
    "SeedData",
    "SeedError",
    "SeedFileError",
    "SeedRunner",
    "load_seed_file",
    "parse_seed_data",
    "register_seed_functions",
]

"""dbload CLI entry point."""

import click


@click.group()
def cli():
    """dbload: seed a database from YAML files."""
    pass


# Register subcommands
from dbload.cli.seed_cmd import run  # noqa: E402
from dbload.cli.value_cmd import eval_cmd, functions  # noqa: E402

cli.add_command(run)
cli.add_command(eval_cmd)
cli.add_command(functions)

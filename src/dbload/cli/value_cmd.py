"""Value expression CLI commands: eval and functions."""

import click

from dbload.seed import register_seed_functions
from dbload.value import EvaluationError, default_registry, evaluate


@click.command("eval")
@click.argument("expression")
def eval_cmd(expression: str):
    """Evaluate one cell value expression and print the result."""
    register_seed_functions(default_registry)
    try:
        result = evaluate(expression)
    except EvaluationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)
    click.echo("" if result is None else str(result))


@click.command()
def functions():
    """List functions available in cell values."""
    register_seed_functions(default_registry)
    for name in default_registry.list_registered():
        click.echo(f"  {name}")

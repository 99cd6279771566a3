"""Evaluator for dbload value expressions.

Runs the stages of a pipe chain left to right. The value produced by
one stage is appended, as a string, to the arguments of the next call.
"""

import logging
from typing import Any

from dbload.value.errors import FunctionCallError, UnsupportedFunctionError
from dbload.value.functions import FunctionHandler, FunctionRegistry
from dbload.value.parser import Literal, parse_stage, split_stages

logger = logging.getLogger(__name__)


class Evaluator:
    """Evaluates value expressions against a function registry.

    Usage:
        evaluator = Evaluator(FunctionRegistry.with_builtins())
        evaluator.evaluate("'secret'|hash")
    """

    def __init__(self, registry: FunctionRegistry):
        self.registry = registry

    def evaluate(self, expression: str) -> Any:
        """Evaluate an expression and return the last stage's value.

        Pipe continuation always passes str(value); only the final value
        may keep a richer type returned by a handler.

        Raises:
            EvaluationError: On the first failing stage
        """
        result: Any = None

        for index, text in enumerate(split_stages(expression)):
            stage = parse_stage(text)

            if isinstance(stage, Literal):
                result = stage.value
                continue

            args = list(stage.args)
            if index > 0 and result is not None:
                args.append(result if isinstance(result, str) else str(result))

            handler = self.registry.lookup(stage.name)
            if handler is None:
                raise UnsupportedFunctionError(stage.name)

            result = self._call(stage.name, handler, args)

        return result

    def _call(self, name: str, handler: FunctionHandler, args: list[str]) -> Any:
        try:
            return handler(args)
        except Exception as e:
            logger.debug("Function '%s' failed with args %r: %s", name, args, e)
            raise FunctionCallError(name, e) from e


# -----------------------------------------------------------------------------
# Process-wide default registry and convenience functions
# -----------------------------------------------------------------------------

default_registry = FunctionRegistry.with_builtins()
_default_evaluator = Evaluator(default_registry)


def evaluate(expression: str) -> Any:
    """Evaluate an expression against the default registry.

    This is the entry point the seed loader calls for every string cell.

    Example:
        evaluate("hash test|hash")
        # '7b3d979ca8330a94fa7e9e1b466d8b99e0bcdea1ec90596c0dcc8d7ef6b4300c'
    """
    return _default_evaluator.evaluate(expression)


def register_function(name: str, handler: FunctionHandler) -> None:
    """Register a function with the default registry."""
    default_registry.register(name, handler)


def unregister_function(name: str) -> None:
    """Remove a function from the default registry."""
    default_registry.unregister(name)


def lookup_function(name: str) -> FunctionHandler | None:
    """Look up a function in the default registry."""
    return default_registry.lookup(name)

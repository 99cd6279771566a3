"""Value expressions for dbload seed files.

This module provides:
- FunctionRegistry: Thread-safe registry of expression functions
- Parser: Splits pipe chains into literal and call stages
- Evaluator: Runs stages left to right, piping each result onward
"""

from dbload.value.errors import (
    EmptyCallError,
    EvaluationError,
    FunctionCallError,
    MalformedLiteralError,
    UnsupportedFunctionError,
)
from dbload.value.evaluator import (
    Evaluator,
    default_registry,
    evaluate,
    lookup_function,
    register_function,
    unregister_function,
)
from dbload.value.functions import FunctionHandler, FunctionRegistry
from dbload.value.parser import Call, Literal, parse_stage, split_stages

__all__ = [
    # Errors
    "EmptyCallError",
    "EvaluationError",
    "FunctionCallError",
    "MalformedLiteralError",
    "UnsupportedFunctionError",
    # Evaluator
    "Evaluator",
    "default_registry",
    "evaluate",
    "lookup_function",
    "register_function",
    "unregister_function",
    # Functions
    "FunctionHandler",
    "FunctionRegistry",
    # Parser
    "Call",
    "Literal",
    "parse_stage",
    "split_stages",
]

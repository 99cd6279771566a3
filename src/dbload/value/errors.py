"""Errors raised while evaluating value expressions."""


class EvaluationError(Exception):
    """Error during value expression evaluation."""
    pass


class EmptyCallError(EvaluationError):
    """A stage contained no tokens."""

    def __init__(self):
        super().__init__("empty function call")


class UnsupportedFunctionError(EvaluationError):
    """A stage named a function that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unsupported function: {name}")


class FunctionCallError(EvaluationError):
    """A registered function raised while handling its arguments."""

    def __init__(self, name: str, cause: Exception):
        self.name = name
        self.cause = cause
        super().__init__(f"function {name} error: {cause}")


class MalformedLiteralError(EvaluationError):
    """A stage opened or closed a quote without forming a literal."""

    def __init__(self, stage: str):
        self.stage = stage
        super().__init__(f"malformed quoted literal: {stage}")

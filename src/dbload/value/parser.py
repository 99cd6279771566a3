"""Parser for dbload value expressions.

Grammar:
    expression := stage ("|" stage)*
    stage      := literal | call
    literal    := "'" chars "'" | '"' chars '"'
    call       := name (whitespace arg)*

Each stage is trimmed before classification. Literal detection runs
before call tokenization, so a quoted stage never invokes a function.
There is no escaping: the pipe split happens first, which means a
literal can never contain "|". A stage that starts or ends with a quote
but is not a complete literal is rejected rather than read as a call.
"""

from dataclasses import dataclass, field

from dbload.value.errors import EmptyCallError, MalformedLiteralError

PIPE = "|"
QUOTES = ("'", '"')


@dataclass(frozen=True)
class Literal:
    """A quoted stage; value is the text between the quotes."""

    value: str


@dataclass(frozen=True)
class Call:
    """A function invocation with its explicit arguments."""

    name: str
    args: list[str] = field(default_factory=list)


Stage = Literal | Call


def split_stages(expression: str) -> list[str]:
    """Split an expression on pipes and trim each stage."""
    return [part.strip() for part in expression.split(PIPE)]


def parse_stage(text: str) -> Stage:
    """Classify a trimmed stage as a Literal or a Call.

    Raises:
        MalformedLiteralError: If the stage has an unmatched outer quote
        EmptyCallError: If the stage has no tokens
    """
    if len(text) >= 2 and text[0] in QUOTES and text[0] == text[-1]:
        return Literal(text[1:-1])

    if text and (text[0] in QUOTES or text[-1] in QUOTES):
        raise MalformedLiteralError(text)

    tokens = text.split()
    if not tokens:
        raise EmptyCallError()

    return Call(name=tokens[0], args=tokens[1:])

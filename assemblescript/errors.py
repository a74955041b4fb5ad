from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ErrorVal:
    """Describes an AssembleScript runtime or syntax error.

    `name` is the error kind (e.g. 'UnresolvedIdentifier', 'TypeError',
    'IterationLimitExceeded'); `line` is the source line of the statement
    that was executing when the error was raised, if known.
    """
    name: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        text = f"{self.name}: {self.message}"
        if self.line is not None:
            text += f" (line {self.line})"
        return text


class AssembleError(Exception):
    """Exception type used to propagate AssembleScript errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err

    @property
    def kind(self) -> str:
        return self.err.name

    def __str__(self) -> str:
        return str(self.err)


@dataclass
class ReturnSignal:
    """Carries the value of a `snap` statement out of nested blocks.

    `Interpreter.execute` returns it and the function call boundary
    consumes it.
    """
    value: Any

from dataclasses import dataclass
from typing import Any, Optional

from phy.ast import Loc


@dataclass
class ErrorVal:
    """Structured description of a Phy runtime failure.

    `name` is the error kind (e.g. 'UndefinedVariable'), `loc` the source
    span of the node that triggered it. `payload` holds extra data for a
    few kinds: the returned value for 'Return', `(expected, actual)` for
    'ArityMismatch' and the wrapped ErrorVal for 'CallError'.
    """
    name: str
    message: str
    loc: Optional[Loc] = None
    payload: Any = None

    def __str__(self) -> str:
        if self.loc is None:
            return f"{self.name}: {self.message}"
        return f"{self.name}: {self.message} at {self.loc}"


class PhyError(Exception):
    """Exception type used to propagate Phy runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err


class EnvError(Exception):
    """Raised by Environment; the interpreter re-raises it as a PhyError."""


class OperationError(Exception):
    """Raised by the value model when an operator does not apply."""


class ReturnSignal:
    """Result of executing a `return` statement.

    It is handed back up through block and loop execution as an ordinary
    result (never raised) until a function call consumes it.
    """
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"

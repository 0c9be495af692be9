"""Runtime values and operator semantics for Phy.

Phy values are represented by plain Python objects wherever possible:

* Int  -> `int` (never `bool`), kept inside the signed 64-bit range
* Real -> `float`
* Str  -> `str`
* Bool -> `bool`
* Null -> `NullVal`, the sentinel for "no value" (literal `null` and
  variables declared without an initializer)
* functions -> the classes in `phy.callable`

This module implements the binary operator table (`operate`), unary
negation (`negate`) and the helpers used to print and describe values.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict

from phy.errors import OperationError

INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


class NullVal:
    """Marker object for the Phy `null` value."""
    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NullVal)

    def __hash__(self) -> int:
        return hash(NullVal)

    def __repr__(self) -> str:
        return 'null'


def is_int(value: Any) -> bool:
    # bool is a subclass of int; Phy keeps them apart
    return isinstance(value, int) and not isinstance(value, bool)


def is_real(value: Any) -> bool:
    return isinstance(value, float)


def is_numeric(value: Any) -> bool:
    return is_int(value) or is_real(value)


def is_null(value: Any) -> bool:
    return isinstance(value, NullVal)


def type_name(value: Any) -> str:
    """Return the Phy type name of a runtime value."""
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'real'
    if isinstance(value, str):
        return 'str'
    if isinstance(value, NullVal):
        return 'null'
    # functions describe themselves
    return getattr(value, 'kind', type(value).__name__)


def to_string(value: Any) -> str:
    """Convert a Phy value to the text written by `print`."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value
    return repr(value)


def check_int(value: int) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise OperationError(f'integer overflow: {value} does not fit in 64 bits')
    return value


_ARITHMETIC: Dict[str, Callable[[Any, Any], Any]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
}

_COMPARISON: Dict[str, Callable[[Any, Any], bool]] = {
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


def _divide(a: Any, b: Any) -> Any:
    if b == 0:
        raise OperationError('division by zero')
    if is_int(a) and is_int(b):
        # integer division truncates toward zero
        quotient = abs(a) // abs(b)
        return check_int(quotient if (a < 0) == (b < 0) else -quotient)
    return float(a) / float(b)


def _repeat(text: str, count: int) -> str:
    if count < 0:
        raise OperationError(f'can\'t repeat a string a negative number of times ({count})')
    return text * count


def _unsupported(left: Any, right: Any, op: str) -> OperationError:
    return OperationError(
        f"operator '{op}' is not supported between {type_name(left)} and {type_name(right)}"
    )


def operate(left: Any, right: Any, op: str) -> Any:
    """Apply the binary operator `op` to two concrete values.

    Raises OperationError for any operator/operand combination outside
    the supported table.
    """
    if op in _ARITHMETIC:
        if is_int(left) and is_int(right):
            return check_int(_ARITHMETIC[op](left, right))
        if is_numeric(left) and is_numeric(right):
            return _ARITHMETIC[op](float(left), float(right))
        if op == '+' and isinstance(left, str) and isinstance(right, str):
            return left + right
        if op == '*':
            if isinstance(left, str) and is_int(right):
                return _repeat(left, right)
            if is_int(left) and isinstance(right, str):
                return _repeat(right, left)
        raise _unsupported(left, right, op)
    if op == '/':
        if is_numeric(left) and is_numeric(right):
            return _divide(left, right)
        raise _unsupported(left, right, op)
    if op in _COMPARISON:
        if is_numeric(left) and is_numeric(right):
            return _COMPARISON[op](left, right)
        raise _unsupported(left, right, op)
    if op in ('==', '!='):
        if is_numeric(left) and is_numeric(right):
            equal = left == right
        elif isinstance(left, str) and isinstance(right, str):
            equal = left == right
        elif isinstance(left, bool) and isinstance(right, bool):
            equal = left is right
        else:
            raise _unsupported(left, right, op)
        return equal if op == '==' else not equal
    raise OperationError(f'unknown operator {op}')


def negate(value: Any, op: str) -> Any:
    """Apply the unary operator `op` ('-' or '!') to a value."""
    if op == '-':
        if is_int(value):
            return check_int(-value)
        if is_real(value):
            return -value
        raise OperationError(f"can't negate a value of type {type_name(value)}")
    if op == '!':
        if isinstance(value, bool):
            return not value
        raise OperationError(f"can't apply '!' to a value of type {type_name(value)}")
    raise OperationError(f'unknown unary operator {op}')

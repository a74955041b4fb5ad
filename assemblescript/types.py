"""Runtime values for AssembleScript.

The interpreter represents language values with plain Python objects where
a natural one exists and small marker classes otherwise:

==============  ==========================================
Language type   Python representation
==============  ==========================================
null            `NullVal`
number          `float` (all arithmetic is floating point)
boolean         `bool`
string          `str`
array           `ArrayVal`
function        `FunctionVal`
native-fn       `NativeFunction` (see builtin_function.py)
break           `BreakVal` (the `BREAK` singleton)
==============  ==========================================

This module also holds the helpers used for printing values and for the
host-float arithmetic the language inherits (division by zero gives
infinities, `%` keeps the sign of the dividend).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, TYPE_CHECKING
import math

from .builtin_function import NativeFunction

if TYPE_CHECKING:
    from .ast import Node
    from .environment import Environment


class NullVal:
    """Marker object for the AssembleScript `null` value."""
    def __eq__(self, other: Any) -> bool:
        return isinstance(other, NullVal)

    def __hash__(self) -> int:
        return hash(NullVal)

    def __repr__(self) -> str:
        return 'null'


class BreakVal:
    """Signal produced by `endGame;` and forwarded until a loop or switch consumes it.

    It is never stored in a variable.
    """
    def __repr__(self) -> str:
        return '<break>'


BREAK = BreakVal()


@dataclass
class ArrayVal:
    """Represents an AssembleScript array (a `team`).

    Slots hold expression nodes rather than values. Reading a slot
    evaluates its expression in the environment of the read, so an
    initializer such as `{x, y}` follows later changes to `x` and `y`.
    Writing a slot replaces it with a literal of the written value.
    """
    name: str
    elements: List['Node']
    size: int

    def __repr__(self) -> str:
        return f"Array({self.name!r}, size={self.size})"


@dataclass
class FunctionVal:
    """Represents a user-defined function together with its closure."""
    name: str
    params: List[str]
    body: List['Node']
    closure: 'Environment' = field(repr=False)

    def __repr__(self) -> str:
        return f"<function {self.name}>"


def type_name(value: Any) -> str:
    """Return the language type tag of a runtime value."""
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, float):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, ArrayVal):
        return 'array'
    if isinstance(value, FunctionVal):
        return 'function'
    if isinstance(value, NativeFunction):
        return 'native-fn'
    if isinstance(value, BreakVal):
        return 'break'
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, float)


def format_number(x: float) -> str:
    """Format a number the way the language prints it.

    Integral values print without a fractional part, so `3.0` prints as
    `3`; non-finite values print as `Infinity`, `-Infinity` and `NaN`.
    """
    if math.isnan(x):
        return 'NaN'
    if math.isinf(x):
        return 'Infinity' if x > 0 else '-Infinity'
    if x.is_integer() and abs(x) < 1e21:
        text = repr(x)
        if 'e' in text:
            # shortest round-trip digits, padded with zeros
            return format(Decimal(text), 'f')
        return str(int(x))
    return repr(x)


def to_string(value: Any) -> str:
    """Convert a runtime value to its printed form."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, NullVal):
        return 'null'
    return repr(value)


def float_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def float_mod(a: float, b: float) -> float:
    # remainder takes the sign of the dividend
    if b == 0.0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    if math.isinf(b):
        return a
    return math.fmod(a, b)


def float_pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and b.is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf
    except (ValueError, ZeroDivisionError):
        # negative base with a fractional exponent, or 0 to a negative power
        if a == 0.0:
            return math.inf
        return math.nan

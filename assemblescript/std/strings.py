import math
import string
from typing import Any, List

from assemblescript.builtin_function import NativeFunction
from assemblescript.environment import Environment
from .common import expect_args


DIGITS = string.digits + string.ascii_lowercase


def to_position(x: float) -> int:
    """Truncate a number to a string position; NaN counts as 0."""
    if math.isnan(x):
        return 0
    if math.isinf(x):
        return -1 if x < 0 else 2 ** 31
    return int(x)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def parse_int(text: str, radix: int = 0) -> float:
    """Parse the leading integer of `text` in base `radix`.

    Leading whitespace and one sign are skipped; radix 0 means base 10, or
    16 when the digits start with `0x`. Parsing stops at the first character
    that is not a digit of the base. Returns NaN when no digit was read or
    the radix is outside 2..36.
    """
    s = text.lstrip()
    sign = 1
    if s[:1] in ('+', '-'):
        sign = -1 if s[0] == '-' else 1
        s = s[1:]
    if radix == 0:
        radix = 10
        if s[:2].lower() == '0x':
            radix = 16
            s = s[2:]
    elif radix == 16 and s[:2].lower() == '0x':
        s = s[2:]
    if not 2 <= radix <= 36:
        return math.nan
    valid = DIGITS[:radix]
    end = 0
    while end < len(s) and s[end].lower() in valid:
        end += 1
    if end == 0:
        return math.nan
    return float(sign * int(s[:end], radix))


def populate_string(env: Environment) -> Environment:
    """Declare the string natives."""

    def std_len(args: List[Any], scope: Environment) -> Any:
        expect_args('len', args, 'string')
        return float(len(args[0]))

    def std_char_at(args: List[Any], scope: Environment) -> Any:
        expect_args('charAt', args, 'string', 'number')
        s, index = args
        i = to_position(index)
        if 0 <= i < len(s):
            return s[i]
        return ''

    def std_concat(args: List[Any], scope: Environment) -> Any:
        expect_args('concat', args, 'string', 'string', 'string', optional=1)
        delimiter = args[2] if len(args) > 2 else ' '
        return args[0] + delimiter + args[1]

    def std_to_lower(args: List[Any], scope: Environment) -> Any:
        expect_args('toLowerCase', args, 'string')
        return args[0].lower()

    def std_to_upper(args: List[Any], scope: Environment) -> Any:
        expect_args('toUpperCase', args, 'string')
        return args[0].upper()

    def std_index_of(args: List[Any], scope: Environment) -> Any:
        expect_args('indexOf', args, 'string', 'string', 'number', optional=1)
        s, sub = args[0], args[1]
        start = clamp(to_position(args[2]), 0, len(s)) if len(args) > 2 else 0
        return float(s.find(sub, start))

    def std_sub_str(args: List[Any], scope: Environment) -> Any:
        expect_args('subStr', args, 'string', 'number', 'number')
        s = args[0]
        start = clamp(to_position(args[1]), 0, len(s))
        end = clamp(to_position(args[2]), 0, len(s))
        if start > end:
            start, end = end, start
        return s[start:end]

    def std_trim(args: List[Any], scope: Environment) -> Any:
        expect_args('trim', args, 'string')
        return args[0].strip()

    def std_parse_int(args: List[Any], scope: Environment) -> Any:
        expect_args('parseInt', args, 'string', 'number', optional=1)
        radix = to_position(args[1]) if len(args) > 1 else 0
        return parse_int(args[0], radix)

    natives = [
        NativeFunction('len', std_len),
        NativeFunction('charAt', std_char_at),
        NativeFunction('concat', std_concat),
        NativeFunction('toLowerCase', std_to_lower),
        NativeFunction('toUpperCase', std_to_upper),
        NativeFunction('indexOf', std_index_of),
        NativeFunction('subStr', std_sub_str),
        NativeFunction('trim', std_trim),
        NativeFunction('parseInt', std_parse_int),
    ]
    for native in natives:
        env.declare(native.name, native, is_const=True)
    return env

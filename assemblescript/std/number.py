import math
import random
import time
from typing import Any, Callable, List

from assemblescript.builtin_function import NativeFunction
from assemblescript.environment import Environment
from assemblescript.types import float_pow
from .common import expect_args


def round_half_up(x: float) -> float:
    return math.floor(x + 0.5)


def _unary(name: str, fn: Callable[[float], float], finite_only: bool = False) -> NativeFunction:
    """Wrap a one-argument float function as a native.

    Domain errors give NaN. With `finite_only`, infinities and NaN are
    returned unchanged instead of being passed to `fn`.
    """
    def native(args: List[Any], scope: Environment) -> Any:
        expect_args(name, args, 'number')
        x = args[0]
        if finite_only and not math.isfinite(x):
            return x
        try:
            return float(fn(x))
        except ValueError:
            return math.nan
    return NativeFunction(name, native)


def populate_number(env: Environment) -> Environment:
    """Declare the math natives."""

    def std_time(args: List[Any], scope: Environment) -> Any:
        expect_args('time', args)
        # milliseconds since the epoch
        return float(int(time.time() * 1000))

    def std_rand(args: List[Any], scope: Environment) -> Any:
        expect_args('rand', args)
        return random.random()

    def std_min(args: List[Any], scope: Environment) -> Any:
        expect_args('min', args, 'number', 'number')
        a, b = args
        if math.isnan(a) or math.isnan(b):
            return math.nan
        return min(a, b)

    def std_max(args: List[Any], scope: Environment) -> Any:
        expect_args('max', args, 'number', 'number')
        a, b = args
        if math.isnan(a) or math.isnan(b):
            return math.nan
        return max(a, b)

    def std_pow(args: List[Any], scope: Environment) -> Any:
        expect_args('pow', args, 'number', 'number')
        return float_pow(args[0], args[1])

    natives = [
        NativeFunction('time', std_time),
        NativeFunction('rand', std_rand),
        _unary('abs', abs),
        _unary('floor', math.floor, finite_only=True),
        _unary('ceil', math.ceil, finite_only=True),
        _unary('round', round_half_up, finite_only=True),
        _unary('sqrt', math.sqrt),
        _unary('sin', math.sin),
        _unary('cos', math.cos),
        _unary('tan', math.tan),
        _unary('iSin', math.asin),
        _unary('iCos', math.acos),
        _unary('iTan', math.atan),
        NativeFunction('min', std_min),
        NativeFunction('max', std_max),
        NativeFunction('pow', std_pow),
    ]
    for native in natives:
        env.declare(native.name, native, is_const=True)
    return env

from typing import Any, List

from assemblescript.errors import AssembleError, ErrorVal
from assemblescript.types import type_name


def expect_args(name: str, args: List[Any], *kinds: str, optional: int = 0) -> None:
    """Validate the argument list of a native function.

    `kinds` lists the expected type name of each parameter ('any' accepts
    every value); the last `optional` parameters may be left out.
    """
    required = len(kinds) - optional
    if not required <= len(args) <= len(kinds):
        if optional:
            expected = f'{required} to {len(kinds)}'
        else:
            expected = str(required)
        raise AssembleError(ErrorVal(
            'TypeError', f'{name} expects {expected} arguments, got {len(args)}'))
    for position, (arg, kind) in enumerate(zip(args, kinds), start=1):
        if kind != 'any' and type_name(arg) != kind:
            raise AssembleError(ErrorVal(
                'TypeError', f'{name} argument {position} must be {kind}, got {type_name(arg)}'))

from typing import List, Any

from assemblescript.builtin_function import NativeFunction
from assemblescript.environment import Environment
from assemblescript.errors import AssembleError, ErrorVal
from assemblescript.types import ArrayVal, NullVal, to_string, type_name
from .common import expect_args


def populate_general(env: Environment) -> Environment:
    """Declare console output, assertions and type inspection natives."""

    def std_vision(args: List[Any], scope: Environment) -> Any:
        if len(args) == 0:
            print('\n')
            return NullVal()
        for arg in args:
            if isinstance(arg, ArrayVal):
                raise AssembleError(ErrorVal(
                    'TypeError', 'invalid array print operation, print the elements one by one instead'))
            print(to_string(arg))
        return NullVal()

    def std_assert_equal(args: List[Any], scope: Environment) -> Any:
        expect_args('assertEqual', args, 'any', 'any')
        actual, expected = args
        if type_name(actual) != type_name(expected):
            raise AssembleError(ErrorVal(
                'AssertionError', f'type mismatch, expected {type_name(expected)} but got {type_name(actual)}'))
        if type_name(actual) not in ('string', 'number', 'boolean'):
            raise AssembleError(ErrorVal(
                'TypeError', f'assertEqual cannot compare values of type {type_name(actual)}'))
        if actual != expected:
            print('❌Test failed!')
            print(f'⚠️ Expected:  {to_string(expected)}')
            print(f'⚠️ Output:  {to_string(actual)}')
            raise AssembleError(ErrorVal('AssertionError', f'expected {to_string(expected)} but got {to_string(actual)}'))
        print('✅Test passed!')
        return True

    def std_type_of(args: List[Any], scope: Environment) -> Any:
        expect_args('typeOf', args, 'any')
        kind = type_name(args[0])
        if kind == 'native-fn':
            return 'function'
        return kind

    env.declare('vision', NativeFunction('vision', std_vision), is_const=True)
    env.declare('assertEqual', NativeFunction('assertEqual', std_assert_equal), is_const=True)
    env.declare('typeOf', NativeFunction('typeOf', std_type_of), is_const=True)
    return env

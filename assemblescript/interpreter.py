"""Tree-walking interpreter for AssembleScript.

`Interpreter.execute` runs statements and `Interpreter.evaluate` computes
expression values; both dispatch on the AST node class. Early exits do not
use Python exceptions: `execute` returns either a plain value, a
`ReturnSignal` (from `snap`) or the `BREAK` sentinel (from `endGame`), and
every statement list stops at the first signal and hands it to its caller.
Loops and switches consume `BREAK`; function calls consume `ReturnSignal`.

Errors are `AssembleError` exceptions. They abort the whole program; the
innermost statement that was executing stamps its source line on the error.
"""

from __future__ import annotations

import math
import sys
from typing import Any, List, Optional, Union

from .ast import (
    Node, Program, VarDecl, ArrayDecl, IfStmt, ElseStmt, WhileStmt, RangeForStmt,
    ForStmt, SwitchStmt, FuncDef, ReturnStmt, BreakStmt, ExprStmt,
    Assign, CompoundAssign, BinaryOp, UnaryOp, Literal, Ident, Call, Index,
)
from .builtin_function import NativeFunction
from .environment import Environment, MAX_ITERATIONS
from .errors import AssembleError, ErrorVal, ReturnSignal
from .parser import parse_program
from .std import setup_global_scope
from .types import (
    NullVal, BreakVal, BREAK, ArrayVal, FunctionVal,
    type_name, is_number, format_number, to_string,
    float_div, float_mod, float_pow,
)


MAX_ARRAY_SIZE = 10_000_000
# each user call costs several Python frames
RECURSION_LIMIT = 15_000

ARITHMETIC_OPS = ('+', '-', '*', '/', '%', '^')
COMPARISON_OPS = ('==', '!=', '<', '>', '<=', '>=')
LOGICAL_OPS = ('&&', '||', 'and', 'or')

ExecResult = Union[ReturnSignal, BreakVal, Any]


def literal_for(value: Any) -> Literal:
    """Build the literal node stored in an array slot after a write."""
    if isinstance(value, bool):
        return Literal(value, 'boolean')
    if is_number(value):
        return Literal(value, 'number')
    if isinstance(value, str):
        return Literal(value, 'string')
    if isinstance(value, NullVal):
        return Literal(None, 'null')
    # arrays and functions have no literal form; keep the value itself
    return Literal(value, type_name(value))


def is_signal(result: Any) -> bool:
    return isinstance(result, (ReturnSignal, BreakVal))


class Interpreter:
    """Core interpreter that executes an AssembleScript AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_iterations: int = MAX_ITERATIONS):
        self.global_env = setup_global_scope(max_iterations)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute a whole program and return the value of its last statement.

        A `snap` at top level ends the program with its value; an `endGame`
        at top level ends it with null.
        """
        if env is None:
            env = self.global_env
        self.debug(f"program start: {len(program.body)} statements")
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, RECURSION_LIMIT))
        try:
            result = self.execute_block(program.body, env)
        except RecursionError:
            raise AssembleError(ErrorVal('StackOverflow', 'maximum call depth exceeded'))
        finally:
            sys.setrecursionlimit(limit)
        if isinstance(result, ReturnSignal):
            result = result.value
        elif isinstance(result, BreakVal):
            result = NullVal()
        self.debug(f"program end: {to_string(result)}")
        return result

    def execute_block(self, statements: List[Node], env: Environment) -> ExecResult:
        result: Any = NullVal()
        for stmt in statements:
            result = self.execute(stmt, env)
            # stop at the first return or break and hand it upward
            if is_signal(result):
                return result
        return result

    def execute(self, node: Node, env: Environment) -> ExecResult:
        try:
            return self.execute_node(node, env)
        except AssembleError as e:
            if e.err.line is None:
                e.err.line = node.line
            raise

    def execute_node(self, node: Node, env: Environment) -> ExecResult:
        if isinstance(node, VarDecl):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            env.declare(node.name, value, node.is_const)
            if self.debug_level >= 2:
                kind = 'const' if node.is_const else 'var'
                self.debug(f"declare {kind} {node.name}: {type_name(value)} = {to_string(value)}")
            return value
        if isinstance(node, ArrayDecl):
            return self.declare_array(node, env)
        if isinstance(node, FuncDef):
            func = FunctionVal(node.name, list(node.params), node.body, env)
            env.declare(node.name, func)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.params)})")
            return func
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond, 'ifWorthy')
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                return self.execute_block(node.body, Environment(parent=env))
            if isinstance(node.else_branch, IfStmt):
                return self.execute(node.else_branch, env)
            if isinstance(node.else_branch, ElseStmt):
                return self.execute(node.else_branch, env)
            return NullVal()
        if isinstance(node, ElseStmt):
            return self.execute_block(node.body, Environment(parent=env))
        if isinstance(node, WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, RangeForStmt):
            return self.execute_range_for(node, env)
        if isinstance(node, ForStmt):
            return self.execute_for(node, env)
        if isinstance(node, SwitchStmt):
            return self.execute_switch(node, env)
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            return ReturnSignal(value)
        if isinstance(node, BreakStmt):
            return BREAK
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env)
        # a bare expression node is accepted as a statement
        return self.evaluate(node, env)

    def declare_array(self, node: ArrayDecl, env: Environment) -> ArrayVal:
        size = self.evaluate(node.size, env)
        if not is_number(size) or not size.is_integer() or size < 1:
            raise AssembleError(ErrorVal(
                'InvalidArraySize', f'array {node.name} size must be a positive whole number, got {to_string(size)}'))
        if size > MAX_ARRAY_SIZE:
            raise AssembleError(ErrorVal(
                'SegFaultSimulated', f'array {node.name} size {format_number(size)} exceeds {MAX_ARRAY_SIZE}'))
        count = int(size)
        if len(node.values) > count:
            raise AssembleError(ErrorVal(
                'ExcessInitializers',
                f'array {node.name} has {len(node.values)} initializers but size {count}'))
        # the declaration's own list stays untouched
        elements: List[Node] = list(node.values)
        elements.extend([Literal(0.0, 'number')] * (count - len(elements)))
        array = ArrayVal(node.name, elements, count)
        env.declare(node.name, array)
        if self.debug_level >= 2:
            self.debug(f"declare team {node.name}[{count}]")
        return array

    # Loops
    def execute_while(self, node: WhileStmt, env: Environment) -> ExecResult:
        iterations = 0
        while True:
            cond = self.evaluate(node.condition, env)
            if not self.is_truthy(cond, 'fightUntil'):
                break
            iterations += 1
            env.guard_iteration(iterations)
            if self.debug_level >= 3:
                self.debug(f"while iteration {iterations}")
            loop_env = Environment(parent=env)
            res = self.execute_block(node.body, loop_env)
            if isinstance(res, ReturnSignal):
                return res
            if isinstance(res, BreakVal):
                break
            loop_env.clear()
        return NullVal()

    def execute_range_for(self, node: RangeForStmt, env: Environment) -> ExecResult:
        start = self.evaluate(node.start, env)
        end = self.evaluate(node.end, env)
        step = self.evaluate(node.step, env) if node.step is not None else 1.0
        for label, value in (('start', start), ('end', end), ('step', step)):
            if not is_number(value):
                raise AssembleError(ErrorVal(
                    'TypeError', f'wakandaForEach {label} must be a number, got {type_name(value)}'))
        if not step > 0:
            raise AssembleError(ErrorVal(
                'InvalidStep', f'wakandaForEach step must be positive, got {format_number(step)}'))
        ascending = start <= end
        current = start
        iterations = 0
        while (current <= end) if ascending else (current >= end):
            iterations += 1
            env.guard_iteration(iterations)
            if self.debug_level >= 3:
                self.debug(f"for {node.iterator} = {format_number(current)}")
            loop_env = Environment(parent=env)
            loop_env.declare(node.iterator, current)
            res = self.execute_block(node.body, loop_env)
            if isinstance(res, ReturnSignal):
                return res
            if isinstance(res, BreakVal):
                break
            loop_env.clear()
            current = current + step if ascending else current - step
        return NullVal()

    def execute_for(self, node: ForStmt, env: Environment) -> ExecResult:
        # header scope shared by init, condition and modification
        header_env = Environment(parent=env)
        self.execute(node.init, header_env)
        iterations = 0
        while True:
            cond = self.evaluate(node.condition, header_env)
            if not self.is_truthy(cond, 'wakandaFor'):
                break
            iterations += 1
            env.guard_iteration(iterations)
            if self.debug_level >= 3:
                self.debug(f"wakandaFor iteration {iterations}")
            body_env = Environment(parent=header_env)
            res = self.execute_block(node.body, body_env)
            if isinstance(res, ReturnSignal):
                return res
            if isinstance(res, BreakVal):
                break
            body_env.clear()
            self.evaluate(node.modification, header_env)
        return NullVal()

    def execute_switch(self, node: SwitchStmt, env: Environment) -> ExecResult:
        disc = self.evaluate(node.discriminant, env)
        if not (is_number(disc) or isinstance(disc, str)):
            raise AssembleError(ErrorVal(
                'SwitchTypeError', f'multiverse value must be a number or string, got {type_name(disc)}'))
        switch_env = Environment(parent=env)
        body = node.default
        for case in node.cases:
            test = self.evaluate(case.test, switch_env)
            if type_name(test) != type_name(disc):
                raise AssembleError(ErrorVal(
                    'SwitchTypeError',
                    f'madness value of type {type_name(test)} cannot match a {type_name(disc)}'))
            if test == disc:
                if self.debug_level >= 3:
                    self.debug(f"multiverse matched {to_string(test)}")
                body = case.consequent
                break
        res = self.execute_block(body, switch_env)
        if isinstance(res, ReturnSignal):
            return res
        return NullVal()

    # Expressions
    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            if node.literal_type == 'null':
                return NullVal()
            return node.value
        if isinstance(node, Ident):
            return env.lookup(node.name)
        if isinstance(node, BinaryOp):
            # both sides are always evaluated, including for && and ||
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            if node.op == '!':
                if isinstance(operand, bool):
                    return not operand
                return NullVal()
            if node.op == '-':
                if is_number(operand):
                    return -operand
                raise AssembleError(ErrorVal(
                    'TypeError', f'<MINUS> expects a number, got {type_name(operand)}'))
            raise AssembleError(ErrorVal('TypeError', f'unsupported unary operator {node.op}'))
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            return self.assign_lvalue(node.target, value, env)
        if isinstance(node, CompoundAssign):
            return self.compound_assign(node, env)
        if isinstance(node, Index):
            return self.read_member(node, env)
        if isinstance(node, Call):
            func = self.evaluate(node.func, env)
            args = [self.evaluate(arg, env) for arg in node.args]
            return self.call_function(func, args, env)
        raise AssembleError(ErrorVal('TypeError', f'cannot evaluate node {type(node).__name__}'))

    def index_of(self, container: Any, index: Any, length: int) -> int:
        if not is_number(index):
            raise AssembleError(ErrorVal(
                'InvalidIndexType', f'index must be a number, got {type_name(index)}'))
        if not index.is_integer() or index < 0 or index >= length:
            raise AssembleError(ErrorVal(
                'IndexOutOfRange',
                f'index {format_number(index)} out of range for {type_name(container)} of length {length}'))
        return int(index)

    def read_member(self, node: Index, env: Environment) -> Any:
        container = self.evaluate(node.target, env)
        index = self.evaluate(node.index, env)
        if isinstance(container, ArrayVal):
            i = self.index_of(container, index, container.size)
            # slots are re-evaluated in the reading scope
            return self.evaluate(container.elements[i], env)
        if isinstance(container, str):
            i = self.index_of(container, index, len(container))
            return container[i]
        raise AssembleError(ErrorVal('TypeError', f'cannot index type {type_name(container)}'))

    def assign_lvalue(self, target: Node, value: Any, env: Environment) -> Any:
        if isinstance(target, Ident):
            env.assign(target.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {target.name} = {to_string(value)}")
            return value
        if isinstance(target, Index):
            container = self.evaluate(target.target, env)
            index = self.evaluate(target.index, env)
            if isinstance(container, ArrayVal):
                i = self.index_of(container, index, container.size)
                container.elements[i] = literal_for(value)
                return container
            if isinstance(container, str):
                i = self.index_of(container, index, len(container))
                if not isinstance(target.target, Ident):
                    raise AssembleError(ErrorVal('TypeError', 'cannot assign into a temporary string'))
                updated = container[:i] + to_string(value) + container[i + 1:]
                env.assign(target.target.name, updated)
                return updated
            raise AssembleError(ErrorVal('TypeError', f'cannot assign to index on type {type_name(container)}'))
        raise AssembleError(ErrorVal('TypeError', 'invalid assignment target'))

    def compound_assign(self, node: CompoundAssign, env: Environment) -> Any:
        if not isinstance(node.target, Ident):
            raise AssembleError(ErrorVal('TypeError', f'{node.op} target must be a variable'))
        name = node.target.name
        current = env.lookup(name)
        value = self.evaluate(node.value, env)
        if type_name(current) != type_name(value):
            raise AssembleError(ErrorVal(
                'TypeMismatch', f'cannot use {node.op} with {type_name(current)} and {type_name(value)}'))
        if not is_number(current):
            raise AssembleError(ErrorVal(
                'TypeMismatch', f'{node.op} requires numbers, got {type_name(current)}'))
        result = self.arithmetic(node.op[0], current, value)
        return env.assign(name, result)

    def call_function(self, func: Any, args: List[Any], env: Environment) -> Any:
        if isinstance(func, NativeFunction):
            if self.debug_level >= 2:
                self.debug(f"call native {func.name} with {len(args)} args")
            return func.call(args, env)
        if isinstance(func, FunctionVal):
            if len(args) != len(func.params):
                raise AssembleError(ErrorVal(
                    'ArityMismatch', f"{func.name} expects {len(func.params)} arguments, got {len(args)}"))
            if self.debug_level >= 2:
                self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
            # lexical scoping: the call scope hangs off the closure
            call_env = Environment(parent=func.closure)
            for param, arg in zip(func.params, args):
                call_env.declare(param, arg)
            res = self.execute_block(func.body, call_env)
            if isinstance(res, ReturnSignal):
                return res.value
            return NullVal()
        raise AssembleError(ErrorVal('UncallableValue', f'{to_string(func)} is not callable'))

    def is_truthy(self, value: Any, construct: str) -> bool:
        if isinstance(value, bool):
            return value
        if is_number(value):
            return value != 0.0 and not math.isnan(value)
        raise AssembleError(ErrorVal(
            'ConditionTypeError',
            f'condition in {construct} must be a boolean or number, got {type_name(value)}'))

    def apply_binary_op(self, op: str, a: Any, b: Any, env: Environment) -> Any:
        if op in ARITHMETIC_OPS:
            if is_number(a) and is_number(b):
                return self.arithmetic(op, a, b)
            if is_number(a) and isinstance(b, str):
                if op == '+':
                    return format_number(a) + b
                if op == '*':
                    return self.repeat(b, a, env)
                return 'NaN'
            if isinstance(a, str) and is_number(b):
                if op == '+':
                    return a + format_number(b)
                if op == '*':
                    return self.repeat(a, b, env)
                return 'NaN'
            if isinstance(a, str) and isinstance(b, str):
                return 'NaN'
            return NullVal()
        if op in COMPARISON_OPS:
            if (is_number(a) and is_number(b)) or (isinstance(a, str) and isinstance(b, str)):
                return self.compare(op, a, b)
            return NullVal()
        if op in LOGICAL_OPS:
            if isinstance(a, bool) and isinstance(b, bool):
                if op in ('&&', 'and'):
                    return a and b
                return a or b
            return NullVal()
        raise AssembleError(ErrorVal('TypeError', f'unknown operator {op}'))

    def arithmetic(self, op: str, a: float, b: float) -> float:
        if op == '+':
            return a + b
        if op == '-':
            return a - b
        if op == '*':
            return a * b
        if op == '/':
            return float_div(a, b)
        if op == '%':
            return float_mod(a, b)
        if op == '^':
            return float_pow(a, b)
        raise AssembleError(ErrorVal('TypeError', f'unknown operator {op}'))

    def compare(self, op: str, a: Any, b: Any) -> bool:
        if op == '==':
            return a == b
        if op == '!=':
            return a != b
        if op == '<':
            return a < b
        if op == '>':
            return a > b
        if op == '<=':
            return a <= b
        return a >= b

    def repeat(self, text: str, count: float, env: Environment) -> str:
        """Number-times-string repetition.

        The result holds `count - 1` copies of `text`, so `3 * "ab"` is
        `"abab"` and `1 * "ab"` is the empty string. A count that is not a
        whole number of at least 1 never terminates the repetition and is
        reported as a runaway loop.
        """
        if not count.is_integer() or count < 1:
            raise AssembleError(ErrorVal(
                'IterationLimitExceeded', f'cannot repeat a string {format_number(count)} times'))
        env.guard_iteration(int(count))
        return text * (int(count) - 1)


def evaluate(program: Program, env: Environment) -> Any:
    """Run `program` in the given root scope and return its last value."""
    return Interpreter(max_iterations=env.max_iterations).run(program, env)


def run_program(source: str, debug_level: int = 0, max_iterations: int = MAX_ITERATIONS) -> Any:
    """Convenience function to parse and run an AssembleScript program from source."""
    ast_program = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level, max_iterations=max_iterations)
    try:
        return interpreter.run(ast_program)
    finally:
        interpreter.close()

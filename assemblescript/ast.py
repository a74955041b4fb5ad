"""Abstract Syntax Tree (AST) definitions for AssembleScript.

The parser produces these nodes and the interpreter walks them. Statement
bodies are plain lists of nodes. Every node carries the source line it was
parsed from in `line` (None for nodes built by hand or synthesised by the
interpreter); the attribute is not a dataclass field, so it
takes no part in construction or equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union, Any


@dataclass
class Node:
    """Base class for all AST nodes."""
    line = None


@dataclass
class Program(Node):
    body: List[Node]


# Statements

@dataclass
class VarDecl(Node):
    name: str
    value: Optional[Node]  # initial value, null when absent
    is_const: bool = False


@dataclass
class ArrayDecl(Node):
    name: str
    size: Node
    values: List[Node] = field(default_factory=list)


@dataclass
class ElseStmt(Node):
    body: List[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    body: List[Node]
    else_branch: Optional[Union['IfStmt', ElseStmt]] = None


@dataclass
class WhileStmt(Node):
    condition: Node
    body: List[Node]


@dataclass
class RangeForStmt(Node):
    """`wakandaForEach (iterator in start to end step step) { body }`"""
    iterator: str
    start: Node
    end: Node
    step: Optional[Node]
    body: List[Node]


@dataclass
class ForStmt(Node):
    """`wakandaFor (init; condition; modification) { body }`"""
    init: Node  # VarDecl or ExprStmt
    condition: Node
    modification: Node
    body: List[Node]


@dataclass
class SwitchCase(Node):
    test: Node
    consequent: List[Node]


@dataclass
class SwitchStmt(Node):
    discriminant: Node
    cases: List[SwitchCase]
    default: List[Node] = field(default_factory=list)


@dataclass
class FuncDef(Node):
    name: str
    params: List[str]
    body: List[Node]


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ExprStmt(Node):
    expr: Node


# Expressions

@dataclass
class Assign(Node):
    target: Node  # Ident or Index
    value: Node


@dataclass
class CompoundAssign(Node):
    op: str  # '+=', '-=', '*=', '/=', '%=', '^='
    target: Node
    value: Node


@dataclass
class BinaryOp(Node):
    """Arithmetic, comparison and logical operators share this node."""
    op: str
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: str  # '!' or '-'
    operand: Node


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'number', 'string', 'boolean', 'null'


@dataclass
class Ident(Node):
    name: str


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class Index(Node):
    target: Node
    index: Node

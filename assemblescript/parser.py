"""Parser for AssembleScript.

The source text is fed to a Lark LALR parser configured with the grammar
below; the resulting parse tree is transformed into the dataclass AST of
`assemblescript.ast` by `ASTTransformer`. Keywords are string terminals so
that Lark only treats a word as a keyword when the whole identifier matches
(`snapshot` stays an identifier).

Operator precedence, loosest first: assignment (right associative),
logical (`&&`, `||`, `and`, `or`), `!`, comparison, additive,
multiplicative, `^`, unary `<MINUS>`, then indexing and calls.

The `parse_program` function is the public entry point and returns a
`Program` AST node representing the entire source file.
"""

from __future__ import annotations

from typing import List

from lark import Lark, Transformer, Token, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .ast import (
    Program, VarDecl, ArrayDecl, IfStmt, ElseStmt, WhileStmt, RangeForStmt,
    ForStmt, SwitchCase, SwitchStmt, FuncDef, ReturnStmt, BreakStmt, ExprStmt,
    Assign, CompoundAssign, BinaryOp, UnaryOp, Literal, Ident, Call, Index,
)
from .errors import AssembleError, ErrorVal


ASSEMBLE_GRAMMAR = r"""
    start: statement*

    // Statements
    ?statement: var_decl
              | const_decl
              | array_decl
              | if_stmt
              | while_stmt
              | range_for_stmt
              | for_stmt
              | switch_stmt
              | func_def
              | return_stmt
              | break_stmt
              | expr_stmt

    var_decl: "newAvenger" IDENT ["=" expression] ";"
    const_decl: "newEternal" IDENT "=" expression ";"
    array_decl: "team" IDENT "[" expression "]" "=" "{" [array_values] "}" ";"
    array_values: expression ("," expression)* [","]

    if_stmt: "ifWorthy" "(" expression ")" block [else_clause]
    ?else_clause: "otherwise" if_stmt
                | "otherwise" block -> else_block

    while_stmt: "fightUntil" "(" expression ")" block
    range_for_stmt: "wakandaForEach" "(" IDENT "in" expression "to" expression ["step" expression] ")" block
    for_stmt: "wakandaFor" "(" for_init expression ";" expression ")" block
    ?for_init: var_decl
             | expr_stmt

    switch_stmt: "multiverse" "(" expression ")" "{" switch_clause* "}"
    ?switch_clause: case_clause
                  | default_clause
    case_clause: "madness" expression ":" statement*
    default_clause: "default" ":" statement*

    func_def: "assemble" IDENT "(" [params] ")" block
    params: IDENT ("," IDENT)*

    return_stmt: "snap" [expression] ";"
    break_stmt: "endGame" ";"
    expr_stmt: expression ";"

    block: "{" statement* "}"

    // Expressions with precedence
    ?expression: assignment
    ?assignment: logical
               | logical "=" assignment -> assign
               | logical COMPOUND_OP assignment -> compound_assign
    ?logical: logical (LOGICAL_OP | AND | OR) negation -> binary_op
            | negation
    ?negation: "!" negation -> not_op
             | comparison
    ?comparison: comparison COMPARE_OP sum -> binary_op
               | sum
    ?sum: sum SUM_OP product -> binary_op
        | product
    ?product: product PRODUCT_OP power -> binary_op
            | power
    ?power: power POW_OP unary -> binary_op
          | unary
    ?unary: "<MINUS>" unary -> minus
          | postfix
    ?postfix: postfix "[" expression "]" -> index
            | postfix "(" [arguments] ")" -> call
            | primary
    ?primary: NUMBER -> number
            | STRING -> string
            | "null" -> null
            | IDENT -> ident
            | "(" expression ")"
    arguments: expression ("," expression)*

    // Tokens
    COMPOUND_OP: "+=" | "-=" | "*=" | "/=" | "%=" | "^="
    LOGICAL_OP: "&&" | "||"
    AND: "and"
    OR: "or"
    COMPARE_OP: "==" | "!=" | "<=" | ">=" | "<" | ">"
    SUM_OP: "+" | "-"
    PRODUCT_OP: "*" | "/" | "%"
    POW_OP: "^"
    NUMBER: /\d+(\.\d*)?([eE][+-]?\d+)?/ | /\.\d+([eE][+-]?\d+)?/
    STRING: /"[^"]*"/

    %import common.CNAME -> IDENT
    %import common.WS
    %ignore WS

    // Comments are delimited by dollar signs: $ like this $
    COMMENT: /\$[^$]*\$/
    %ignore COMMENT
"""


ASSEMBLE_PARSER = Lark(
    ASSEMBLE_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=True,
)


@v_args(meta=True)
class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST.

    Every callback receives the rule's `meta` and stamps the produced node
    with its source line.
    """

    @staticmethod
    def _at(node, meta):
        if not meta.empty:
            node.line = meta.line
        return node

    def start(self, meta, items):
        return self._at(Program(body=list(items)), meta)

    def block(self, meta, items):
        return list(items)

    def var_decl(self, meta, items):
        name, value = items
        return self._at(VarDecl(name=str(name), value=value, is_const=False), meta)

    def const_decl(self, meta, items):
        name, value = items
        return self._at(VarDecl(name=str(name), value=value, is_const=True), meta)

    def array_decl(self, meta, items):
        name, size, values = items
        return self._at(ArrayDecl(name=str(name), size=size, values=values or []), meta)

    def array_values(self, meta, items):
        # a trailing comma leaves a None placeholder behind
        return [item for item in items if item is not None]

    def if_stmt(self, meta, items):
        condition, body, else_branch = items
        return self._at(IfStmt(condition, body, else_branch), meta)

    def else_block(self, meta, items):
        return self._at(ElseStmt(body=items[0]), meta)

    def while_stmt(self, meta, items):
        condition, body = items
        return self._at(WhileStmt(condition, body), meta)

    def range_for_stmt(self, meta, items):
        iterator, start, end, step, body = items
        return self._at(RangeForStmt(str(iterator), start, end, step, body), meta)

    def for_stmt(self, meta, items):
        init, condition, modification, body = items
        return self._at(ForStmt(init, condition, modification, body), meta)

    def switch_stmt(self, meta, items):
        discriminant = items[0]
        cases: List[SwitchCase] = []
        default: List = []
        for clause in items[1:]:
            if isinstance(clause, SwitchCase):
                cases.append(clause)
            else:
                # a later default clause replaces an earlier one
                default = clause[1]
        return self._at(SwitchStmt(discriminant, cases, default), meta)

    def case_clause(self, meta, items):
        return self._at(SwitchCase(test=items[0], consequent=list(items[1:])), meta)

    def default_clause(self, meta, items):
        return ('default', list(items))

    def func_def(self, meta, items):
        name, params, body = items
        return self._at(FuncDef(name=str(name), params=params or [], body=body), meta)

    def params(self, meta, items):
        return [str(item) for item in items]

    def return_stmt(self, meta, items):
        return self._at(ReturnStmt(items[0]), meta)

    def break_stmt(self, meta, items):
        return self._at(BreakStmt(), meta)

    def expr_stmt(self, meta, items):
        return self._at(ExprStmt(items[0]), meta)

    # Expressions
    def assign(self, meta, items):
        target, value = items
        return self._at(Assign(target=target, value=value), meta)

    def compound_assign(self, meta, items):
        target, op, value = items
        return self._at(CompoundAssign(op=str(op), target=target, value=value), meta)

    def binary_op(self, meta, items):
        left, op, right = items
        return self._at(BinaryOp(op=str(op), left=left, right=right), meta)

    def not_op(self, meta, items):
        return self._at(UnaryOp(op='!', operand=items[0]), meta)

    def minus(self, meta, items):
        return self._at(UnaryOp(op='-', operand=items[0]), meta)

    def index(self, meta, items):
        target, index = items
        return self._at(Index(target=target, index=index), meta)

    def call(self, meta, items):
        func, args = items
        return self._at(Call(func=func, args=args or []), meta)

    def arguments(self, meta, items):
        return list(items)

    def number(self, meta, items):
        return self._at(Literal(float(items[0]), 'number'), meta)

    def string(self, meta, items):
        raw = str(items[0])
        return self._at(Literal(raw[1:-1], 'string'), meta)

    def null(self, meta, items):
        return self._at(Literal(None, 'null'), meta)

    def ident(self, meta, items):
        return self._at(Ident(str(items[0])), meta)


def _describe(token: Token) -> str:
    if token.type == '$END':
        return 'end of input'
    return repr(str(token))


def parse_program(source: str) -> Program:
    """Parse AssembleScript source code into an AST Program.

    Lexer and parser failures are raised as `AssembleError` of kind
    'SyntaxError' carrying the offending line.
    """
    try:
        tree = ASSEMBLE_PARSER.parse(source)
    except UnexpectedToken as e:
        expected = ', '.join(sorted(e.expected))
        raise AssembleError(ErrorVal(
            'SyntaxError', f'unexpected {_describe(e.token)}, expected one of: {expected}',
            line=e.line if e.line != -1 else None))
    except UnexpectedCharacters as e:
        raise AssembleError(ErrorVal(
            'SyntaxError', f'unrecognized character {source[e.pos_in_stream]!r}', line=e.line))
    except UnexpectedEOF:
        raise AssembleError(ErrorVal('SyntaxError', 'unexpected end of input'))
    except UnexpectedInput as e:
        raise AssembleError(ErrorVal('SyntaxError', str(e), line=getattr(e, 'line', None)))
    return ASTTransformer().transform(tree)

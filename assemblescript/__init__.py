# AssembleScript language package
# This package provides a parser and tree-walking interpreter for AssembleScript.
from .interpreter import run_program, evaluate, Interpreter
from .parser import parse_program
from .environment import Environment
from .errors import AssembleError, ErrorVal
from .std import setup_global_scope

__all__ = [
    'run_program',
    'evaluate',
    'parse_program',
    'Interpreter',
    'Environment',
    'AssembleError',
    'ErrorVal',
    'setup_global_scope',
]

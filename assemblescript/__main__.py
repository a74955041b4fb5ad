"""CLI entry point for the AssembleScript interpreter.

Usage:
    python -m assemblescript [-v|-vv|-vvv] [--max-iterations N] <program_file>
    python -m assemblescript [-v...] --emit-ast <program_file>
    python -m assemblescript [-v...] --ast <ast_json_file>
    python -m assemblescript            (interactive prompt)

Options:
  -v                Increase debug verbosity (can be repeated)
  --max-iterations  Iteration ceiling of the runaway loop guard
  --emit-ast        Parse the given .avenger file and emit an AST JSON file
  --ast             Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .ast_json import ast_to_obj, ast_from_obj
from .environment import MAX_ITERATIONS
from .errors import AssembleError
from .interpreter import parse_program, Interpreter

PROMPT = '🛡️ avengeScript>>> '


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def execute(interpreter: Interpreter, source: Optional[str] = None, ast_text: Optional[str] = None) -> None:
    try:
        if ast_text is None:
            ast_program = parse_program(source)
        else:
            ast_program = ast_from_obj(json.loads(ast_text))
        interpreter.run(ast_program)
    except Exception as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def repl(interpreter: Interpreter) -> None:
    """Read one program per line and run it; bindings persist between lines."""
    print("$ RunningV0.1")
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        if line.strip() == 'exit':
            break
        if not line.strip():
            continue
        try:
            interpreter.run(parse_program(line))
        except AssembleError as e:
            print(f"Runtime error: {e}", file=sys.stderr)
    interpreter.close()


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="AssembleScript language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-iterations', type=int, default=MAX_ITERATIONS, metavar='N',
                        help=f'iteration ceiling for every loop (default {MAX_ITERATIONS})')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='AVENGER_FILE', help='emit AST JSON for the given .avenger file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='AssembleScript program file (.avenger) to execute')
    args = parser.parse_args(argv)
    if args.max_iterations < 1:
        parser.error('--max-iterations must be at least 1')

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_program(source)
        except AssembleError as e:
            print(f"Runtime error: {e}", file=sys.stderr)
            sys.exit(1)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(debug_level=args.v, max_iterations=args.max_iterations)

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        execute(interpreter, ast_text=read_source(ast_path))
        return

    # Default: execute source file, or start the prompt
    if not args.program:
        repl(interpreter)
        return
    execute(interpreter, source=read_source(Path(args.program)))


if __name__ == '__main__':
    main()

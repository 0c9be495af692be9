"""CLI entry point for the Phy interpreter.

Usage:
    python -m phy [-v|-vv|-vvv] <program_file>
    python -m phy [-v...] --emit-ast <program_file>
    python -m phy [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .phy file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .ast import Stmt
from .ast_json import program_from_obj, program_to_obj
from .errors import PhyError
from .interpreter import Interpreter
from .parser import ParseError, parse_program


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def load_ast_or_exit(path: Path) -> List[Stmt]:
    try:
        return program_from_obj(json.loads(read_source(path)))
    except (ValueError, KeyError, TypeError, IndexError) as e:
        print(f"Error: invalid AST file {path}: {e}", file=sys.stderr)
        sys.exit(1)


def parse_or_exit(source: str) -> List[Stmt]:
    try:
        return parse_program(source)
    except ParseError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        sys.exit(1)


def execute(statements: List[Stmt], debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(statements)
    except PhyError as e:
        print(f"Runtime error: {e.err}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Phy language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PHY_FILE', help='emit AST JSON for the given .phy file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Phy program file (.phy) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_or_exit(read_source(program_file))
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(program_to_obj(statements), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        execute(load_ast_or_exit(Path(args.ast)), args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    execute(parse_or_exit(read_source(Path(args.program))), args.v)


if __name__ == '__main__':
    main()

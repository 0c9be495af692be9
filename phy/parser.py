"""Front end for the Phy language.

This module implements a two-stage parsing pipeline:

1. **Preprocessing**: newlines that logically terminate statements are
   turned into semicolons. A newline ends a statement unless it sits
   inside parentheses or directly follows `;`, `{` or `}`. Line comments
   (`// ...`) are stripped here as well. The newline characters are kept
   so that line numbers stay exact.

2. **Parsing**: the preprocessed source is fed into a Lark LALR parser
   and the parse tree is transformed into the AST of `phy.ast`, with a
   `Loc` attached to every node.

The `parse_program` function is the public entry point and returns the
list of top-level statements.
"""

from __future__ import annotations

import ast as py_ast
from typing import List, Optional

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Loc, Stmt, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt,
    ForRange, ForStmt, FnDecl, ReturnStmt, Binary, Assign, Grouping,
    IntLiteral, RealLiteral, StrLiteral, Identifier, Unary, Logical, Call,
)


class ParseError(Exception):
    """Raised for source text that is not a valid Phy program."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        if line is not None:
            message = f"{message} at {line}:{column}"
        super().__init__(message)
        self.line = line
        self.column = column


def preprocess(source: str) -> str:
    """Insert semicolons at statement boundaries defined by newlines."""
    result: List[str] = []
    depth = 0  # nesting depth for ()
    i = 0
    length = len(source)
    in_string = False
    escape = False
    while i < length:
        c = source[i]
        # Handle strings
        if in_string:
            result.append(c)
            if escape:
                escape = False
            elif c == '\\':
                escape = True
            elif c == '"':
                in_string = False
            i += 1
            continue
        if c == '"':
            in_string = True
            result.append(c)
            i += 1
            continue
        # Strip line comments, stopping before the newline
        if c == '/' and i + 1 < length and source[i + 1] == '/':
            while i < length and source[i] != '\n':
                i += 1
            continue
        if c == '(':
            depth += 1
        elif c == ')':
            if depth > 0:
                depth -= 1
        if c == '\n' and depth == 0:
            # Find last non-whitespace char to avoid empty statements
            j = len(result) - 1
            while j >= 0 and result[j].isspace():
                j -= 1
            prev = result[j] if j >= 0 else ''
            if prev not in ('', ';', '{', '}'):
                result.append(';')
        result.append(c)
        i += 1
    return ''.join(result)


PHY_GRAMMAR = r"""
    ?start: program
    program: (statement | ";")* [simple_stmt]

    // Statements
    ?statement: simple_stmt ";"
              | compound_stmt

    ?simple_stmt: print_stmt
                | var_decl
                | return_stmt
                | expr_stmt

    ?compound_stmt: block
                  | if_stmt
                  | while_stmt
                  | for_stmt
                  | fn_decl

    print_stmt: "print" expression
    var_decl: "var" IDENT ["=" expression]
    return_stmt: "return" [expression]
    expr_stmt: expression

    block: "{" (statement | ";")* [simple_stmt] "}"
    if_stmt: "if" expression block ["else" (block | if_stmt)]
    while_stmt: "while" expression block
    for_stmt: "for" IDENT "in" for_range block
    for_range: RANGE_INT [".." RANGE_INT]
    fn_decl: "fn" IDENT "(" [params] ")" block
    params: IDENT ("," IDENT)*

    // Expressions with precedence
    ?expression: assignment
    ?assignment: IDENT "=" assignment       -> assign
               | logic_or
    ?logic_or: logic_and
             | logic_or OR logic_and         -> logical
    ?logic_and: equality
              | logic_and AND equality       -> logical
    ?equality: comparison
             | equality (EQUAL | NOT_EQUAL) comparison   -> binary
    ?comparison: term
               | comparison (LESS | LESS_EQUAL | GREATER | GREATER_EQUAL) term -> binary
    ?term: factor
         | term (PLUS | MINUS) factor        -> binary
    ?factor: unary
           | factor (STAR | SLASH) unary     -> binary
    ?unary: (BANG | MINUS) unary             -> unary_expr
          | call
    ?call: primary
         | call "(" [args] ")"               -> call_expr
    args: expression ("," expression)*
    ?primary: INT                            -> int_lit
            | REAL                           -> real_lit
            | STRING                         -> str_lit
            | IDENT                          -> identifier
            | "(" expression ")"             -> grouping

    // Tokens
    OR: "or"
    AND: "and"
    EQUAL: "=="
    NOT_EQUAL: "!="
    LESS: "<"
    LESS_EQUAL: "<="
    GREATER: ">"
    GREATER_EQUAL: ">="
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    BANG: "!"

    REAL.2: /\d+\.(?!\.)\d*/
    INT: /\d+/
    RANGE_INT: /-?\d+/
    STRING: /"(\\.|[^"\\\n])*"/
    IDENT: /[A-Za-z_][A-Za-z0-9_]*/

    %import common.WS
    %ignore WS
"""


PHY_PARSER = Lark(
    PHY_GRAMMAR,
    parser='lalr',
    lexer='contextual',
    propagate_positions=True,
    maybe_placeholders=True,
)


def loc_of(meta) -> Optional[Loc]:
    if getattr(meta, 'empty', True):
        return None
    return Loc(meta.line, meta.column, meta.end_line, meta.end_column)


def token_loc(token: Token) -> Loc:
    return Loc(token.line, token.column, token.end_line, token.end_column)


def only_nodes(items) -> list:
    # drops the placeholders of missing optional statements
    return [item for item in items if item is not None]


@v_args(meta=True)
class ASTBuilder(Transformer):
    """Transforms the Lark parse tree into Phy AST nodes."""

    def program(self, meta, items):
        return only_nodes(items)

    def print_stmt(self, meta, items):
        return PrintStmt(items[0], loc_of(meta))

    def var_decl(self, meta, items):
        name, value = items
        return VarDecl(str(name), value, loc_of(meta))

    def return_stmt(self, meta, items):
        return ReturnStmt(items[0], loc_of(meta))

    def expr_stmt(self, meta, items):
        return ExprStmt(items[0], loc_of(meta))

    def block(self, meta, items):
        return Block(only_nodes(items), loc_of(meta))

    def if_stmt(self, meta, items):
        condition, then_branch, else_branch = items
        return IfStmt(condition, then_branch, else_branch, loc_of(meta))

    def while_stmt(self, meta, items):
        condition, body = items
        return WhileStmt(condition, body, loc_of(meta))

    def for_stmt(self, meta, items):
        name, for_range, body = items
        placeholder = VarDecl(str(name), None, token_loc(name))
        return ForStmt(placeholder, for_range, body, loc_of(meta))

    def for_range(self, meta, items):
        start, end = items
        return ForRange(int(start), int(end) if end is not None else None)

    def fn_decl(self, meta, items):
        name, params, body = items
        return FnDecl(str(name), params or [], body.statements, loc_of(meta))

    def params(self, meta, items):
        return [str(item) for item in items]

    # Expressions
    def assign(self, meta, items):
        name, value = items
        return Assign(str(name), value, loc_of(meta))

    def logical(self, meta, items):
        left, op, right = items
        return Logical(left, str(op), right, loc_of(meta))

    def binary(self, meta, items):
        left, op, right = items
        return Binary(left, str(op), right, loc_of(meta))

    def unary_expr(self, meta, items):
        op, operand = items
        return Unary(str(op), operand, loc_of(meta))

    def call_expr(self, meta, items):
        callee, args = items
        return Call(callee, args or [], loc_of(meta))

    def args(self, meta, items):
        return list(items)

    def int_lit(self, meta, items):
        return IntLiteral(int(items[0]), token_loc(items[0]))

    def real_lit(self, meta, items):
        return RealLiteral(float(items[0]), token_loc(items[0]))

    def str_lit(self, meta, items):
        token = items[0]
        # Use Python's literal syntax to process escapes
        try:
            value = py_ast.literal_eval(str(token))
        except (SyntaxError, ValueError) as e:
            raise ParseError("invalid string literal", token.line, token.column) from e
        return StrLiteral(value, token_loc(token))

    def identifier(self, meta, items):
        return Identifier(str(items[0]), token_loc(items[0]))

    def grouping(self, meta, items):
        return Grouping(items[0], loc_of(meta))


def parse_program(source: str) -> List[Stmt]:
    """Parse Phy source code into a list of top-level statements.

    Syntax errors are raised as ParseError with the offending position.
    """
    try:
        tree = PHY_PARSER.parse(preprocess(source))
    except UnexpectedCharacters as e:
        raise ParseError(f"unexpected character {e.char!r}", e.line, e.column) from e
    except UnexpectedToken as e:
        if e.token.type == '$END':
            raise ParseError("unexpected end of input") from e
        raise ParseError(f"unexpected token {str(e.token)!r}", e.line, e.column) from e
    except UnexpectedEOF as e:
        raise ParseError("unexpected end of input") from e
    except UnexpectedInput as e:
        raise ParseError("invalid syntax", e.line, e.column) from e
    try:
        return ASTBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise

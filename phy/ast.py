"""Abstract Syntax Tree (AST) definitions for the Phy language.

The AST classes defined in this module represent the syntactic structure
of parsed Phy programs. They are produced by the front end (or decoded
from JSON) and consumed read-only by the interpreter. Every node carries
the source location it was built from so that runtime errors can point
back at the offending code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Loc:
    """A source span: 1-based start line/column and the end of the span."""
    line: int
    column: int
    end_line: int
    end_column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


class Stmt(Node):
    pass


class Expr(Node):
    pass


###############################################################################
# Expressions
###############################################################################


@dataclass
class Binary(Expr):
    left: Expr
    operator: str
    right: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Assign(Expr):
    name: str
    value: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Grouping(Expr):
    expr: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class IntLiteral(Expr):
    value: int
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class RealLiteral(Expr):
    value: float
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class StrLiteral(Expr):
    value: str
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Identifier(Expr):
    name: str
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Unary(Expr):
    operator: str  # '-' or '!'
    right: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Logical(Expr):
    left: Expr
    operator: str  # 'and' or 'or'
    right: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Call(Expr):
    callee: Expr
    args: List[Expr]
    loc: Optional[Loc] = field(default=None, compare=False)


###############################################################################
# Statements
###############################################################################


@dataclass
class ExprStmt(Stmt):
    expr: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class PrintStmt(Stmt):
    expr: Expr
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class VarDecl(Stmt):
    name: str
    value: Optional[Expr]  # None declares the variable as null
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class Block(Stmt):
    statements: List[Stmt]
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class IfStmt(Stmt):
    condition: Expr
    then_branch: Optional[Stmt]
    else_branch: Optional[Stmt]
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class ForRange:
    """Inclusive integer range of a for loop.

    With no `end` the loop runs over `0..=start`, otherwise `start..=end`.
    """
    start: int
    end: Optional[int] = None

    def bounds(self) -> range:
        if self.end is None:
            return range(0, self.start + 1)
        return range(self.start, self.end + 1)


@dataclass
class ForStmt(Stmt):
    placeholder: VarDecl
    range: ForRange
    body: Stmt
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class FnDecl(Stmt):
    name: str
    params: List[str]
    body: List[Stmt]
    loc: Optional[Loc] = field(default=None, compare=False)


@dataclass
class ReturnStmt(Stmt):
    value: Optional[Expr]
    loc: Optional[Loc] = field(default=None, compare=False)

"""JSON serialization/deserialization for the Phy AST.

This module converts between Phy AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types, including their source locations.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Loc,
    Stmt,
    ExprStmt,
    PrintStmt,
    VarDecl,
    Block,
    IfStmt,
    WhileStmt,
    ForRange,
    ForStmt,
    FnDecl,
    ReturnStmt,
    Binary,
    Assign,
    Grouping,
    IntLiteral,
    RealLiteral,
    StrLiteral,
    Identifier,
    Unary,
    Logical,
    Call,
)


def loc_to_obj(loc: Optional[Loc]) -> Optional[List[int]]:
    if loc is None:
        return None
    return [loc.line, loc.column, loc.end_line, loc.end_column]


def loc_from_obj(o: Optional[List[int]]) -> Optional[Loc]:
    if o is None:
        return None
    return Loc(*o)


def program_to_obj(statements: List[Stmt]) -> Dict[str, Any]:
    return {"type": "Program", "body": [ast_to_obj(s) for s in statements]}


def program_from_obj(obj: Dict[str, Any]) -> List[Stmt]:
    if not isinstance(obj, dict) or obj.get("type") != "Program":
        raise ValueError("expected a Program object")
    return [ast_from_obj(s) for s in obj["body"]]


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    # Statements
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr), "loc": loc_to_obj(node.loc)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "expr": ast_to_obj(node.expr), "loc": loc_to_obj(node.loc)}
    if isinstance(node, VarDecl):
        return {
            "type": "VarDecl",
            "name": node.name,
            "value": ast_to_obj(node.value),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, Block):
        return {
            "type": "Block",
            "statements": [ast_to_obj(s) for s in node.statements],
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, WhileStmt):
        return {
            "type": "WhileStmt",
            "condition": ast_to_obj(node.condition),
            "body": ast_to_obj(node.body),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, ForStmt):
        return {
            "type": "ForStmt",
            "placeholder": ast_to_obj(node.placeholder),
            "range": [node.range.start, node.range.end],
            "body": ast_to_obj(node.body),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, FnDecl):
        return {
            "type": "FnDecl",
            "name": node.name,
            "params": list(node.params),
            "body": [ast_to_obj(s) for s in node.body],
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, ReturnStmt):
        return {"type": "ReturnStmt", "value": ast_to_obj(node.value), "loc": loc_to_obj(node.loc)}

    # Expressions
    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "operator": node.operator,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value), "loc": loc_to_obj(node.loc)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "expr": ast_to_obj(node.expr), "loc": loc_to_obj(node.loc)}
    if isinstance(node, IntLiteral):
        return {"type": "IntLiteral", "value": node.value, "loc": loc_to_obj(node.loc)}
    if isinstance(node, RealLiteral):
        return {"type": "RealLiteral", "value": node.value, "loc": loc_to_obj(node.loc)}
    if isinstance(node, StrLiteral):
        return {"type": "StrLiteral", "value": node.value, "loc": loc_to_obj(node.loc)}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name, "loc": loc_to_obj(node.loc)}
    if isinstance(node, Unary):
        return {
            "type": "Unary",
            "operator": node.operator,
            "right": ast_to_obj(node.right),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, Logical):
        return {
            "type": "Logical",
            "operator": node.operator,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "loc": loc_to_obj(node.loc),
        }
    if isinstance(node, Call):
        return {
            "type": "Call",
            "callee": ast_to_obj(node.callee),
            "args": [ast_to_obj(a) for a in node.args],
            "loc": loc_to_obj(node.loc),
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    loc = loc_from_obj(obj.get("loc"))

    # Statements
    if t == "ExprStmt":
        return ExprStmt(ast_from_obj(obj["expr"]), loc)
    if t == "PrintStmt":
        return PrintStmt(ast_from_obj(obj["expr"]), loc)
    if t == "VarDecl":
        return VarDecl(obj["name"], ast_from_obj(obj.get("value")), loc)
    if t == "Block":
        return Block([ast_from_obj(s) for s in obj["statements"]], loc)
    if t == "IfStmt":
        return IfStmt(
            ast_from_obj(obj["condition"]),
            ast_from_obj(obj.get("then_branch")),
            ast_from_obj(obj.get("else_branch")),
            loc,
        )
    if t == "WhileStmt":
        return WhileStmt(ast_from_obj(obj["condition"]), ast_from_obj(obj["body"]), loc)
    if t == "ForStmt":
        start, end = obj["range"]
        return ForStmt(ast_from_obj(obj["placeholder"]), ForRange(start, end), ast_from_obj(obj["body"]), loc)
    if t == "FnDecl":
        return FnDecl(obj["name"], list(obj["params"]), [ast_from_obj(s) for s in obj["body"]], loc)
    if t == "ReturnStmt":
        return ReturnStmt(ast_from_obj(obj.get("value")), loc)

    # Expressions
    if t == "Binary":
        return Binary(ast_from_obj(obj["left"]), obj["operator"], ast_from_obj(obj["right"]), loc)
    if t == "Assign":
        return Assign(obj["name"], ast_from_obj(obj["value"]), loc)
    if t == "Grouping":
        return Grouping(ast_from_obj(obj["expr"]), loc)
    if t == "IntLiteral":
        return IntLiteral(int(obj["value"]), loc)
    if t == "RealLiteral":
        return RealLiteral(float(obj["value"]), loc)
    if t == "StrLiteral":
        return StrLiteral(obj["value"], loc)
    if t == "Identifier":
        return Identifier(obj["name"], loc)
    if t == "Unary":
        return Unary(obj["operator"], ast_from_obj(obj["right"]), loc)
    if t == "Logical":
        return Logical(ast_from_obj(obj["left"]), obj["operator"], ast_from_obj(obj["right"]), loc)
    if t == "Call":
        return Call(ast_from_obj(obj["callee"]), [ast_from_obj(a) for a in obj["args"]], loc)

    raise ValueError(f"Unknown AST node type: {t}")

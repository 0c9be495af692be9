"""Tree-walking interpreter for the Phy language.

The interpreter executes a list of statement nodes produced by the front
end (see `phy.parser`). Statements and expressions are evaluated by
recursive descent over the AST; the active scope frame is passed along
explicitly, so leaving a scope never needs any cleanup.

Executing a statement has three possible outcomes:

* it completes and returns a value,
* it returns a `ReturnSignal`, which block and loop execution hand back
  unchanged until a function call consumes it,
* it fails by raising `PhyError`.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional

from .ast import (
    Stmt, Expr, ExprStmt, PrintStmt, VarDecl, Block, IfStmt, WhileStmt,
    ForStmt, FnDecl, ReturnStmt, Binary, Assign, Grouping, IntLiteral,
    RealLiteral, StrLiteral, Identifier, Unary, Logical, Call, Loc,
)
from .callable import Callable, UserFunction
from .environment import Environment
from .errors import EnvError, ErrorVal, OperationError, PhyError, ReturnSignal
from .natives import populate_globals
from .parser import parse_program
from .values import NullVal, is_null, is_numeric, negate, operate, to_string, type_name

# Names resolved before any environment lookup; they can't be shadowed.
RESERVED_NAMES = {
    'true': lambda: True,
    'false': lambda: False,
    'null': NullVal,
}

# Each Phy call costs several Python frames.
RECURSION_LIMIT = 10000


def fail(name: str, message: str, loc: Optional[Loc], payload: Any = None) -> PhyError:
    return PhyError(ErrorVal(name, message, loc, payload))


class Interpreter:
    """Core interpreter that executes Phy ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt'):
        self.globals = Environment()
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 and debug_file else None
        populate_globals(self.globals)
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

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
    def interpret(self, statements: List[Stmt]) -> Any:
        """Run a statement sequence in the globals frame.

        Returns the value of the last statement, or null. A `return`
        outside of any function surfaces as a 'Return' PhyError carrying
        the returned value.
        """
        result: Any = NullVal()
        for stmt in statements:
            result = self.execute(stmt, self.globals)
            if isinstance(result, ReturnSignal):
                raise fail('Return', f'return outside of a function: {to_string(result.value)}',
                           None, payload=result.value)
        return result

    def execute_block(self, statements: List[Stmt], env: Environment) -> Any:
        for stmt in statements:
            result = self.execute(stmt, env)
            if isinstance(result, ReturnSignal):
                return result
        return NullVal()

    def execute(self, node: Stmt, env: Environment) -> Any:
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env)
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expr, env)
            print(to_string(value))
            return NullVal()
        if isinstance(node, VarDecl):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            self.declare(env, node.name, value, node.loc)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name}: {type_name(value)} = {to_string(value)}")
            return NullVal()
        if isinstance(node, Block):
            # the block's own value is never surfaced, only a return signal
            return self.execute_block(node.statements, Environment(parent=env))
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            if not isinstance(cond, bool):
                raise fail('NonBoolIfCondition', "'if' condition is not a bool", node.loc)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {to_string(cond)}")
            branch = node.then_branch if cond else node.else_branch
            if branch is None:
                return NullVal()
            return self.execute(branch, env)
        if isinstance(node, WhileStmt):
            while True:
                cond = self.evaluate(node.condition, env)
                if not isinstance(cond, bool):
                    raise fail('NonBoolWhileCondition', "'while' condition is not a bool", node.loc)
                if not cond:
                    break
                res = self.execute(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return NullVal()
        if isinstance(node, ForStmt):
            return self.execute_for(node, env)
        if isinstance(node, FnDecl):
            func = UserFunction(node.name, node.params, node.body, env, node.loc)
            self.declare(env, node.name, func, node.loc)
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}/{func.arity()}")
            return NullVal()
        if isinstance(node, ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else NullVal()
            return ReturnSignal(value)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_for(self, node: ForStmt, env: Environment) -> Any:
        # One frame for the whole loop. The placeholder is declared once and
        # reassigned, so closures created in the body share that binding.
        for_env = Environment(parent=env)
        self.execute(node.placeholder, for_env)
        name = node.placeholder.name
        for i in node.range.bounds():
            try:
                for_env.assign(name, i)
            except EnvError as e:
                raise fail('ForLoopError', str(e), node.loc)
            if self.debug_level >= 3:
                self.debug(f"for {name} = {i}")
            res = self.execute(node.body, for_env)
            if isinstance(res, ReturnSignal):
                return res
        return NullVal()

    def declare(self, env: Environment, name: str, value: Any, loc: Optional[Loc]):
        try:
            env.declare(name, value)
        except EnvError as e:
            raise fail('DeclarationError', str(e), loc)

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            if is_null(left):
                raise fail('UninitializedValue', 'use of an uninitialized value', node.left.loc)
            right = self.evaluate(node.right, env)
            if is_null(right):
                raise fail('UninitializedValue', 'use of an uninitialized value', node.right.loc)
            try:
                return operate(left, right, node.operator)
            except OperationError as e:
                raise fail('OperationError', str(e), node.loc)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            try:
                env.assign(node.name, value)
            except EnvError as e:
                raise fail('UndefinedAssignment', str(e), node.loc)
            return NullVal()
        if isinstance(node, Grouping):
            return self.evaluate(node.expr, env)
        if isinstance(node, (IntLiteral, RealLiteral, StrLiteral)):
            return node.value
        if isinstance(node, Identifier):
            if node.name in RESERVED_NAMES:
                return RESERVED_NAMES[node.name]()
            try:
                return env.get(node.name)
            except EnvError as e:
                raise fail('UndefinedVariable', str(e), node.loc)
        if isinstance(node, Unary):
            return self.evaluate_unary(node, env)
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if not isinstance(left, bool):
                raise fail('NonBoolIfCondition',
                           f"left operand of '{node.operator}' is not a bool", node.loc)
            if node.operator == 'or' and left:
                return left
            if node.operator == 'and' and not left:
                return left
            # the right operand is returned as is, without a bool check
            return self.evaluate(node.right, env)
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_unary(self, node: Unary, env: Environment) -> Any:
        value = self.evaluate(node.right, env)
        if node.operator == '!' and is_numeric(value):
            raise fail('BangOnNonBool', "'!' can only be applied to a bool value", node.loc)
        if node.operator == '-' and (isinstance(value, (bool, str)) or is_null(value)):
            raise fail('NegateNonNumeric', "'-' can only be applied to an int or a real value", node.loc)
        try:
            return negate(value, node.operator)
        except OperationError as e:
            raise fail('NegationError', str(e), node.loc)

    def evaluate_call(self, node: Call, env: Environment) -> Any:
        callee = self.evaluate(node.callee, env)
        args = [self.evaluate(arg, env) for arg in node.args]
        if not isinstance(callee, Callable):
            raise fail('NotCallable', f'only functions are callable, got {type_name(callee)}', node.loc)
        if callee.arity() != len(args):
            raise fail('ArityMismatch',
                       f'wrong number of arguments: expected {callee.arity()} but got {len(args)}',
                       node.loc, payload=(callee.arity(), len(args)))
        if self.debug_level >= 2:
            self.debug(f"call {callee.name}({', '.join(to_string(a) for a in args)})")
        try:
            return callee.call(self, args)
        except RecursionError:
            raise fail('StackOverflow', f'call depth exceeded in {callee.name}', node.loc)
        except PhyError as e:
            raise fail('CallError', f'in {callee.name}: {e.err}', node.loc, payload=e.err) from e


def run_program(source: str, debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Phy program from source."""
    statements = parse_program(source)
    interpreter = Interpreter(debug_level=debug_level)
    try:
        return interpreter.interpret(statements)
    finally:
        interpreter.close()

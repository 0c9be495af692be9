from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

from phy.ast import Loc, Stmt
from phy.environment import Environment
from phy.errors import EnvError, ErrorVal, PhyError, ReturnSignal
from phy.values import NullVal

if TYPE_CHECKING:
    from phy.interpreter import Interpreter


class Callable:
    """Invocation contract shared by user-defined and native functions.

    The call site checks the argument count against `arity()` before
    calling, so implementations may assume they get exactly that many
    arguments.
    """
    kind = 'callable'
    name: str

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        raise NotImplementedError


class UserFunction(Callable):
    """A function declared in Phy code, closed over its declaring frame."""
    kind = 'fn'

    def __init__(self, name: str, params: List[str], body: List[Stmt], closure: Environment,
                 loc: Optional[Loc] = None):
        self.name = name
        self.params = params
        self.body = body
        self.closure = closure  # the frame itself, not a snapshot
        self.loc = loc

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        call_env = Environment(parent=self.closure)
        for param, arg in zip(self.params, args):
            try:
                call_env.declare(param, arg)
            except EnvError as e:
                raise PhyError(ErrorVal('DeclarationError', str(e), self.loc))
        result = interpreter.execute_block(self.body, call_env)
        if isinstance(result, ReturnSignal):
            return result.value
        return NullVal()

    def __repr__(self) -> str:
        return f"<fn {self.name}>"


class NativeFunction(Callable):
    """A capability provided by the host, e.g. reading a clock.

    `fn` receives the already-evaluated argument list and returns a Phy
    value; it may raise PhyError.
    """
    kind = 'native fn'

    def __init__(self, name: str, arity: int, fn):
        self.name = name
        self.n_params = arity
        self.fn = fn

    def arity(self) -> int:
        return self.n_params

    def call(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<native fn {self.name}>"

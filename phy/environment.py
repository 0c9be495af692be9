from typing import Any, Dict, Optional

from phy.errors import EnvError


class Environment:
    """A scope frame mapping identifiers to values, chained to its parent.

    Frames are shared by reference: the interpreter, child frames and
    closures may all hold the same frame, which stays alive as long as any
    of them does.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def declare(self, name: str, value: Any):
        if name in self.values:
            raise EnvError(f'variable {name} already declared')
        self.values[name] = value

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if self.parent is not None:
            return self.parent.get(name)
        raise EnvError(f'undefined variable {name}')

    def assign(self, name: str, value: Any):
        # Never creates a binding: the nearest frame holding the name wins
        if name in self.values:
            self.values[name] = value
        elif self.parent is not None:
            self.parent.assign(name, value)
        else:
            raise EnvError(f'assignment to undefined variable {name}')

    def __repr__(self) -> str:
        return f"<Environment {sorted(self.values)}>"

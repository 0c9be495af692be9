"""Native functions installed into every interpreter's globals frame."""

import time
from typing import Any, List

from phy.callable import NativeFunction
from phy.environment import Environment


def native_clock(args: List[Any]) -> float:
    # seconds from a monotonic clock; only differences are meaningful
    return time.monotonic()


NATIVES = [
    NativeFunction('clock', 0, native_clock),
]


def populate_globals(env: Environment) -> Environment:
    for native in NATIVES:
        env.declare(native.name, native)
    return env

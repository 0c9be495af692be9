# Phy language package
# This package provides the front end and the tree-walking interpreter for Phy.
from .interpreter import run_program, Interpreter
from .parser import parse_program, ParseError
from .errors import PhyError, ErrorVal

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'ParseError',
    'PhyError',
    'ErrorVal',
]

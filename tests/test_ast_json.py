import json

import pytest

from phy.ast import Block, ExprStmt, IfStmt, Identifier, Loc
from phy.ast_json import ast_from_obj, ast_to_obj, program_from_obj, program_to_obj
from phy.interpreter import Interpreter
from phy.parser import parse_program

FIB = """
fn fib(n) {
    if n <= 1 { return n }
    return fib(n - 2) + fib(n - 1)
}
var total = 0
for i in 1..3 { total = total + fib(i * 5) }
print "fib" * 2
total
"""


def test_round_trip_through_json():
    statements = parse_program(FIB)
    data = json.loads(json.dumps(program_to_obj(statements)))
    restored = program_from_obj(data)
    assert restored == statements
    assert restored[0].loc == statements[0].loc
    assert restored[0].body[0].condition.loc == statements[0].body[0].condition.loc


def test_restored_program_runs(capsys):
    data = json.loads(json.dumps(program_to_obj(parse_program(FIB))))
    result = Interpreter().interpret(program_from_obj(data))
    assert result == 5 + 55 + 610
    assert capsys.readouterr().out == 'fibfib\n'


def test_optional_branches():
    node = IfStmt(Identifier('a', Loc(1, 4, 1, 5)), None, Block([ExprStmt(Identifier('b'))]))
    obj = ast_to_obj(node)
    assert obj['then_branch'] is None
    assert obj['condition']['loc'] == [1, 4, 1, 5]
    assert ast_from_obj(obj) == node


def test_invalid_objects():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "Nope"})
    with pytest.raises(ValueError):
        program_from_obj({"type": "Block", "statements": []})
    with pytest.raises(ValueError):
        program_from_obj([])
    with pytest.raises(TypeError):
        ast_to_obj(object())

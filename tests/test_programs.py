from pathlib import Path

import pytest

from phy.interpreter import Interpreter
from phy.parser import parse_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def run_example(name):
    source = (EXAMPLES / name).read_text(encoding='utf-8')
    Interpreter().interpret(parse_program(source))


@pytest.mark.parametrize('name, expected', [
    ('countdown.phy', ['5', '4', '3', '2', '1', 'liftoff!']),
    ('fib.phy', ['0', '1', '1', '2', '3', '5', '8', '13', '21', '34', '55']),
    ('counter.phy', ['1', '2', '1', '3']),
    ('banner.phy', ['==========', '| phy |', 'ababab', '==========']),
    ('fizzbuzz.phy', [
        '1', '2', 'Fizz', '4', 'Buzz', 'Fizz', '7', '8', 'Fizz', 'Buzz',
        '11', 'Fizz', '13', '14', 'FizzBuzz',
    ]),
])
def test_example_program(name, expected, capsys):
    run_example(name)
    out = capsys.readouterr().out.strip().split('\n')
    assert out == expected

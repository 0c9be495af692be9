import pytest

from phy.callable import NativeFunction, UserFunction
from phy.errors import ErrorVal, PhyError
from phy.interpreter import Interpreter, run_program
from phy.parser import parse_program
from phy.values import NullVal


def run(code, interp=None):
    return (interp or Interpreter()).interpret(parse_program(code))


def error_of(code):
    with pytest.raises(PhyError) as exc:
        run(code)
    return exc.value.err


def test_functions():
    code = """
var res
fn add(a, b) {
    res = a + b
}
add(5, 6)
res
"""
    assert run(code) == 11


def test_function_without_return_yields_null():
    assert isinstance(run("fn f() {}\nf()"), NullVal)
    assert isinstance(run("fn f() { return }\nf()"), NullVal)


def test_first_class_fn():
    code = """
fn add(a, b) { return a+b }
var c = add
c(1, 2)
"""
    assert run(code) == 3


def test_function_passed_as_argument():
    code = """
fn twice(f, x) { return f(f(x)) }
fn double(n) { return n * 2 }
twice(double, 5)
"""
    assert run(code) == 20


def test_recursion():
    code = """
fn fib(n) {
    if n <= 1 { return n }

    return fib(n-2) + fib(n-1)
}

fib(20)
"""
    assert run(code) == 6765


def test_return_unwinds_loops():
    code = """
fn first_square_above(limit) {
    for i in 100 {
        var n = 0
        while n < 3 {
            n = n + 1
        }
        if i * i > limit { return i }
    }
    return -1
}
first_square_above(50)
"""
    assert run(code) == 8


def test_mutual_recursion_in_block():
    code = """
var result
{
    fn is_even(n) {
        if n == 0 { return true }
        return is_odd(n - 1)
    }
    fn is_odd(n) {
        if n == 0 { return false }
        return is_even(n - 1)
    }
    result = is_even(10)
}
result
"""
    assert run(code) is True


def test_closure_env():
    code = """
fn makeCounter() {
  var i = 0
  fn count() {
    i = i + 1
    return i
  }

  return count
}

var counter = makeCounter()
var a = 0
a = counter()
a = counter()
a
"""
    assert run(code) == 2


def test_closures_have_independent_state():
    code = """
fn makeCounter() {
  var i = 0
  fn count() {
    i = i + 1
    return i
  }
  return count
}
var first = makeCounter()
var second = makeCounter()
first()
first()
second()
"""
    assert run(code) == 1


def test_closure_sees_later_mutation():
    code = """
var greeting = "hi"
fn greet() { return greeting }
greeting = "hello"
greet()
"""
    assert run(code) == "hello"


def test_parameters_shadow_outer_names():
    code = """
var n = 1
fn f(n) { return n * 10 }
f(4) + n
"""
    assert run(code) == 41


def test_wrong_args_number():
    err = error_of("fn add(a, b) { return a + b }\nadd(1)")
    assert err.name == 'ArityMismatch'
    assert err.payload == (2, 1)
    assert 'expected 2 but got 1' in err.message
    assert err.loc.line == 2


def test_not_callable():
    assert error_of("var x = 5\nx()").name == 'NotCallable'
    assert error_of('"foo"()').name == 'NotCallable'
    assert error_of("null()").name == 'NotCallable'


def test_error_inside_callee_is_wrapped():
    code = """
fn bad() {
    return 1 + "a"
}
bad()
"""
    err = error_of(code)
    assert err.name == 'CallError'
    assert err.loc.line == 5
    assert isinstance(err.payload, ErrorVal)
    assert err.payload.name == 'OperationError'
    assert err.payload.loc.line == 3


def test_duplicate_parameter_names():
    err = error_of("fn f(a, a) { return a }\nf(1, 2)")
    assert err.name == 'CallError'
    assert err.payload.name == 'DeclarationError'
    assert err.payload.loc.line == 1


def test_clock():
    assert isinstance(run("clock()"), float)
    assert run("var t = clock()\nclock() - t >= 0.") is True
    err = error_of("clock(1)")
    assert err.name == 'ArityMismatch'
    assert err.payload == (0, 1)


def test_registered_native_function():
    interp = Interpreter()
    interp.globals.declare('square', NativeFunction('square', 1, lambda args: args[0] * args[0]))
    assert run("square(7) + 1", interp) == 50
    assert run("var sq = square\nsq(3)", interp) == 9


def test_native_failure_is_wrapped():
    def explode(args):
        raise PhyError(ErrorVal('OperationError', 'boom'))

    interp = Interpreter()
    interp.globals.declare('explode', NativeFunction('explode', 0, explode))
    with pytest.raises(PhyError) as exc:
        run("explode()", interp)
    assert exc.value.err.name == 'CallError'
    assert exc.value.err.payload.message == 'boom'


def test_user_function_values():
    interp = Interpreter()
    run("fn add(a, b) { return a + b }", interp)
    add = interp.globals.get('add')
    assert isinstance(add, UserFunction)
    assert add.arity() == 2
    assert add.closure is interp.globals
    assert add.call(interp, [2, 3]) == 5


def test_run_program(capsys):
    assert run_program('fn sq(x) { return x * x }\nprint sq(4)\nsq(5)') == 25
    assert capsys.readouterr().out == '16\n'


def test_deep_recursion():
    code = """
fn down(n) {
    if n == 0 { return 0 }
    return down(n - 1) + 1
}
down(500)
"""
    assert run(code) == 500


def test_unbounded_recursion_is_a_stack_overflow():
    err = error_of("fn forever(n) { return forever(n + 1) }\nforever(0)")
    assert err.name == 'CallError'
    while err.name == 'CallError':
        err = err.payload
    assert err.name == 'StackOverflow'
    assert err.loc.line == 1

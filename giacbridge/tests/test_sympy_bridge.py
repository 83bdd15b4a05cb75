from __future__ import annotations

import pytest
import sympy
from sympy import Matrix, Rational, Symbol, pi, sin, sqrt

from giacbridge.errors import GiacError
from giacbridge.sympy_bridge import from_sympy, get_symbol, parse_giac, sympy_to_giac, to_sympy

x = Symbol("x")
y = Symbol("y")


def test_symbols_are_cached() -> None:
    assert get_symbol("x") is get_symbol("x")
    assert get_symbol("x", positive=True) is not get_symbol("x")


def test_factored_form_is_kept(session, fake) -> None:
    fake.results["factor(x^2-1)"] = "(x-1)*(x+1)"
    result = to_sympy(session.evaluate("factor(x^2-1)"))
    assert isinstance(result, sympy.Mul)
    assert len(result.args) == 2
    assert all(isinstance(a, sympy.Add) for a in result.args)
    assert sympy.expand(result.doit()) == x ** 2 - 1


def test_integer_factorisation_is_kept() -> None:
    result = to_sympy("2^3*5")
    assert isinstance(result, sympy.Mul)
    assert result.args[0] == sympy.Pow(2, 3, evaluate=False)
    assert result.doit() == 40


def test_numbers() -> None:
    assert to_sympy("42") == 42
    assert to_sympy("-5") == -5
    assert to_sympy("3/4") == Rational(3, 4)
    assert to_sympy("-3/4") == Rational(-3, 4)
    assert to_sympy("2.5e-3") == sympy.Float("0.0025")
    big = to_sympy("123456789012345678901234567890")
    assert big == sympy.Integer(123456789012345678901234567890)


def test_constants() -> None:
    assert to_sympy("pi") is pi
    assert to_sympy("e") is sympy.E
    assert to_sympy("undef") is sympy.nan
    assert to_sympy("true") is sympy.true
    assert to_sympy("2*i").doit() == 2 * sympy.I


def test_infinities() -> None:
    assert to_sympy("inf") is sympy.oo
    assert to_sympy("+infinity") is sympy.oo
    assert to_sympy("-infinity") is -sympy.oo
    assert to_sympy("infinity") is sympy.zoo
    assert to_sympy("[-infinity,+infinity]") == [-sympy.oo, sympy.oo]


def test_names_that_shadow_sympy_stay_symbols() -> None:
    assert to_sympy("gamma") == Symbol("gamma")
    assert to_sympy("E") == Symbol("E")
    assert to_sympy("Gamma(5)").doit() == 24


def test_functions() -> None:
    assert to_sympy("sin(x)") == sin(x)
    assert to_sympy("sqrt(2)") == sqrt(2)
    assert to_sympy("ln(x)") == sympy.log(x)
    assert to_sympy("n!") == sympy.factorial(Symbol("n"))
    unknown = to_sympy("frobnicate(x,y)")
    assert unknown.func.__name__ == "frobnicate"
    assert unknown.args == (x, y)


def test_indexing() -> None:
    result = to_sympy("v[1]")
    assert isinstance(result, sympy.Indexed)
    assert result.indices == (1,)


def test_relations() -> None:
    assert to_sympy("x=2") == sympy.Eq(x, 2)
    assert to_sympy("x==2") == sympy.Eq(x, 2)
    assert to_sympy("x!=2") == sympy.Ne(x, 2)
    assert to_sympy("x<y") == sympy.Lt(x, y)
    assert to_sympy("x<=y") == sympy.Le(x, y)


def test_logic() -> None:
    both = to_sympy("(x>0) && (y<1)")
    assert isinstance(both, sympy.And)
    assert set(both.args) == {sympy.Gt(x, 0), sympy.Lt(y, 1)}
    either = to_sympy("(x>0) or (y<1)")
    assert isinstance(either, sympy.Or)


def test_vectors_and_matrices() -> None:
    assert to_sympy("[1,x]") == [1, x]
    assert to_sympy("[]") == []
    assert to_sympy("1,2") == [1, 2]
    assert to_sympy("seq[1,2]") == [1, 2]
    assert to_sympy("set[2,1]") == sympy.FiniteSet(1, 2)
    assert to_sympy("set[]") == sympy.EmptySet
    assert to_sympy("[[1,2],[3,4]]") == Matrix([[1, 2], [3, 4]])
    assert to_sympy("[[1,2],[3]]") == [[1, 2], [3]]


def test_string_values() -> None:
    assert to_sympy('"hello"') == "hello"
    assert to_sympy('"x and y = 1"') == "x and y = 1"
    assert parse_giac('["a",1]') == ["a", 1]


@pytest.mark.parametrize("text", ["", "   ", "(x+1", "x+", "1 2", "x $ y"])
def test_malformed_output(text: str) -> None:
    with pytest.raises(GiacError) as excinfo:
        to_sympy(text)
    assert excinfo.value.category == "parse"


@pytest.mark.parametrize(
    ("obj", "expected"),
    [
        (x, "x"),
        (sympy.Integer(-3), "(-3)"),
        (Rational(1, 2), "(1/2)"),
        (pi, "pi"),
        (sympy.E, "e"),
        (sympy.I, "i"),
        (sympy.oo, "inf"),
        (-sympy.oo, "(-inf)"),
        (sympy.nan, "undef"),
        (sympy.zoo, "infinity"),
        (sin(x), "sin(x)"),
        (sympy.log(x), "ln(x)"),
        (sympy.Abs(x), "abs(x)"),
        (sympy.Eq(x, 1), "(x=1)"),
        (sympy.Matrix([[1, 2], [3, 4]]), "[[1,2],[3,4]]"),
        ([1, x], "[1,x]"),
    ],
)
def test_sympy_to_giac(obj, expected: str) -> None:
    assert sympy_to_giac(obj) == expected


def test_sympy_to_giac_compound_expressions() -> None:
    text = sympy_to_giac(x ** 2 + 1)
    assert text.startswith("(") and "^2" in text and "+" in text
    assert sympy_to_giac(sympy.Derivative(sin(x), x)) == "diff(sin(x),x)"
    assert sympy_to_giac(sympy.Integral(x, (x, 0, 1))) == "integrate(x,x,0,1)"
    assert sympy_to_giac(sympy.gamma(x)) == "Gamma(x)"


def test_plain_python_values_are_sympified() -> None:
    assert sympy_to_giac(3) == "3"
    assert sympy_to_giac("x") == "x"


def test_unsupported_sympy_object() -> None:
    with pytest.raises(GiacError) as excinfo:
        sympy_to_giac(sympy.FiniteSet(1, 2))
    assert excinfo.value.category == "type"


def test_from_sympy_evaluates(session, fake) -> None:
    fake.results["sin(x)"] = "sin(x)"
    result = from_sympy(sin(x), session=session)
    assert result.text == "sin(x)"
    assert fake.log[-1] == "_gb1:=(sin(x))"

"""Rendering Python values as GIAC source text."""

import math
import numbers

import sympy

from .errors import GiacError
from .expr import Expr


def _float_text(x):
    if math.isnan(x):
        return "undef"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return repr(float(x))


def to_giac_string(arg):
    """GIAC source text for one argument.

    Strings are passed through verbatim, so ``"x^2-1"`` is an expression
    and ``'"hello"'`` is a GIAC string literal.
    """
    if isinstance(arg, Expr):
        return arg.text
    if isinstance(arg, str):
        return arg
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, (sympy.Basic, sympy.MatrixBase)):
        from .sympy_bridge import sympy_to_giac
        return sympy_to_giac(arg)
    if isinstance(arg, numbers.Integral):
        return str(int(arg))
    if isinstance(arg, numbers.Rational):
        return f"({arg.numerator})/({arg.denominator})"
    if isinstance(arg, numbers.Real):
        return _float_text(float(arg))
    if isinstance(arg, numbers.Complex):
        return f"({_float_text(arg.real)})+({_float_text(arg.imag)})*i"
    if isinstance(arg, (list, tuple)):
        return "[" + ",".join(to_giac_string(a) for a in arg) + "]"

    from .matrix import GiacMatrix
    if isinstance(arg, GiacMatrix):
        return arg.expr.text

    raise GiacError(f"Cannot convert {type(arg).__name__} to GIAC string representation", "type")


def build_command_string(name, args):
    """``name(a,b,...)`` from already formatted arguments."""
    return f"{name}({','.join(args)})"

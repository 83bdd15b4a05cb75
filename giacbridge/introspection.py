"""Type predicates and component accessors for GIAC values."""

from .convert import is_boolean_text
from .errors import GiacError
from .gentypes import NUMERIC_TYPES, GenType, vector_subtype


def giac_type(expr):
    """GenType tag of the value behind ``expr``."""
    if expr is None:
        raise GiacError("Cannot get type of null expression", "memory")
    return expr.gen_type


def subtype(expr):
    """Vector subtype (sequence, set, list or standard); 0 for non-vectors."""
    if giac_type(expr) != GenType.VECT:
        return 0
    return vector_subtype(expr.text)


def is_integer(expr):
    return giac_type(expr) in (GenType.INT, GenType.ZINT) and not is_boolean_text(expr.text)


def is_numeric(expr):
    return giac_type(expr) in NUMERIC_TYPES and not is_boolean_text(expr.text)


def is_vector(expr):
    return giac_type(expr) == GenType.VECT


def is_symbolic(expr):
    return giac_type(expr) == GenType.SYMB


def is_identifier(expr):
    return giac_type(expr) == GenType.IDNT


def is_fraction(expr):
    return giac_type(expr) == GenType.FRAC


def is_complex(expr):
    return giac_type(expr) == GenType.CPLX


def is_string(expr):
    return giac_type(expr) == GenType.STRNG


def is_boolean(expr):
    return giac_type(expr) == GenType.INT and is_boolean_text(expr.text)


def _component(command, expr):
    return expr.session.evaluate(f"{command}({expr.name})")


def numer(expr):
    """Numerator; an integer is its own numerator."""
    if is_integer(expr):
        return expr.session.evaluate(expr.name)
    return _component("numer", expr)


def denom(expr):
    """Denominator; 1 for an integer."""
    if is_integer(expr):
        return expr.session.evaluate("1")
    return _component("denom", expr)


def real_part(expr):
    return _component("re", expr)


def imag_part(expr):
    return _component("im", expr)


def symb_funcname(expr):
    """Name of the top-level operator of a symbolic expression, e.g. ``sin``."""
    if not is_symbolic(expr):
        raise GiacError(f"Expected a symbolic expression, got {giac_type(expr).name}", "type")
    name = expr.session.execute(f"sommet({expr.name})")
    return name.strip().strip("'").strip('"')


def symb_argument(expr):
    """Argument(s) of the top-level operator; several arguments come back as a sequence."""
    if not is_symbolic(expr):
        raise GiacError(f"Expected a symbolic expression, got {giac_type(expr).name}", "type")
    return _component("feuille", expr)

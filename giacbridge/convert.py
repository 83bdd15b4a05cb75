"""
Converting GIAC values to native Python values.

``to_python`` converts only when the result is exact and unambiguous and
hands back the ``Expr`` otherwise. The ``to_*`` functions demand a
particular Python type and raise ``GiacError`` (category ``type``) when
the value cannot provide it.
"""

from fractions import Fraction

from .errors import GiacError
from .expr import Expr
from .gentypes import GenType

_FLOAT_TYPES = (GenType.DOUBLE, GenType.REAL, GenType.FLOAT)
_INTEGER_TYPES = (GenType.INT, GenType.ZINT)


def _require(expr):
    if expr is None or expr.released:
        raise GiacError("Cannot convert null expression", "memory")


def is_boolean_text(text):
    return text in ("true", "false")


def _parse_float(text):
    try:
        return float(text)
    except ValueError:
        return None


def _kind(value):
    """Shape of a converted value, used to decide if a vector is homogeneous."""
    if isinstance(value, Expr):
        return None
    if isinstance(value, list):
        inner = {_kind(v) for v in value}
        if len(inner) > 1 or None in inner:
            return None
        return ("list", inner.pop() if inner else "empty")
    return type(value)


def to_python(expr):
    """Native Python value for ``expr`` when one exists, else ``expr`` itself.

    Vectors convert element by element; the result is a native list only
    when every element converted to the same kind of value, otherwise it is
    the list of element handles.
    """
    _require(expr)
    tag = expr.gen_type
    text = expr.text

    if tag == GenType.INT:
        if is_boolean_text(text):
            return text == "true"
        return int(text)
    if tag == GenType.ZINT:
        return int(text)
    if tag in _FLOAT_TYPES:
        value = _parse_float(text)
        return expr if value is None else value
    if tag == GenType.FRAC:
        from .introspection import denom, numer
        with numer(expr) as n, denom(expr) as d:
            num, den = to_python(n), to_python(d)
        if isinstance(num, int) and isinstance(den, int):
            return Fraction(num, den)
        return expr
    if tag == GenType.CPLX:
        from .introspection import imag_part, real_part
        with real_part(expr) as re_h, imag_part(expr) as im_h:
            re_val, im_val = to_python(re_h), to_python(im_h)
        if _is_plain_real(re_val) and _is_plain_real(im_val):
            return complex(re_val, im_val)
        return expr
    if tag == GenType.VECT:
        elements = list(expr)
        converted = [to_python(e) for e in elements]
        if not converted:
            return []
        kinds = {_kind(v) for v in converted}
        if len(kinds) == 1 and None not in kinds:
            for e in elements:
                e.release()
            return converted
        return elements
    return expr


def _is_plain_real(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _unquote(text):
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1]
        text = text.replace('\\"', '"').replace("\\n", "\n").replace("\\\\", "\\")
    return text


def to_int(expr):
    _require(expr)
    tag = expr.gen_type
    if tag in _INTEGER_TYPES and not is_boolean_text(expr.text):
        return int(expr.text)
    raise GiacError(f"Cannot convert GIAC {tag.name} to int", "type")


def to_float(expr):
    _require(expr)
    tag = expr.gen_type
    if tag in _INTEGER_TYPES and not is_boolean_text(expr.text):
        return float(int(expr.text))
    if tag in _FLOAT_TYPES:
        value = _parse_float(expr.text)
        if value is not None:
            return value
    if tag == GenType.FRAC:
        return float(to_fraction(expr))
    raise GiacError(f"Cannot convert GIAC {tag.name} to float", "type")


def to_fraction(expr):
    _require(expr)
    tag = expr.gen_type
    if tag in _INTEGER_TYPES and not is_boolean_text(expr.text):
        return Fraction(int(expr.text))
    if tag == GenType.FRAC:
        value = to_python(expr)
        if isinstance(value, Fraction):
            return value
    raise GiacError(f"Cannot convert GIAC {tag.name} to Fraction", "type")


def to_complex(expr):
    _require(expr)
    tag = expr.gen_type
    if tag == GenType.CPLX:
        value = to_python(expr)
        if isinstance(value, complex):
            return value
        raise GiacError("Complex value has symbolic parts", "type")
    try:
        return complex(to_float(expr))
    except GiacError:
        raise GiacError(f"Cannot convert GIAC {tag.name} to complex", "type") from None


def to_bool(expr):
    """Python bool from a GIAC boolean or from the integers 0 and 1."""
    _require(expr)
    text = expr.text
    if is_boolean_text(text):
        return text == "true"
    if expr.gen_type in _INTEGER_TYPES and text in ("0", "1"):
        return text == "1"
    raise GiacError(f"Cannot convert {text} to bool", "type")


def to_str(expr):
    """Contents of a GIAC string, without the quotes."""
    _require(expr)
    if expr.gen_type != GenType.STRNG:
        raise GiacError(f"Cannot convert GIAC {expr.gen_type.name} to str", "type")
    return _unquote(expr.text)


def to_list(expr):
    _require(expr)
    if expr.gen_type != GenType.VECT:
        raise GiacError(f"Cannot convert GIAC {expr.gen_type.name} to list", "type")
    return to_python(expr)

"""
GIAC <-> SymPy conversion.

GIAC values are read from their printed form with SymPy's ``parse_expr``.
GIAC-only syntax is rewritten first (``&&``, single ``=`` equations,
signed infinities, ``set[...]`` vectors) and every identifier is bound in
``local_dict`` so names like ``gamma`` or ``E`` stay plain symbols unless
GIAC means the function or constant. Parsing runs with ``evaluate=False``
so factored results such as ``(x-1)*(x+1)`` or ``2^3*5`` keep their shape.

In the other direction SymPy objects are printed in GIAC syntax and
evaluated by GIAC.
"""

import keyword
import re

import sympy
from sympy import (
    Symbol, pi, E, I, oo, zoo, nan,
    sin, cos, tan, cot, sec, csc, asin, acos, atan, acot, asec, acsc,
    sinh, cosh, tanh, coth, asinh, acosh, atanh,
    exp, log, sqrt, Abs, sign, floor, ceiling,
)
from sympy.parsing.sympy_parser import convert_xor, parse_expr, standard_transformations

from .errors import GiacError
from .session import default_session

# Cache symbols so repeated conversions share the same objects.
_symbol_cache = {}


def get_symbol(name, **assumptions):
    """Get or create a symbol with the given assumptions."""
    key = (name, tuple(sorted(assumptions.items())))
    if key not in _symbol_cache:
        _symbol_cache[key] = Symbol(name, **assumptions)
    return _symbol_cache[key]


GIAC_CONSTANTS = {
    "pi": pi,
    "e": E,
    "i": I,
    "inf": oo,
    "infinity": zoo,
    "undef": nan,
    "euler_gamma": sympy.EulerGamma,
    "catalan": sympy.Catalan,
    "true": sympy.true,
    "false": sympy.false,
}

GIAC_FUNCTIONS = {
    "sin": sin, "cos": cos, "tan": tan, "cot": cot, "sec": sec, "csc": csc,
    "asin": asin, "acos": acos, "atan": atan, "acot": acot, "asec": asec, "acsc": acsc,
    "sinh": sinh, "cosh": cosh, "tanh": tanh, "coth": coth,
    "asinh": asinh, "acosh": acosh, "atanh": atanh,
    "exp": exp, "ln": log, "log": log, "sqrt": sqrt,
    "log10": lambda x: log(x, 10),
    "abs": Abs, "sign": sign, "floor": floor, "ceil": ceiling,
    "re": sympy.re, "im": sympy.im, "conj": sympy.conjugate, "arg": sympy.arg,
    "max": sympy.Max, "min": sympy.Min,
    "erf": sympy.erf, "erfc": sympy.erfc,
    "Gamma": sympy.gamma, "gamma": sympy.gamma, "beta": sympy.beta,
    "zeta": sympy.zeta, "digamma": sympy.digamma,
    "Ai": sympy.airyai, "Bi": sympy.airybi,
    "BesselJ": sympy.besselj, "BesselY": sympy.bessely,
    "BesselI": sympy.besseli, "BesselK": sympy.besselk,
    "Heaviside": sympy.Heaviside, "Dirac": sympy.DiracDelta,
    "factorial": sympy.factorial, "binomial": sympy.binomial,
    "fibonacci": sympy.fibonacci,
}


class _VectorHead:
    """Stands in for GIAC's ``set[...]``/``seq[...]`` prefixes during parsing."""

    def __init__(self, build):
        self.build = build

    def __getitem__(self, items):
        if not isinstance(items, tuple):
            items = (items,)
        return self.build(list(items))


VECTOR_HEADS = {
    "set": _VectorHead(lambda items: sympy.FiniteSet(*items)),
    "seq": _VectorHead(list),
    "poly1": _VectorHead(list),
    "list": _VectorHead(list),
}

TRANSFORMATIONS = standard_transformations + (convert_xor,)

_STRING_RE = re.compile(r'("(?:[^"\\]|\\.)*")')
_IDENT_RE = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\s*([(\[]?)")
_SIGNED_INFINITY_RE = re.compile(r"(^|[(\[,=<>&|~*/^])\s*([+-])\s*infinity\b")
_EMPTY_VECTOR_RE = re.compile(r"\b(set|seq|poly1|list)\[\s*\]")
_PREFIX_NOT_RE = re.compile(r"(^|[(\[,&|=<>+\-*/~])\s*!(?!=)")
# integer quotients not bound to a power become exact rationals
_INT_QUOTIENT_RE = re.compile(r"(?<![\w.)\]^])(?<!\^-)(\d+)/(\d+)(?![\w.(^])")


def _rewrite(code):
    """GIAC operator spellings -> Python ones, outside string literals."""
    code = code.replace("&&", " & ").replace("||", " | ")
    code = re.sub(r"\bnot\b", "~", code)
    code = re.sub(r"\band\b", "&", code)
    code = re.sub(r"\bor\b", "|", code)
    code = _PREFIX_NOT_RE.sub(r"\1~", code)
    code = _SIGNED_INFINITY_RE.sub(r"\1\2inf", code)
    code = _EMPTY_VECTOR_RE.sub(r"\1[()]", code)
    return re.sub(r"(?<![=<>!:])=(?!=)", "==", code)


def _local_dict(code):
    local_dict = {}
    for name, opener in _IDENT_RE.findall(code):
        if name in local_dict or keyword.iskeyword(name):
            continue
        if name in GIAC_CONSTANTS:
            local_dict[name] = GIAC_CONSTANTS[name]
        elif opener == "(":
            local_dict[name] = GIAC_FUNCTIONS.get(name) or sympy.Function(name)
        elif opener == "[":
            local_dict[name] = VECTOR_HEADS.get(name) or sympy.IndexedBase(name)
        else:
            local_dict[name] = get_symbol(name)
    return local_dict


def parse_giac(text):
    """Parse GIAC printed output into SymPy objects, unevaluated.

    Vectors come back as Python lists, ``set[...]`` as ``FiniteSet`` and
    strings as ``str``.
    """
    text = text.strip()
    if not text:
        raise GiacError("Cannot read empty GIAC output", "parse")

    pieces = _STRING_RE.split(text)
    pieces[0::2] = [_rewrite(piece) for piece in pieces[0::2]]
    local_dict = _local_dict(" ".join(pieces[0::2]))
    pieces[0::2] = [_INT_QUOTIENT_RE.sub(r"Rational(\1,\2)", piece) for piece in pieces[0::2]]
    code = "".join(pieces)

    try:
        result = parse_expr(code, local_dict=local_dict,
                            transformations=TRANSFORMATIONS, evaluate=False)
    except Exception as exc:
        raise GiacError(f"Cannot read GIAC output {text!r}: {exc}", "parse") from exc
    return _native(result)


def _native(value):
    if isinstance(value, (list, tuple)):
        return [_native(v) for v in value]
    return value


def _as_matrix(value):
    if isinstance(value, list):
        elements = [_as_matrix(v) for v in value]
        if elements and all(isinstance(e, list) for e in elements):
            widths = {len(e) for e in elements}
            if len(widths) == 1 and 0 not in widths:
                return sympy.Matrix(elements)
        return elements
    return value


def to_sympy(expr):
    """Convert an Expr (or GIAC source text) to SymPy.

    2-D rectangular vectors become ``sympy.Matrix``, other vectors lists.
    """
    text = expr if isinstance(expr, str) else expr.text
    return _as_matrix(parse_giac(text))


SYMPY_TO_GIAC_FUNCTIONS = {
    "log": "ln",
    "Abs": "abs",
    "ceiling": "ceil",
    "conjugate": "conj",
    "gamma": "Gamma",
    "Max": "max",
    "Min": "min",
    "airyai": "Ai",
    "airybi": "Bi",
    "besselj": "BesselJ",
    "bessely": "BesselY",
    "besseli": "BesselI",
    "besselk": "BesselK",
    "DiracDelta": "Dirac",
    "Heaviside": "Heaviside",
}

_SYMPY_RELATIONS = {
    sympy.Equality: "=",
    sympy.Unequality: "!=",
    sympy.StrictLessThan: "<",
    sympy.LessThan: "<=",
    sympy.StrictGreaterThan: ">",
    sympy.GreaterThan: ">=",
}


def sympy_to_giac(expr):
    """Print a SymPy object in GIAC syntax."""
    if not isinstance(expr, (sympy.Basic, sympy.MatrixBase, list, tuple)):
        expr = sympy.sympify(expr)
    if expr is nan:
        return "undef"
    if expr is zoo:
        return "infinity"
    if expr is pi:
        return "pi"
    if expr is E:
        return "e"
    if expr is I:
        return "i"
    if expr is oo:
        return "inf"
    if expr is -oo:
        return "(-inf)"
    if expr is sympy.EulerGamma:
        return "euler_gamma"
    if expr is sympy.Catalan:
        return "catalan"
    if expr is sympy.GoldenRatio:
        return "((1+sqrt(5))/2)"
    if expr is sympy.true:
        return "true"
    if expr is sympy.false:
        return "false"

    if isinstance(expr, sympy.Integer):
        v = int(expr)
        if v < 0:
            return f"({v})"
        return str(v)
    if isinstance(expr, sympy.Rational):
        return f"({expr.p}/{expr.q})"
    if isinstance(expr, sympy.Float):
        return f"({expr})" if expr < 0 else str(expr)
    if isinstance(expr, sympy.Symbol):
        return expr.name

    if isinstance(expr, sympy.MatrixBase):
        rows = ["[" + ",".join(sympy_to_giac(v) for v in expr.row(i)) + "]"
                for i in range(expr.rows)]
        return "[" + ",".join(rows) + "]"
    if isinstance(expr, (list, tuple, sympy.Tuple)):
        return "[" + ",".join(sympy_to_giac(v) for v in expr) + "]"

    if isinstance(expr, sympy.Add):
        return "(" + "+".join(sympy_to_giac(a) for a in expr.args) + ")"
    if isinstance(expr, sympy.Mul):
        return "(" + "*".join(sympy_to_giac(a) for a in expr.args) + ")"
    if isinstance(expr, sympy.Pow):
        return f"({sympy_to_giac(expr.base)}^{sympy_to_giac(expr.exp)})"

    rel = _SYMPY_RELATIONS.get(type(expr))
    if rel is not None:
        return f"({sympy_to_giac(expr.lhs)}{rel}{sympy_to_giac(expr.rhs)})"
    if isinstance(expr, sympy.And):
        return "(" + " and ".join(sympy_to_giac(a) for a in expr.args) + ")"
    if isinstance(expr, sympy.Or):
        return "(" + " or ".join(sympy_to_giac(a) for a in expr.args) + ")"
    if isinstance(expr, sympy.Not):
        return f"(not {sympy_to_giac(expr.args[0])})"

    if isinstance(expr, sympy.Derivative):
        parts = [sympy_to_giac(expr.expr)]
        for var, count in expr.variable_count:
            parts.append(sympy_to_giac(var))
            if count != 1:
                parts.append(str(count))
        return f"diff({','.join(parts)})"
    if isinstance(expr, sympy.Integral):
        body = sympy_to_giac(expr.function)
        for limits in expr.limits:
            bounds = ",".join(sympy_to_giac(v) for v in limits)
            body = f"integrate({body},{bounds})"
        return body

    # Functions
    if isinstance(expr, sympy.Function):
        fname = type(expr).__name__
        out_name = SYMPY_TO_GIAC_FUNCTIONS.get(fname, fname)
        args = [sympy_to_giac(a) for a in expr.args]
        return f"{out_name}({','.join(args)})"

    raise GiacError(f"Cannot convert {type(expr).__name__} to GIAC string representation", "type")


def from_sympy(expr, session=None):
    """Evaluate a SymPy object in GIAC and return the Expr."""
    session = session or default_session()
    return session.evaluate(sympy_to_giac(expr))

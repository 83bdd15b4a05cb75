"""
GIAC <-> MathJSON conversion.

MathJSON expressions are plain JSON values: numbers, symbol strings
(``"x"``, ``"Pi"``), strings wrapped in single quotes (``"'text'"``),
``{"num": "..."}`` objects for numbers JSON cannot hold exactly, and
lists whose head is the operator (``["Add", "x", 1]``).
"""

import logging
import math

import sympy

from .errors import GiacError
from .gentypes import GenType
from .session import default_session
from .sympy_bridge import SYMPY_TO_GIAC_FUNCTIONS, parse_giac

logger = logging.getLogger(__name__)

# Integers beyond this magnitude lose precision as JSON numbers.
MAX_SAFE_INTEGER = 2 ** 53 - 1

GIAC_TO_MATHJSON = {
    # arithmetic functions
    "abs": "Abs",
    "sign": "Sign",
    "floor": "Floor",
    "ceil": "Ceil",
    "round": "Round",
    "trunc": "Truncate",
    "max": "Max",
    "min": "Min",
    "sqrt": "Sqrt",
    "exp": "Exp",
    "factorial": "Factorial",
    "hypot": "Hypot",

    # logarithms
    "ln": "Ln",
    "log10": "Log10",
    "log": "Ln",

    # trigonometric
    "sin": "Sin",
    "cos": "Cos",
    "tan": "Tan",
    "cot": "Cot",
    "sec": "Sec",
    "csc": "Csc",
    "asin": "Arcsin",
    "acos": "Arccos",
    "atan": "Arctan",
    "acot": "Arccot",

    # hyperbolic
    "sinh": "Sinh",
    "cosh": "Cosh",
    "tanh": "Tanh",
    "coth": "Coth",
    "asinh": "Arsinh",
    "acosh": "Arcosh",
    "atanh": "Artanh",

    # complex numbers
    "re": "Real",
    "im": "Imaginary",
    "conj": "Conjugate",
    "arg": "Argument",

    # number theory
    "gcd": "GCD",
    "lcm": "LCM",
    "isprime": "IsPrime",
    "binomial": "Binomial",
    "fibonacci": "Fibonacci",

    # special functions
    "Gamma": "Gamma",
    "beta": "Beta",
    "erf": "Erf",
    "erfc": "Erfc",
    "zeta": "Zeta",
    "Ai": "AiryAi",
    "Bi": "AiryBi",
    "BesselJ": "BesselJ",
    "BesselY": "BesselY",
    "BesselI": "BesselI",
    "BesselK": "BesselK",
    "digamma": "Digamma",
    "Heaviside": "Heaviside",

    # linear algebra
    "det": "Determinant",
    "inv": "Inverse",
    "trace": "Trace",
    "transpose": "Transpose",
    "tran": "Transpose",
    "rank": "Rank",
    "diag": "Diagonal",
    "eigenvalues": "Eigenvalues",
    "eigenvectors": "Eigenvectors",
    "norm": "Norm",
    "kernel": "Kernel",

    # algebra
    "factor": "Factor",
    "expand": "Expand",
    "simplify": "Simplify",
    "normal": "Together",

    # calculus
    "diff": "D",
    "integrate": "Integrate",
    "limit": "Limit",
    "sum": "Sum",
    "product": "Product",

    # statistics
    "mean": "Mean",
    "median": "Median",
    "variance": "Variance",
    "stddev": "StandardDeviation",
    "quartiles": "Quartiles",

    # collections
    "sort": "Sort",
    "reverse": "Reverse",
}

MATHJSON_TO_GIAC = {
    "Mod": "mod",
    "Abs": "abs",
    "Sign": "sign",
    "Floor": "floor",
    "Ceil": "ceil",
    "Round": "round",
    "Truncate": "trunc",
    "Max": "max",
    "Min": "min",
    "Sqrt": "sqrt",
    "Exp": "exp",
    "Factorial": "factorial",
    "Hypot": "hypot",

    "Ln": "ln",
    "Log": "ln",
    "Log10": "log10",

    "Sin": "sin",
    "Cos": "cos",
    "Tan": "tan",
    "Cot": "cot",
    "Sec": "sec",
    "Csc": "csc",
    "Arcsin": "asin",
    "Arccos": "acos",
    "Arctan": "atan",
    "Arctan2": "atan2",
    "Arccot": "acot",

    "Sinh": "sinh",
    "Cosh": "cosh",
    "Tanh": "tanh",
    "Coth": "coth",
    "Arsinh": "asinh",
    "Arcosh": "acosh",
    "Artanh": "atanh",

    "Real": "re",
    "Imaginary": "im",
    "Conjugate": "conj",
    "Argument": "arg",

    "GCD": "gcd",
    "LCM": "lcm",
    "IsPrime": "isprime",
    "Binomial": "binomial",
    "Choose": "binomial",
    "Fibonacci": "fibonacci",
    "Numerator": "numer",
    "Denominator": "denom",

    "Gamma": "Gamma",
    "Beta": "beta",
    "Erf": "erf",
    "Erfc": "erfc",
    "Zeta": "zeta",
    "AiryAi": "Ai",
    "AiryBi": "Bi",
    "BesselJ": "BesselJ",
    "BesselY": "BesselY",
    "BesselI": "BesselI",
    "BesselK": "BesselK",
    "Digamma": "digamma",
    "Heaviside": "Heaviside",

    "Determinant": "det",
    "Inverse": "inv",
    "Trace": "trace",
    "Transpose": "transpose",
    "Rank": "rank",
    "Diagonal": "diag",
    "Eigenvalues": "eigenvalues",
    "Eigenvectors": "eigenvectors",
    "Norm": "norm",
    "Kernel": "kernel",

    "Factor": "factor",
    "Expand": "expand",
    "ExpandAll": "expand",
    "Simplify": "simplify",
    "Together": "normal",
    "Cancel": "normal",

    "D": "diff",
    "Derivative": "diff",
    "Integrate": "integrate",
    "Limit": "limit",
    "Sum": "sum",
    "Product": "product",

    "Mean": "mean",
    "Median": "median",
    "Variance": "variance",
    "StandardDeviation": "stddev",
    "Quartiles": "quartiles",

    "Sort": "sort",
    "Reverse": "reverse",

    "N": "evalf",
}

INFIX_OPERATORS = {
    "Add": "+",
    "Multiply": "*",
    "Subtract": "-",
    "Divide": "/",
    "Power": "^",
    "Equal": "=",
    "NotEqual": "!=",
    "Less": "<",
    "LessEqual": "<=",
    "Greater": ">",
    "GreaterEqual": ">=",
    "And": " and ",
    "Or": " or ",
}

SYMPY_CONST_TO_MATHJSON = {
    sympy.pi: "Pi",
    sympy.E: "ExponentialE",
    sympy.I: "ImaginaryUnit",
    sympy.true: "True",
    sympy.false: "False",
    sympy.oo: "PositiveInfinity",
    -sympy.oo: "NegativeInfinity",
    sympy.zoo: "ComplexInfinity",
    sympy.nan: "NaN",
    sympy.EulerGamma: "EulerGamma",
    sympy.Catalan: "CatalanConstant",
}

SYMPY_RELATIONS = {
    sympy.Equality: "Equal",
    sympy.Unequality: "NotEqual",
    sympy.StrictLessThan: "Less",
    sympy.LessThan: "LessEqual",
    sympy.StrictGreaterThan: "Greater",
    sympy.GreaterThan: "GreaterEqual",
}

SYMPY_LOGIC = {sympy.And: "And", sympy.Or: "Or", sympy.Not: "Not"}

MATHJSON_CONST_TO_GIAC = {
    "Pi": "pi",
    "ExponentialE": "e",
    "ImaginaryUnit": "i",
    "True": "true",
    "False": "false",
    "PositiveInfinity": "inf",
    "NegativeInfinity": "(-inf)",
    "ComplexInfinity": "infinity",
    "NaN": "undef",
}


def _number(value):
    if isinstance(value, int) and abs(value) > MAX_SAFE_INTEGER:
        return {"num": str(value)}
    return value


def _negated(term):
    """``y`` when ``term`` is ``-y`` written as ``Mul(-1, y)``, else None."""
    if isinstance(term, sympy.Mul) and len(term.args) > 1 and term.args[0] is sympy.S.NegativeOne:
        rest = term.args[1:]
        return rest[0] if len(rest) == 1 else sympy.Mul(*rest, evaluate=False)
    return None


def _is_half(exponent):
    if isinstance(exponent, sympy.Float):
        return float(exponent) == 0.5
    return exponent is sympy.S.Half


def _product(factors):
    if not factors:
        return 1
    if len(factors) == 1:
        return sympy_to_mathjson(factors[0])
    return ["Multiply"] + [sympy_to_mathjson(f) for f in factors]


def _function_head(expr):
    name = type(expr).__name__
    name = SYMPY_TO_GIAC_FUNCTIONS.get(name, name)
    op = GIAC_TO_MATHJSON.get(name)
    if op is None:
        op = name[:1].upper() + name[1:]
    return op


def sympy_to_mathjson(expr):
    """Convert a parsed GIAC value (see ``sympy_bridge.parse_giac``) to MathJSON."""
    if isinstance(expr, str):
        return f"'{expr}'"
    if isinstance(expr, (list, tuple)):
        return ["List"] + [sympy_to_mathjson(e) for e in expr]
    if isinstance(expr, sympy.MatrixBase):
        return ["List"] + [sympy_to_mathjson(list(expr.row(i))) for i in range(expr.rows)]
    if not isinstance(expr, sympy.Basic):
        raise GiacError(f"Cannot convert {type(expr).__name__} to MathJSON", "type")

    const = SYMPY_CONST_TO_MATHJSON.get(expr)
    if const is not None:
        return const
    if isinstance(expr, sympy.Integer):
        return _number(int(expr))
    if isinstance(expr, sympy.Rational):
        return ["Rational", _number(expr.p), _number(expr.q)]
    if isinstance(expr, sympy.Float):
        return float(expr)
    if isinstance(expr, sympy.Symbol):
        return expr.name
    if isinstance(expr, sympy.FiniteSet):
        return ["Set"] + [sympy_to_mathjson(e) for e in expr.args]
    if isinstance(expr, sympy.Indexed):
        return ["At", expr.base.label.name] + [sympy_to_mathjson(i) for i in expr.indices]

    if isinstance(expr, sympy.Add):
        terms = expr.args
        if len(terms) == 2 and _negated(terms[1]) is not None:
            return ["Subtract", sympy_to_mathjson(terms[0]), sympy_to_mathjson(_negated(terms[1]))]
        return ["Add"] + [sympy_to_mathjson(t) for t in terms]
    if isinstance(expr, sympy.Mul):
        operand = _negated(expr)
        if operand is not None:
            return ["Negate", sympy_to_mathjson(operand)]
        numerator, denominator = [], []
        for factor in expr.args:
            if isinstance(factor, sympy.Pow) and factor.exp is sympy.S.NegativeOne:
                denominator.append(factor.base)
            else:
                numerator.append(factor)
        if denominator:
            return ["Divide", _product(numerator), _product(denominator)]
        return _product(numerator)
    if isinstance(expr, sympy.Pow):
        # GIAC prints sqrt(x) as x^(1/2) in some modes
        if _is_half(expr.exp):
            return ["Sqrt", sympy_to_mathjson(expr.base)]
        return ["Power", sympy_to_mathjson(expr.base), sympy_to_mathjson(expr.exp)]

    relation = SYMPY_RELATIONS.get(type(expr))
    if relation is not None:
        return [relation, sympy_to_mathjson(expr.lhs), sympy_to_mathjson(expr.rhs)]
    logic = SYMPY_LOGIC.get(type(expr))
    if logic is not None:
        return [logic] + [sympy_to_mathjson(a) for a in expr.args]
    if isinstance(expr, sympy.Function):
        return [_function_head(expr)] + [sympy_to_mathjson(a) for a in expr.args]

    raise GiacError(f"Cannot convert {type(expr).__name__} to MathJSON", "type")


def to_mathjson(value):
    """MathJSON for an Expr or GiacMatrix."""
    from .introspection import denom, imag_part, numer, real_part
    from .matrix import GiacMatrix

    if isinstance(value, GiacMatrix):
        rows = to_mathjson(value.expr)
        return ["Matrix", rows]

    tag = value.gen_type
    if tag == GenType.FRAC:
        with numer(value) as n, denom(value) as d:
            return ["Rational", to_mathjson(n), to_mathjson(d)]
    if tag == GenType.CPLX:
        with real_part(value) as re_h, imag_part(value) as im_h:
            return ["Complex", to_mathjson(re_h), to_mathjson(im_h)]
    return sympy_to_mathjson(parse_giac(value.text))


def _atom_to_giac(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"({value})" if value < 0 else str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "undef"
        if math.isinf(value):
            return "inf" if value > 0 else "(-inf)"
        return f"({value!r})" if value < 0 else repr(value)
    if isinstance(value, str):
        if len(value) >= 2 and value[0] == value[-1] == "'":
            raise GiacError(f"Cannot convert MathJSON string {value} to GIAC", "type")
        return MATHJSON_CONST_TO_GIAC.get(value, value)
    raise GiacError(f"Cannot convert {type(value).__name__} to GIAC string representation", "type")


def mathjson_to_giac(tree):
    """GIAC source text for a MathJSON expression."""
    if isinstance(tree, dict):
        if "num" in tree:
            num = str(tree["num"])
            return MATHJSON_CONST_TO_GIAC.get(num.lstrip("+"), num)
        if "sym" in tree:
            return _atom_to_giac(tree["sym"])
        if "fn" in tree:
            return mathjson_to_giac(tree["fn"])
        if "str" in tree:
            raise GiacError(f"Cannot convert MathJSON string {tree['str']!r} to GIAC", "type")
        raise GiacError(f"Unrecognised MathJSON object: {tree!r}", "type")
    if not isinstance(tree, list):
        return _atom_to_giac(tree)
    if not tree or not isinstance(tree[0], str):
        raise GiacError(f"MathJSON function needs an operator name: {tree!r}", "type")

    op, args = tree[0], [mathjson_to_giac(a) for a in tree[1:]]

    if op == "Rational" and len(args) == 2:
        return f"(({args[0]})/({args[1]}))"
    if op == "Complex" and len(args) == 2:
        return f"(({args[0]})+({args[1]})*i)"
    if op in ("List", "Matrix"):
        if op == "Matrix" and len(args) == 1:
            return args[0]
        return "[" + ",".join(args) + "]"
    if op == "Set":
        return "set[" + ",".join(args) + "]"
    if op == "Negate" and len(args) == 1:
        return f"(-({args[0]}))"
    if op == "Subtract" and len(args) == 1:
        return f"(-({args[0]}))"
    if op == "Not" and len(args) == 1:
        return f"(not({args[0]}))"
    if op == "Log" and len(args) == 2:
        return f"(ln({args[0]})/ln({args[1]}))"
    if op in INFIX_OPERATORS and len(args) >= 2:
        return "(" + INFIX_OPERATORS[op].join(f"({a})" for a in args) + ")"

    giac_op = MATHJSON_TO_GIAC.get(op)
    if giac_op is None:
        logger.warning("Unsupported MathJSON operator '%s', using fallback string representation", op)
        giac_op = op.lower()
    return f"{giac_op}({','.join(args)})"


def from_mathjson(tree, session=None):
    """Evaluate a MathJSON expression in GIAC and return the Expr."""
    session = session or default_session()
    return session.evaluate(mathjson_to_giac(tree))

"""Shortcuts for the most used calculus and algebra commands."""

from .commands import invoke_cmd


def giac_diff(expr, var, n=1, session=None):
    """``n``-th derivative of ``expr`` with respect to ``var``."""
    if n < 0:
        raise ValueError(f"Derivative order must be non-negative, got {n}")
    if n == 1:
        return invoke_cmd("diff", expr, var, session=session)
    return invoke_cmd("diff", expr, var, n, session=session)


def giac_integrate(expr, var, lower=None, upper=None, session=None):
    """Antiderivative, or the definite integral when both bounds are given."""
    if (lower is None) != (upper is None):
        raise ValueError("A definite integral needs both bounds")
    if lower is None:
        return invoke_cmd("integrate", expr, var, session=session)
    return invoke_cmd("integrate", expr, var, lower, upper, session=session)


def giac_limit(expr, var, point, direction=0, session=None):
    """Limit at ``point``; ``direction`` 1 or -1 takes a one-sided limit."""
    if direction not in (-1, 0, 1):
        raise ValueError(f"direction must be -1, 0 or 1, got {direction}")
    if direction == 0:
        return invoke_cmd("limit", expr, var, point, session=session)
    return invoke_cmd("limit", expr, var, point, direction, session=session)


def giac_series(expr, var, point=0, order=5, session=None):
    return invoke_cmd("series", expr, var, point, order, session=session)


def giac_factor(expr, session=None):
    return invoke_cmd("factor", expr, session=session)


def giac_expand(expr, session=None):
    return invoke_cmd("expand", expr, session=session)


def giac_simplify(expr, session=None):
    return invoke_cmd("simplify", expr, session=session)


def giac_solve(expr, var, session=None):
    return invoke_cmd("solve", expr, var, session=session)


def giac_gcd(a, b, session=None):
    return invoke_cmd("gcd", a, b, session=session)

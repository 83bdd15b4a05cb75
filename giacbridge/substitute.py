"""Substituting values for variables."""

from .formatting import to_giac_string


def substitute(expr, mapping, values=None):
    """Replace variables of ``expr``.

    Either ``substitute(e, {x: 1, "y": z})`` (a dict or a sequence of
    ``(variable, value)`` pairs) or ``substitute(e, [x, y], [1, 2])``.
    Variables and values may be names, numbers or expressions. Nothing to
    substitute returns ``expr`` unchanged.
    """
    if values is not None:
        variables, values = list(mapping), list(values)
        if len(variables) != len(values):
            raise ValueError(
                f"Got {len(variables)} variables but {len(values)} values to substitute"
            )
        pairs = list(zip(variables, values))
    elif hasattr(mapping, "items"):
        pairs = list(mapping.items())
    else:
        pairs = [tuple(pair) for pair in mapping]
        for pair in pairs:
            if len(pair) != 2:
                raise ValueError(f"Substitution entries must be (variable, value) pairs, got {pair!r}")
    if not pairs:
        return expr

    target = to_giac_string(expr)
    variables = [to_giac_string(var) for var, _ in pairs]
    replacements = [to_giac_string(val) for _, val in pairs]
    if len(pairs) == 1:
        text = f"subst({target},{variables[0]},{replacements[0]})"
    else:
        text = f"subst({target},[{','.join(variables)}],[{','.join(replacements)}])"
    return expr.session.evaluate(text)

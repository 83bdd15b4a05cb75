"""
Creating symbolic variables.

``symbols("x y")`` returns GIAC identifiers ready for arithmetic, and
``indexed_symbols("a", 2, 3)`` the family a11..a23 in row-major order.
Function applications such as ``u(t)`` are accepted too, for ODEs.
"""

import itertools
import re

from .session import default_session

_NAME_RE = re.compile(r"[^\W\d]\w*(?:\([^()]*\))?")


def _split_names(names):
    if isinstance(names, str):
        # commas inside u(t,s) belong to the call
        parts = re.findall(r"[^\s,()]+(?:\([^()]*\))?", names)
    else:
        parts = list(names)
    for part in parts:
        if not _NAME_RE.fullmatch(part):
            raise ValueError(f"Not a valid variable name: {part!r}")
    return parts


def symbols(names, session=None):
    """Handles for the space or comma separated ``names``.

    One name gives one Expr, several give a tuple.
    """
    parts = _split_names(names)
    if not parts:
        raise ValueError("symbols() needs at least one name")
    session = session or default_session()
    created = tuple(session.evaluate(part) for part in parts)
    return created[0] if len(created) == 1 else created


def indexed_name(base, indices, wide):
    """``m12`` style name, or ``m_1_12`` when ``wide``."""
    if wide:
        return base + "_" + "_".join(str(i) for i in indices)
    return base + "".join(str(i) for i in indices)


def indexed_names(base, *dims):
    """Names for a tensor of symbols, last index varying fastest.

    When any dimension exceeds 9 the indices are separated by underscores.
    A zero dimension gives no names.
    """
    if not dims:
        raise ValueError("At least one dimension required")
    for d in dims:
        if not isinstance(d, int) or isinstance(d, bool):
            raise ValueError(f"Dimensions must be integers, got {d!r}")
        if d < 0:
            raise ValueError(f"Dimensions must be non-negative, got {d}")
    if 0 in dims:
        return []
    wide = any(d > 9 for d in dims)
    ranges = [range(1, d + 1) for d in dims]
    return [indexed_name(base, idx, wide) for idx in itertools.product(*ranges)]


def indexed_symbols(base, *dims, session=None):
    """Tuple of handles for ``indexed_names(base, *dims)``."""
    if not _NAME_RE.fullmatch(base) or "(" in base:
        raise ValueError(f"Not a valid base name: {base!r}")
    session = session or default_session()
    return tuple(session.evaluate(name) for name in indexed_names(base, *dims))

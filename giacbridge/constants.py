"""
Symbolic constants as GIAC handles.

``pi``, ``e`` and ``i`` evaluate in the default session, so arithmetic on
them stays exact::

    from giacbridge.constants import pi, i
    2 * pi          # Expr('(2)*(pi)')

Each import gives a fresh handle; pass a session to ``constant`` to bind one
elsewhere.
"""

from .session import default_session

CONSTANT_NAMES = ("pi", "e", "i")

__all__ = ["constant", "CONSTANT_NAMES", *CONSTANT_NAMES]


def constant(name, session=None):
    """Handle to the GIAC constant ``name`` (one of ``pi``, ``e``, ``i``)."""
    if name not in CONSTANT_NAMES:
        raise ValueError(f"Unknown constant {name!r}, expected one of {', '.join(CONSTANT_NAMES)}")
    return (session or default_session()).evaluate(name)


def __getattr__(name):
    if name in CONSTANT_NAMES:
        return constant(name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

"""GIAC value type tags.

GIAC tags every value with a small integer discriminant. The bridge learns
the tag of a stored value by asking GIAC for ``type(...)``, whose printed
answer depends on the interpreter mode (``integer`` in Xcas mode,
``DOM_INT`` in Maple/MuPAD modes, a bare code in some builds).
"""

from enum import IntEnum


class GenType(IntEnum):
    INT = 0
    DOUBLE = 1
    ZINT = 2
    REAL = 3
    CPLX = 4
    POLY = 5
    IDNT = 6
    VECT = 7
    SYMB = 8
    SPOL1 = 9
    FRAC = 10
    EXT = 11
    STRNG = 12
    FUNC = 13
    ROOT = 14
    MOD = 15
    USER = 16
    MAP = 17
    EQW = 18
    GROB = 19
    POINTER = 20
    FLOAT = 21


# Vector subtypes, recovered from the printed prefix.
SUBTYPE_STANDARD = 0
SUBTYPE_SEQUENCE = 1
SUBTYPE_SET = 2
SUBTYPE_LIST = 3

NUMERIC_TYPES = frozenset({
    GenType.INT, GenType.DOUBLE, GenType.ZINT, GenType.REAL,
    GenType.CPLX, GenType.FRAC, GenType.FLOAT,
})

_TYPE_NAMES = {
    "integer": GenType.INT,
    "DOM_INT": GenType.INT,
    "DOM_integer": GenType.INT,
    "double": GenType.DOUBLE,
    "real": GenType.DOUBLE,
    "float": GenType.DOUBLE,
    "DOM_FLOAT": GenType.DOUBLE,
    "DOM_float": GenType.DOUBLE,
    "longfloat": GenType.REAL,
    "DOM_LONGFLOAT": GenType.REAL,
    "complex": GenType.CPLX,
    "DOM_COMPLEX": GenType.CPLX,
    "polynom": GenType.POLY,
    "DOM_POLY": GenType.POLY,
    "identifier": GenType.IDNT,
    "DOM_IDENT": GenType.IDNT,
    "vector": GenType.VECT,
    "list": GenType.VECT,
    "DOM_LIST": GenType.VECT,
    "expression": GenType.SYMB,
    "DOM_SYMBOLIC": GenType.SYMB,
    "rational": GenType.FRAC,
    "DOM_RAT": GenType.FRAC,
    "DOM_FRAC": GenType.FRAC,
    "string": GenType.STRNG,
    "DOM_STRING": GenType.STRNG,
    "func": GenType.FUNC,
    "DOM_FUNC": GenType.FUNC,
    "modular": GenType.MOD,
    "DOM_MOD": GenType.MOD,
    "map": GenType.MAP,
    "DOM_MAP": GenType.MAP,
    "graphic": GenType.GROB,
}

# Largest magnitude GIAC keeps as an immediate INT before switching to ZINT.
INT_LIMIT = 2 ** 31


def parse_type_name(text):
    """Map GIAC's printed answer to ``type(...)`` onto a GenType.

    Unrecognised names are treated as symbolic expressions.
    """
    name = text.strip().strip('"').strip()
    if name in _TYPE_NAMES:
        return _TYPE_NAMES[name]
    if name.isdigit() and int(name) in GenType._value2member_map_:
        return GenType(int(name))
    return GenType.SYMB


def vector_subtype(printed):
    """Subtype of a vector from its printed form."""
    if printed.startswith("seq["):
        return SUBTYPE_SEQUENCE
    if printed.startswith("set[") or printed.startswith("%{"):
        return SUBTYPE_SET
    return SUBTYPE_STANDARD

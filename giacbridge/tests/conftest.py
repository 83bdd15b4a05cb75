from __future__ import annotations

import re

import pytest

from giacbridge.config import BridgeConfig
from giacbridge.errors import GiacError
from giacbridge.registry import CommandRegistry
from giacbridge.session import Session, set_default_session

HELP_DB = """\
# factor
0 Expr
1 Factorise un polynome.
2 Factors a polynomial.
-1 ifactor
-2 cfactor
factor(x^4-1)
factor(x^4-4,sqrt(2))
# ifactor
0 Intg(a)
2 Factorization of an integer into prime factors.
-1 factor
ifactor(50)
# diff derive
0 Expr(y),[Var]
2 Returns the derivative of an expression.
-1 integrate
diff(x^3,x)
# integrate int
0 Expr,[Var(x)],[Real(a)],[Real(b)]
1 Primitive ou integrale definie.
-1 diff
integrate(x^2,x)
# expand
2 Full distribution of * and / over + and -.
expand((x+1)^2)
# simplify
2 Returns a simplified expression.
simplify(sin(x)^2+cos(x)^2)
# sin
2 Sine.
sin(0)
# sinh
2 Hyperbolic sine.
# cos
2 Cosine.
# sum
2 Sum of the elements of a list, or of an expression over a range.
sum(k,k,1,10)
# subst
2 Substitutes a value for a variable in an expression.
subst(x^2,x,3)
# det
2 Determinant of a square matrix.
det([[1,2],[3,4]])
# nextprime
2 Next prime or pseudo-prime after a given integer.
nextprime(10)
# latex
2 Returns the LaTeX evaluation of an expression.
# +
2 Addition operator.
# not
2 Logical not.
"""

_INT_RE = re.compile(r"-?\d+")
_FLOAT_RE = re.compile(r"-?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
_FRAC_RE = re.compile(r"(-?\d+)/(\d+)")
_CPLX_RE = re.compile(r"(-?[\w.]+)([+-][\w.]+)\*i")
_IDENT_RE = re.compile(r"[A-Za-z_]\w*")
_ASSIGN_RE = re.compile(r"(_gb\d+):=\((.*)\)", re.S)
_QUERY_RE = re.compile(r"(type|size|sommet)\((_gb\d+)\)")
_ELEMENT_RE = re.compile(r"(_gb\d+)((?:\[\d+\])+)")
_COMPONENT_RE = re.compile(r"(numer|denom|re|im|feuille)\((_gb\d+)\)")
_EQUAL_RE = re.compile(r"\((.*)\)==\((.*)\)", re.S)


def infer_type(printed):
    """The answer a GIAC interpreter in Xcas mode gives to type(...)."""
    if printed in ("true", "false") or _INT_RE.fullmatch(printed):
        return "integer"
    if _FLOAT_RE.fullmatch(printed):
        return "real"
    if _FRAC_RE.fullmatch(printed):
        return "rational"
    if printed == "i" or _CPLX_RE.fullmatch(printed):
        return "complex"
    if printed.startswith(("[", "seq[", "set[")):
        return "vector"
    if printed.startswith('"'):
        return "string"
    if _IDENT_RE.fullmatch(printed):
        return "identifier"
    return "expression"


def split_elements(printed):
    """Top-level elements of a printed vector."""
    body = printed[printed.index("[") + 1:-1]
    if not body.strip():
        return []
    parts, depth, current, in_string = [], 0, "", False
    for ch in body:
        if ch == '"':
            in_string = not in_string
        if not in_string:
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth -= 1
            elif ch == "," and depth == 0:
                parts.append(current)
                current = ""
                continue
        current += ch
    parts.append(current)
    return [p.strip() for p in parts]


def _wrapped(text):
    if not (text.startswith("(") and text.endswith(")")):
        return False
    depth = 0
    for pos, ch in enumerate(text):
        depth += {"(": 1, ")": -1}.get(ch, 0)
        if depth == 0 and pos < len(text) - 1:
            return False
    return True


def _strip_parens(text):
    text = text.strip()
    while _wrapped(text):
        text = text[1:-1].strip()
    return text


class FakeGiac:
    """Scripted stand-in for the giac process.

    Stores assigned values like GIAC does, answers type/size/component
    queries from the stored printed forms, and otherwise returns the
    canned answer from ``results`` (or echoes the input unevaluated).
    """

    def __init__(self, results=None, errors=None):
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.values = {}
        self.purged = []
        self.log = []
        self.generation = 1
        self.closed = False

    def execute(self, cmd):
        self.log.append(cmd)
        if cmd.startswith("purge("):
            names = cmd[len("purge("):-1].split(",")
            self.purged.extend(names)
            for name in names:
                self.values.pop(name, None)
            return ""
        m = _ASSIGN_RE.fullmatch(cmd)
        if m:
            printed = self.evaluate(m.group(2))
            self.values[m.group(1)] = printed
            return printed
        m = _QUERY_RE.fullmatch(cmd)
        if m:
            printed = self.values[m.group(2)]
            if m.group(1) == "type":
                return infer_type(printed)
            if m.group(1) == "size":
                return str(len(split_elements(printed)))
            return printed.split("(", 1)[0]
        m = _EQUAL_RE.fullmatch(cmd)
        if m:
            lhs, rhs = (self.evaluate(_strip_parens(g)) for g in m.groups())
            return "true" if _strip_parens(lhs) == _strip_parens(rhs) else "false"
        return self.evaluate(cmd)

    def evaluate(self, text):
        if text in self.errors:
            msg, category = self.errors[text]
            raise GiacError(msg, category)
        if text in self.values:
            return self.values[text]
        m = _ELEMENT_RE.fullmatch(text)
        if m:
            printed = self.values[m.group(1)]
            for index in re.findall(r"\d+", m.group(2)):
                printed = split_elements(printed)[int(index)]
            return printed
        m = _COMPONENT_RE.fullmatch(text)
        if m:
            return self._component(m.group(1), self.values[m.group(2)])
        return self.results.get(text, text)

    def _component(self, what, printed):
        if what in ("numer", "denom"):
            m = _FRAC_RE.fullmatch(printed)
            return m.group(1 if what == "numer" else 2)
        if what in ("re", "im"):
            if printed == "i":
                return "0" if what == "re" else "1"
            m = _CPLX_RE.fullmatch(printed)
            if what == "re":
                return m.group(1)
            return m.group(2).lstrip("+")
        return printed[printed.index("(") + 1:-1]

    def close(self):
        self.closed = True


@pytest.fixture
def help_db():
    return HELP_DB


@pytest.fixture
def registry(help_db):
    return CommandRegistry.from_text(help_db)


@pytest.fixture
def fake():
    return FakeGiac()


@pytest.fixture
def session(registry, fake):
    s = Session(config=BridgeConfig(), registry=registry, engine=fake)
    yield s
    s.close()


@pytest.fixture
def default(session):
    """Install the fake session as the default one for the duration of a test."""
    previous = set_default_session(session)
    yield session
    set_default_session(previous)
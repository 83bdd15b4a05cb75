"""Expression handles."""

import numbers
import weakref

from .errors import GiacError
from .gentypes import GenType

NULL_DISPLAY = "<null Expr>"


def _fmt(value):
    from .formatting import to_giac_string
    return to_giac_string(value)


class Expr:
    """A GIAC value stored in an engine-side variable.

    The handle remembers the variable name and GIAC's printed form of the
    value. Call ``release()`` (or use the handle as a context manager) to
    free the engine variable deterministically; handles that are simply
    dropped are purged by the session on its next engine call.
    """

    def __init__(self, session, name, printed, generation):
        self._session = session
        self.name = name
        self._printed = printed
        self._generation = generation
        self._tag = None
        self._finalizer = weakref.finalize(self, session.queue_release, name, generation)

    @property
    def session(self):
        return self._session

    @property
    def released(self):
        return (not self._finalizer.alive
                or self._session.closed
                or self._generation != self._session.generation)

    def release(self):
        """Free the engine variable. Safe to call more than once."""
        if self._finalizer.detach() is not None:
            self._session.release(self.name, self._generation)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()

    def _check(self):
        if self.released:
            raise GiacError("Cannot use a released or null expression", "memory")

    @property
    def text(self):
        """GIAC's printed form of the value."""
        self._check()
        return self._printed

    @property
    def gen_type(self):
        self._check()
        if self._tag is None:
            self._tag = self._session.type_of(self)
        return self._tag

    def __str__(self):
        if self.released:
            return NULL_DISPLAY
        return self._printed

    def __repr__(self):
        return f"Expr({str(self)!r})"

    def __hash__(self):
        return hash(self.text)

    def __eq__(self, other):
        if not isinstance(other, (Expr, numbers.Number, str)):
            return NotImplemented
        result = self._session.execute(f"({self.text})==({_fmt(other)})")
        return result.strip() == "true"

    def _binary(self, op, other, reflected=False):
        from .matrix import GiacMatrix

        self._check()
        if isinstance(other, GiacMatrix):
            return NotImplemented
        try:
            other_text = _fmt(other)
        except GiacError:
            return NotImplemented
        lhs, rhs = (other_text, self._printed) if reflected else (self._printed, other_text)
        return self._session.evaluate(f"({lhs}){op}({rhs})")

    def __add__(self, other):
        return self._binary("+", other)

    def __radd__(self, other):
        return self._binary("+", other, reflected=True)

    def __sub__(self, other):
        return self._binary("-", other)

    def __rsub__(self, other):
        return self._binary("-", other, reflected=True)

    def __mul__(self, other):
        return self._binary("*", other)

    def __rmul__(self, other):
        return self._binary("*", other, reflected=True)

    def __truediv__(self, other):
        return self._binary("/", other)

    def __rtruediv__(self, other):
        return self._binary("/", other, reflected=True)

    def __pow__(self, other):
        return self._binary("^", other)

    def __rpow__(self, other):
        return self._binary("^", other, reflected=True)

    def __neg__(self):
        return self._session.evaluate(f"-({self.text})")

    def __pos__(self):
        return self

    def __bool__(self):
        text = self.text
        if text in ("true", "false"):
            return text == "true"
        raise TypeError(f"Truth value of GIAC value {text!r} is ambiguous; "
                        f"compare it or use to_bool()")

    def eq(self, other):
        """The GIAC equation ``self=other``, as used by solve and desolve."""
        self._check()
        return self._session.evaluate(f"({self._printed})=({_fmt(other)})")

    # vectors

    def __len__(self):
        if self.gen_type != GenType.VECT:
            raise TypeError(f"GIAC value of type {self.gen_type.name} has no length")
        return int(self._session.execute(f"size({self.name})"))

    def __getitem__(self, index):
        n = len(self)
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(n))]
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError(f"index {index} out of range for vector of length {n}")
        return self._session.evaluate(f"{self.name}[{index}]")

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    # explicit conversions

    def __int__(self):
        from .convert import to_int
        return to_int(self)

    def __float__(self):
        from .convert import to_float
        return to_float(self)

    def __complex__(self):
        from .convert import to_complex
        return to_complex(self)

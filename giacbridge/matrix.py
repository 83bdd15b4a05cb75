"""Matrices backed by GIAC."""

from .errors import GiacError
from .formatting import to_giac_string
from .gentypes import GenType
from .session import default_session
from .symbols import indexed_names


class GiacMatrix:
    """A rectangular matrix stored in GIAC.

    Indexing is 0-based, like Python lists: ``m[0, 1]`` is the first row,
    second column.
    """

    def __init__(self, rows, session=None):
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise ValueError("A matrix needs at least one row and one column")
        ncols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != ncols:
                raise ValueError(
                    f"All rows must have the same length: row 0 has {ncols}, row {i} has {len(row)}"
                )
        session = session or default_session()
        self.expr = session.evaluate(to_giac_string(rows))
        self.nrows = len(rows)
        self.ncols = ncols

    @classmethod
    def _wrap(cls, expr, nrows, ncols):
        m = cls.__new__(cls)
        m.expr = expr
        m.nrows = nrows
        m.ncols = ncols
        return m

    @classmethod
    def from_expr(cls, expr):
        """View a GIAC vector of equal-length vectors as a matrix."""
        if expr.gen_type != GenType.VECT:
            raise GiacError(f"Expected a matrix, got {expr.gen_type.name}", "type")
        rows = list(expr)
        if not rows or any(row.gen_type != GenType.VECT for row in rows):
            raise GiacError(f"Not a matrix: {expr.text}", "type")
        widths = {len(row) for row in rows}
        for row in rows:
            row.release()
        if len(widths) != 1 or 0 in widths:
            raise GiacError(f"Not a rectangular matrix: {expr.text}", "type")
        return cls._wrap(expr, len(rows), widths.pop())

    @classmethod
    def symbolic(cls, base, *dims, session=None):
        """Matrix of fresh symbols: ``symbolic("m", 2, 2)`` gives m11, m12, m21, m22.

        When a dimension exceeds 9 the indices are separated (``m_1_10``).
        A single dimension gives a column vector v1..vn.
        """
        if len(dims) not in (1, 2):
            raise ValueError("Symbolic matrices take one or two dimensions")
        if any(d <= 0 for d in dims):
            raise ValueError(f"Matrix dimensions must be positive, got {dims}")
        names = indexed_names(base, *dims)
        ncols = dims[1] if len(dims) == 2 else 1
        rows = [names[k:k + ncols] for k in range(0, len(names), ncols)]
        return cls(rows, session=session)

    @property
    def shape(self):
        return (self.nrows, self.ncols)

    @property
    def session(self):
        return self.expr.session

    def release(self):
        self.expr.release()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()

    def __getitem__(self, index):
        i, j = index
        if i < 0:
            i += self.nrows
        if j < 0:
            j += self.ncols
        if not (0 <= i < self.nrows and 0 <= j < self.ncols):
            raise IndexError(f"index {index} out of range for {self.nrows}x{self.ncols} matrix")
        return self.session.evaluate(f"{self.expr.name}[{i}][{j}]")

    def _require_square(self, operation):
        if self.nrows != self.ncols:
            raise ValueError(f"{operation} requires a square matrix, got {self.nrows}x{self.ncols}")

    def det(self):
        self._require_square("Determinant")
        return self.session.evaluate(f"det({self.expr.name})")

    def inv(self):
        self._require_square("Inverse")
        return self._wrap(self.session.evaluate(f"inv({self.expr.name})"), self.nrows, self.ncols)

    def trace(self):
        self._require_square("Trace")
        return self.session.evaluate(f"trace({self.expr.name})")

    def transpose(self):
        return self._wrap(self.session.evaluate(f"tran({self.expr.name})"), self.ncols, self.nrows)

    @property
    def T(self):
        return self.transpose()

    def _elementwise(self, op, other):
        if not isinstance(other, GiacMatrix):
            return NotImplemented
        if self.shape != other.shape:
            raise ValueError(f"Shape mismatch: {self.nrows}x{self.ncols} vs {other.nrows}x{other.ncols}")
        result = self.session.evaluate(f"({self.expr.name}){op}({other.expr.text})")
        return self._wrap(result, self.nrows, self.ncols)

    def __add__(self, other):
        return self._elementwise("+", other)

    def __sub__(self, other):
        return self._elementwise("-", other)

    def __matmul__(self, other):
        if not isinstance(other, GiacMatrix):
            return NotImplemented
        if self.ncols != other.nrows:
            raise ValueError(
                f"Cannot multiply {self.nrows}x{self.ncols} by {other.nrows}x{other.ncols}"
            )
        result = self.session.evaluate(f"({self.expr.name})*({other.expr.text})")
        return self._wrap(result, self.nrows, other.ncols)

    def __mul__(self, other):
        if isinstance(other, GiacMatrix):
            return self.__matmul__(other)
        result = self.session.evaluate(f"({self.expr.name})*({to_giac_string(other)})")
        return self._wrap(result, self.nrows, self.ncols)

    def __rmul__(self, other):
        result = self.session.evaluate(f"({to_giac_string(other)})*({self.expr.name})")
        return self._wrap(result, self.nrows, self.ncols)

    def __neg__(self):
        return self._wrap(self.session.evaluate(f"-({self.expr.name})"), self.nrows, self.ncols)

    def tolist(self):
        from .convert import to_python
        return to_python(self.expr)

    def __str__(self):
        return str(self.expr)

    def __repr__(self):
        return f"GiacMatrix({self.nrows}x{self.ncols})"

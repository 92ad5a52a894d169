"""
Canonical storage for symmetric sparse matrices.

The matrix is assembled once from an unordered list of ``(row, col, value)``
contributions and is read-only afterwards.
"""

import operator
import torch
from torch import Tensor
from typing import Iterable, List, NamedTuple, Tuple, Union

from .check import check_coo, ShapeException
from .sort import lexsort
from .vector import DEFAULT_DTYPE


class Entry(NamedTuple):
    """A single contribution to the matrix, ``(row, col)`` and ``(col, row)`` are the same coefficient."""
    row: int
    col: int
    value: float


EntryLike = Union[Entry, Tuple[int, int, float]]


def _index(name: str, i) -> int:
    try:
        return operator.index(i)
    except TypeError:
        raise ShapeException(name, type(i).__name__, "integer indices") from None


class SymmetricSparseMatrix:
    """
    Symmetric sparse matrix stored as one sorted, duplicate-free row per index.

    Construction policy
    -------------------
    1. every entry is brought to its canonical ``(min(r, c), max(r, c), v)`` form
    2. every off-diagonal canonical entry gets its mirror ``(max, min, v)``
    3. the combined list is stably sorted by ``(row, col)``
    4. when a coordinate occurs more than once, the first occurrence wins
    5. the surviving entries are bucketed per row

    The dimension is ``1 + max(row, col)`` over all entries, an empty entry
    list gives a ``0 x 0`` matrix.

    Parameters
    ----------
    row : torch.Tensor
        [nnz] canonical row indices, sorted by (row, col) without duplicates
    col : torch.Tensor
        [nnz] canonical column indices
    val : torch.Tensor
        [nnz] values
    n : int
        dimension of the square matrix

    Use :meth:`from_entries` or :meth:`from_coo` instead of calling the
    constructor directly.

    Examples
    --------
    >>> from torch_spcg import SymmetricSparseMatrix, Entry
    >>> A = SymmetricSparseMatrix.from_entries([
    ...     Entry(0, 0, 1.0), Entry(0, 1, 2.0), Entry(1, 1, 5.0),
    ... ])
    >>> A.indices(0), A.values(1)
    (tensor([0, 1]), tensor([2., 5.], dtype=torch.float64))
    """

    def __init__(self, row: Tensor, col: Tensor, val: Tensor, n: int):
        self._row = row
        self._col = col
        self._val = val
        self._n = n

        counts = torch.bincount(row, minlength=n) if n > 0 else torch.zeros(0, dtype=torch.long)
        self._rowptr = torch.zeros(n + 1, dtype=torch.long)
        self._rowptr[1:] = torch.cumsum(counts, 0)
        sizes = counts.tolist()
        self._indices: List[Tensor] = list(torch.split(col, sizes)) if n > 0 else []
        self._values: List[Tensor] = list(torch.split(val, sizes)) if n > 0 else []

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_entries(cls, entries: Iterable[EntryLike]) -> "SymmetricSparseMatrix":
        """
        Build the canonical matrix from ``(row, col, value)`` entries.

        Parameters
        ----------
        entries : Iterable[Entry]
            Entries or plain 3-tuples. Indices must be non-negative integers.

        Returns
        -------
        SymmetricSparseMatrix
        """
        entries = [Entry(_index("row", e[0]), _index("col", e[1]), float(e[2])) for e in entries]
        row = torch.tensor([e.row for e in entries], dtype=torch.long)
        col = torch.tensor([e.col for e in entries], dtype=torch.long)
        val = torch.tensor([e.value for e in entries], dtype=DEFAULT_DTYPE)
        return cls.from_coo(row, col, val)

    @classmethod
    def from_coo(cls, row: Tensor, col: Tensor, val: Tensor) -> "SymmetricSparseMatrix":
        """
        Build the canonical matrix from a COO triple.

        Parameters
        ----------
        row : torch.Tensor
            [nnz] row indices
        col : torch.Tensor
            [nnz] column indices
        val : torch.Tensor
            [nnz] values

        Returns
        -------
        SymmetricSparseMatrix
        """
        row = torch.as_tensor(row)
        col = torch.as_tensor(col)
        val = torch.as_tensor(val)
        check_coo(val, row, col)
        row = row.to(device="cpu", dtype=torch.long)
        col = col.to(device="cpu", dtype=torch.long)
        val = val.detach().to(device="cpu", dtype=DEFAULT_DTYPE)

        lower = torch.minimum(row, col)
        upper = torch.maximum(row, col)
        off_diag = lower != upper

        # canonical entries first, then their mirrors, both in input order
        row = torch.cat([lower, upper[off_diag]])
        col = torch.cat([upper, lower[off_diag]])
        val = torch.cat([val, val[off_diag]])

        perm = lexsort([col, row])
        row, col, val = row[perm], col[perm], val[perm]

        if row.numel() > 0:
            keep = torch.ones(row.numel(), dtype=torch.bool)
            keep[1:] = (row[1:] != row[:-1]) | (col[1:] != col[:-1])
            row, col, val = row[keep], col[keep], val[keep]

        n = int(row.max()) + 1 if row.numel() > 0 else 0
        return cls(row, col, val, n)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def n(self) -> int:
        return self._n

    @property
    def shape(self) -> Tuple[int, int]:
        return (self._n, self._n)

    @property
    def nnz(self) -> int:
        return self._val.numel()

    @property
    def row(self) -> Tensor:
        return self._row

    @property
    def col(self) -> Tensor:
        return self._col

    @property
    def val(self) -> Tensor:
        return self._val

    @property
    def rowptr(self) -> Tensor:
        return self._rowptr

    @property
    def dtype(self) -> torch.dtype:
        return self._val.dtype

    def __len__(self) -> int:
        return self._n

    def indices(self, i: int) -> Tensor:
        """Column indices of row ``i``, strictly increasing."""
        return self._indices[i]

    def values(self, i: int) -> Tensor:
        """Values of row ``i``, parallel to :meth:`indices`."""
        return self._values[i]

    def get(self, i: int, j: int) -> float:
        """Value stored at ``(i, j)``, 0.0 when the coordinate is absent."""
        if not (0 <= i < self._n and 0 <= j < self._n):
            raise IndexError(f"({i}, {j}) out of range for shape {self.shape}")
        cols = self._indices[i]
        pos = int(torch.searchsorted(cols, j))
        if pos < cols.numel() and int(cols[pos]) == j:
            return float(self._values[i][pos])
        return 0.0

    def diagonal(self) -> Tensor:
        """[n] diagonal coefficients, zero where ``(i, i)`` is not stored."""
        diag = torch.zeros(self._n, dtype=self.dtype)
        mask = self._row == self._col
        diag[self._row[mask]] = self._val[mask]
        return diag

    # =========================================================================
    # Checks and conversion
    # =========================================================================

    def is_valid(self) -> bool:
        """True when every stored value is finite."""
        return bool(torch.isfinite(self._val).all())

    def is_symmetric(self) -> bool:
        """Check that ``(j, i, v)`` is stored for every stored ``(i, j, v)``."""
        perm = lexsort([self._row, self._col])
        return bool(
            torch.equal(self._row[perm], self._col)
            and torch.equal(self._col[perm], self._row)
            and torch.equal(self._val[perm], self._val)
        )

    def to_dense(self) -> Tensor:
        dense = torch.zeros(self._n, self._n, dtype=self.dtype)
        dense[self._row, self._col] = self._val
        return dense

    def __repr__(self) -> str:
        return f"SymmetricSparseMatrix(shape={self.shape}, nnz={self.nnz}, dtype={self.dtype})"


def construct_matrix(entries: Iterable[EntryLike]) -> SymmetricSparseMatrix:
    """Build a :class:`SymmetricSparseMatrix` from ``(row, col, value)`` entries."""
    return SymmetricSparseMatrix.from_entries(entries)

import torch
from torch import Tensor
from typing import Tuple

from .check import check_csr, check_finite, check_vector
from .symmetric import SymmetricSparseMatrix


class CompressedRowView:
    """
    Read-only compressed row (CSR) layout of a :class:`SymmetricSparseMatrix`.

    Only used for matrix-vector products. Row ``i`` occupies
    ``val[rowptr[i]:rowptr[i+1]]`` with the column order of the source row
    preserved, products accumulate within a row in increasing column order.

    Parameters
    ----------
    val : torch.Tensor
        [nnz] values
    rowptr : torch.Tensor
        [n+1] row offsets
    col : torch.Tensor
        [nnz] column indices
    n : int
        dimension of the square matrix
    """

    def __init__(self, val: Tensor, rowptr: Tensor, col: Tensor, n: int):
        check_csr(val, rowptr, col, (n, n))
        self._val = val
        self._rowptr = rowptr
        self._col = col
        self._n = n
        # expanded row index of every stored value, the target of index_add_
        self._row = torch.repeat_interleave(
            torch.arange(n, dtype=rowptr.dtype),
            rowptr[1:] - rowptr[:-1]
        )
        self._valid = bool(torch.isfinite(val).all())

    @classmethod
    def from_matrix(cls, matrix: SymmetricSparseMatrix) -> "CompressedRowView":
        """
        Flatten the rows of ``matrix`` into one contiguous value/column array.

        The canonical storage already keeps its rows back to back in
        increasing row order, so the flat arrays are copied as they are.
        """
        return cls(matrix.val.clone(), matrix.rowptr.clone(), matrix.col.clone(), matrix.n)

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
    def val(self) -> Tensor:
        return self._val

    @property
    def rowptr(self) -> Tensor:
        return self._rowptr

    @property
    def col(self) -> Tensor:
        return self._col

    @property
    def row(self) -> Tensor:
        return self._row

    @property
    def dtype(self) -> torch.dtype:
        return self._val.dtype

    def dimension(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    def row_slice(self, i: int) -> slice:
        return slice(int(self._rowptr[i]), int(self._rowptr[i + 1]))

    def diagonal(self) -> Tensor:
        """[n] diagonal coefficients, zero where ``(i, i)`` is not stored."""
        diag = torch.zeros(self._n, dtype=self.dtype)
        mask = self._row == self._col
        diag[self._row[mask]] = self._val[mask]
        return diag

    def max_abs(self) -> float:
        """Largest absolute stored coefficient, 0.0 for an empty matrix."""
        if self.nnz == 0:
            return 0.0
        return self._val.abs().max().item()

    def is_valid(self) -> bool:
        """True when every stored value is finite."""
        return self._valid

    def check_valid(self):
        if not self._valid:
            check_finite("matrix values", self._val)

    def matvec(self, x: Tensor) -> Tensor:
        """
        Sparse matrix-vector product ``y = A @ x``

        Parameters
        ----------
        x : torch.Tensor
            [n] dense vector

        Returns
        -------
        torch.Tensor
            [n]

        Raises
        ------
        DimensionMismatchError
            ``x`` is not a vector of length n
        NonFiniteValueError
            a stored coefficient is nan or inf
        """
        check_vector("x", x, self._n)
        self.check_valid()
        products = self._val * x.to(self.dtype)[self._col]
        y = torch.zeros(self._n, dtype=self.dtype)
        # index_add_ on CPU walks the stored entries in order, so every row
        # is summed left to right by increasing column
        y.index_add_(0, self._row, products)
        return y

    def __matmul__(self, x: Tensor) -> Tensor:
        return self.matvec(x)

    def __repr__(self) -> str:
        return f"CompressedRowView(shape={self.shape}, nnz={self.nnz}, dtype={self.dtype})"


def build_compressed_view(matrix: SymmetricSparseMatrix) -> CompressedRowView:
    """Build the :class:`CompressedRowView` used by the solver."""
    return CompressedRowView.from_matrix(matrix)


def apply(view: CompressedRowView, x: Tensor) -> Tensor:
    """Dimension-checked matrix-vector product ``view @ x``."""
    return view.matvec(x)

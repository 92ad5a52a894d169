"""
Text and SciPy export of sparse matrices, for cross-checking results with an
external numerical tool. Not used by the solver itself.

- ``to_octave``: ``sparse(rows, cols, vals, n, n)`` expression (1-based) that
  Octave/MATLAB evaluate to the same matrix
- ``vector_to_octave``: column vector literal
- ``to_scipy_csr``: ``scipy.sparse.csr_matrix`` with the same triplets
"""

import torch
from typing import List, Tuple, Union

from .check import check_finite
from .csr import CompressedRowView
from .symmetric import SymmetricSparseMatrix

try:
    import scipy.sparse as sp
    SCIPY_AVAILABLE = True
except ImportError:
    SCIPY_AVAILABLE = False

MatrixLike = Union[SymmetricSparseMatrix, CompressedRowView]


def is_scipy_available() -> bool:
    """Check if SciPy is available"""
    return SCIPY_AVAILABLE


def to_triplets(A: MatrixLike) -> List[Tuple[int, int, float]]:
    """Stored ``(row, col, value)`` triplets in row-major order, 0-based."""
    return list(zip(A.row.tolist(), A.col.tolist(), A.val.tolist()))


def to_octave(A: MatrixLike) -> str:
    """
    Render ``A`` as an Octave ``sparse`` constructor call.

    >>> print(to_octave(SymmetricSparseMatrix.from_entries([(0, 1, 2.0)])))
    sparse([1, 2],...
           [2, 1],...
           [2.0, 2.0], 2, 2)
    """
    check_finite("matrix values", A.val)
    rows = [i + 1 for i in A.row.tolist()]
    cols = [j + 1 for j in A.col.tolist()]
    vals = A.val.tolist()
    n = A.n
    return (f"sparse({rows},...\n"
            f"       {cols},...\n"
            f"       {vals}, {n}, {n})")


def vector_to_octave(x: torch.Tensor) -> str:
    """Render ``x`` as an Octave column vector literal ``[x0; x1; ...]``."""
    return "[" + "; ".join(repr(v) for v in x.tolist()) + "]"


def to_scipy_csr(A: MatrixLike) -> "sp.csr_matrix":
    """Convert to a SciPy CSR matrix with identical stored entries."""
    if not SCIPY_AVAILABLE:
        raise ImportError("SciPy is required to export to scipy.sparse")
    return sp.csr_matrix(
        (A.val.numpy(), A.col.numpy(), A.rowptr.numpy()),
        shape=A.shape,
    )
